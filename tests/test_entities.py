"""Tests for entity construction rules that need no database."""

from datetime import datetime
from decimal import Decimal

import pytest

from app.db.models import (
    Appointment,
    AppointmentStatus,
    Doctor,
    MedicalSpecialty,
    SpecialtyCategory,
    User,
    UserRole,
    specialty_category,
    specialty_code,
)
from app.domain.availability import Availability, default_weekly_schedule
from app.domain.events import DoctorRegistered, UserRegistered


def make_doctor(**overrides):
    fields = dict(
        email="grey@bookmd.org",
        first_name="Meredith",
        last_name="Grey",
        specialization=MedicalSpecialty.GeneralSurgery,
        consultation_fee=Decimal("150"),
        availability=Availability(True, default_weekly_schedule()),
    )
    fields.update(overrides)
    return Doctor.register(**fields)


class TestDoctor:
    """Doctor registration and profile updates."""

    def test_register_tags_user_with_doctor_role(self):
        doctor, events = make_doctor()

        assert doctor.user.role == UserRole.DOCTOR
        assert doctor.user.partition_key == "doctor"
        assert doctor.doctor_id == doctor.user.user_id
        assert doctor.display_name == "Dr. Meredith Grey"
        assert [type(e) for e in events] == [UserRegistered, DoctorRegistered]

    def test_specialization_is_required(self):
        with pytest.raises(ValueError, match="specialization"):
            make_doctor(specialization=None)

    def test_unknown_specialization_is_rejected(self):
        with pytest.raises(ValueError):
            make_doctor(specialization="Astrology")

    def test_negative_fee_is_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            make_doctor(consultation_fee=Decimal("-1"))

    def test_fee_is_stored_to_the_cent(self):
        doctor, _ = make_doctor(consultation_fee=Decimal("99.999"))

        assert doctor.consultation_fee == Decimal("100.00")

    def test_update_profile_reports_changed_fields(self):
        doctor, _ = make_doctor()

        updated = doctor.update_profile(
            {"consultation_fee": Decimal("150.00"), "years_of_experience": 4}
        )

        assert updated.changed_fields == ("years_of_experience",)
        assert doctor.update_profile({"years_of_experience": 4}) is None


class TestUser:
    """Role tagging on the users table."""

    def test_role_cannot_change(self):
        user, _ = User.register(
            email="jane.doe@bookmd.org",
            first_name="Jane",
            last_name="Doe",
            role=UserRole.PATIENT,
        )

        with pytest.raises(ValueError, match="role"):
            user.role = UserRole.DOCTOR

    def test_partition_key_follows_role(self):
        user, registered = User.register(
            email="desk@bookmd.org",
            first_name="Front",
            last_name="Desk",
            role=UserRole.FRONT_DESK_ADMINISTRATOR,
        )

        assert user.partition_key == "front_desk_administrator"
        assert registered.role == "front_desk_administrator"


class TestAppointment:
    """Booking snapshot and transitions on the entity."""

    def book(self, doctor):
        return Appointment.book(
            doctor=doctor,
            patient_name="Jane Doe",
            patient_email="jane.doe@bookmd.org",
            preferred_time=datetime(2024, 6, 3, 11, 0),
        )

    def test_fee_snapshot_survives_fee_change(self):
        doctor, _ = make_doctor()
        appointment, requested = self.book(doctor)

        doctor.update_profile({"consultation_fee": Decimal("200")})

        assert appointment.fee == Decimal("150.00")
        assert requested.fee == Decimal("150.00")
        assert appointment.status == AppointmentStatus.PENDING

    def test_approval_defaults_actual_time(self):
        doctor, _ = make_doctor()
        appointment, _ = self.book(doctor)

        changed = appointment.transition_to(
            AppointmentStatus.APPROVED, actor_id=doctor.doctor_id, actor_role="doctor"
        )

        assert appointment.actual_time == datetime(2024, 6, 3, 11, 0)
        assert (changed.previous_status, changed.new_status) == ("pending", "approved")


class TestSpecialties:
    """Specialty codes group into categories by hundreds."""

    @pytest.mark.parametrize(
        "specialty,code,category",
        [
            (MedicalSpecialty.FamilyMedicine, 100, SpecialtyCategory.PRIMARY_CARE),
            (MedicalSpecialty.GeneralSurgery, 200, SpecialtyCategory.SURGICAL),
            (MedicalSpecialty.Cardiology, 300, SpecialtyCategory.INTERNAL_MEDICINE),
            (MedicalSpecialty.Dentistry, 1200, SpecialtyCategory.DENTISTRY),
        ],
    )
    def test_code_and_category(self, specialty, code, category):
        assert specialty_code(specialty) == code
        assert specialty_category(specialty) == category

    def test_value_equals_name(self):
        assert MedicalSpecialty("Cardiology") is MedicalSpecialty.Cardiology
