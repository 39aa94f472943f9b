"""API tests for booking and the appointment lifecycle."""

from typing import Any

import pytest
import pytest_asyncio
from httpx import AsyncClient

from tests.conftest import patient_payload

MONDAY_11 = "2024-06-03T11:00:00"


def booking(doctor: dict, patient: dict, **overrides: Any) -> dict[str, Any]:
    payload = {
        "doctor_id": doctor["id"],
        "patient_id": patient["id"],
        "patient_name": "Jane Doe",
        "patient_email": patient["email"],
        "symptoms": "Persistent cough",
        "preferred_time": MONDAY_11,
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def appointment(client: AsyncClient, doctor, patient) -> dict[str, Any]:
    response = await client.post("/appointments", json=booking(doctor, patient))
    assert response.status_code == 201, response.text
    return response.json()


async def change_status(client: AsyncClient, appointment: dict, **body: Any):
    return await client.patch(
        f"/appointments/{appointment['appointment_id']}/status", json=body
    )


class TestBook:
    """POST /appointments"""

    @pytest.mark.asyncio
    async def test_creates_pending_with_fee_snapshot(
        self, client: AsyncClient, doctor, patient, published_events
    ):
        response = await client.post("/appointments", json=booking(doctor, patient))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["type"] == "consultation"
        assert body["fee"] == "150.00"
        assert body["version"] == 1
        assert body["actual_time"] is None
        assert published_events[-1].name == "AppointmentRequested"

    @pytest.mark.asyncio
    async def test_fee_change_does_not_touch_booked_fee(
        self, client: AsyncClient, doctor, appointment
    ):
        await client.patch(f"/doctors/{doctor['id']}", json={"consultation_fee": "200"})

        response = await client.get(f"/appointments/{appointment['appointment_id']}")

        assert response.json()["fee"] == "150.00"

    @pytest.mark.asyncio
    async def test_visitor_books_without_account(self, client: AsyncClient, doctor):
        response = await client.post(
            "/appointments",
            json={
                "doctor_id": doctor["id"],
                "patient_name": "Walk In",
                "patient_email": "walk.in@bookmd.org",
                "preferred_time": MONDAY_11,
                "type": "follow-up",
            },
        )

        assert response.status_code == 201
        assert response.json()["patient_id"] is None
        assert response.json()["type"] == "follow-up"

    @pytest.mark.asyncio
    async def test_offset_is_dropped_from_slot(
        self, client: AsyncClient, doctor, patient
    ):
        response = await client.post(
            "/appointments",
            json=booking(doctor, patient, preferred_time="2024-06-03T11:00:00+09:00"),
        )

        assert response.status_code == 201, response.text
        assert response.json()["preferred_time"] == MONDAY_11

        stored = await client.get(f"/appointments/{response.json()['appointment_id']}")
        assert stored.json()["preferred_time"] == MONDAY_11

    @pytest.mark.asyncio
    async def test_unknown_doctor(self, client: AsyncClient, doctor, patient):
        response = await client.post(
            "/appointments", json=booking(doctor, patient, doctor_id="missing")
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_patient(self, client: AsyncClient, doctor, patient):
        response = await client.post(
            "/appointments", json=booking(doctor, patient, patient_id="missing")
        )

        assert response.status_code == 404
        assert "Patient" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_outside_availability_is_rejected(
        self, client: AsyncClient, doctor, patient, published_events
    ):
        before = len(published_events)

        response = await client.post(
            "/appointments",
            json=booking(doctor, patient, preferred_time="2024-06-02T11:00:00"),
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "SLOT_UNAVAILABLE"
        assert "sunday" in body["message"]
        assert len(published_events) == before

    @pytest.mark.asyncio
    async def test_same_slot_is_double_booking(
        self, client: AsyncClient, doctor, patient, appointment
    ):
        response = await client.post(
            "/appointments",
            json=booking(doctor, patient, patient_email="other@bookmd.org"),
        )

        assert response.status_code == 409
        assert response.json()["error"] == "DOUBLE_BOOKING"

    @pytest.mark.asyncio
    async def test_cancelled_slot_can_be_rebooked(
        self, client: AsyncClient, doctor, patient, appointment
    ):
        await change_status(
            client, appointment, status="cancelled", actor_id=patient["id"]
        )

        response = await client.post("/appointments", json=booking(doctor, patient))

        assert response.status_code == 201


class TestIdempotency:
    """Idempotency-Key header on POST /appointments"""

    @pytest.mark.asyncio
    async def test_replay_returns_original(
        self, client: AsyncClient, doctor, patient, published_events
    ):
        headers = {"Idempotency-Key": "booking-7f3a"}
        first = await client.post(
            "/appointments", json=booking(doctor, patient), headers=headers
        )
        requested = len(published_events)

        second = await client.post(
            "/appointments", json=booking(doctor, patient), headers=headers
        )

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["appointment_id"] == first.json()["appointment_id"]
        assert len(published_events) == requested

    @pytest.mark.asyncio
    async def test_key_reused_for_other_booking(
        self, client: AsyncClient, doctor, patient
    ):
        headers = {"Idempotency-Key": "booking-7f3a"}
        await client.post("/appointments", json=booking(doctor, patient), headers=headers)

        response = await client.post(
            "/appointments",
            json=booking(doctor, patient, patient_email="other@bookmd.org"),
            headers=headers,
        )

        assert response.status_code == 409
        assert response.json()["error"] == "IDEMPOTENCY_KEY_REUSED"


class TestStatusChanges:
    """PATCH /appointments/{id}/status"""

    @pytest.mark.asyncio
    async def test_doctor_approves_then_completes(
        self, client: AsyncClient, doctor, appointment
    ):
        approved = await change_status(
            client, appointment, status="approved", actor_id=doctor["id"]
        )

        assert approved.status_code == 200
        assert approved.json()["status"] == "approved"
        assert approved.json()["actual_time"] == MONDAY_11
        assert approved.json()["version"] == 2

        completed = await change_status(
            client,
            appointment,
            status="completed",
            actor_id=doctor["id"],
            notes="Prescribed rest",
        )

        assert completed.json()["status"] == "completed"
        assert completed.json()["notes"] == "Prescribed rest"

        profile = await client.get(f"/doctors/{doctor['id']}")
        assert profile.json()["total_patients"] == 1

    @pytest.mark.asyncio
    async def test_returning_patient_counts_once(
        self, client: AsyncClient, doctor, patient
    ):
        for slot in (MONDAY_11, "2024-06-10T11:00:00"):
            booked = await client.post(
                "/appointments", json=booking(doctor, patient, preferred_time=slot)
            )
            assert booked.status_code == 201, booked.text
            for status in ("approved", "completed"):
                response = await change_status(
                    client, booked.json(), status=status, actor_id=doctor["id"]
                )
                assert response.status_code == 200, response.text

        profile = await client.get(f"/doctors/{doctor['id']}")
        assert profile.json()["total_patients"] == 1

    @pytest.mark.asyncio
    async def test_approve_with_rescheduled_time(
        self, client: AsyncClient, doctor, appointment
    ):
        response = await change_status(
            client,
            appointment,
            status="approved",
            actor_id=doctor["id"],
            actual_time="2024-06-03T14:00:00",
        )

        assert response.json()["actual_time"] == "2024-06-03T14:00:00"

    @pytest.mark.asyncio
    async def test_pending_cannot_complete(self, client: AsyncClient, doctor, appointment):
        response = await change_status(
            client, appointment, status="completed", actor_id=doctor["id"]
        )

        assert response.status_code == 409
        assert response.json()["error"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_terminal_status_is_final(
        self, client: AsyncClient, doctor, appointment
    ):
        await change_status(client, appointment, status="declined", actor_id=doctor["id"])

        response = await change_status(
            client, appointment, status="approved", actor_id=doctor["id"]
        )

        assert response.status_code == 409
        assert response.json()["error"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_patient_cannot_approve(self, client: AsyncClient, patient, appointment):
        response = await change_status(
            client, appointment, status="approved", actor_id=patient["id"]
        )

        assert response.status_code == 403
        assert response.json()["error"] == "PERMISSION_DENIED"

    @pytest.mark.asyncio
    async def test_other_patient_cannot_cancel(self, client: AsyncClient, appointment):
        other = await client.post(
            "/users", json=patient_payload(email="john.roe@bookmd.org")
        )

        response = await change_status(
            client, appointment, status="cancelled", actor_id=other.json()["id"]
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_front_desk_cancels(self, client: AsyncClient, appointment):
        desk = await client.post(
            "/users",
            json=patient_payload(
                email="desk@bookmd.org", role="front_desk_administrator"
            ),
        )

        response = await change_status(
            client, appointment, status="cancelled", actor_id=desk.json()["id"]
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    @pytest.mark.asyncio
    async def test_stale_expected_version(
        self, client: AsyncClient, doctor, patient, appointment
    ):
        await change_status(
            client,
            appointment,
            status="approved",
            actor_id=doctor["id"],
            expected_version=1,
        )

        response = await change_status(
            client,
            appointment,
            status="cancelled",
            actor_id=patient["id"],
            expected_version=1,
        )

        assert response.status_code == 409
        assert response.json()["error"] == "STALE_VERSION"

    @pytest.mark.asyncio
    async def test_status_event_published(
        self, client: AsyncClient, doctor, appointment, published_events
    ):
        await change_status(client, appointment, status="approved", actor_id=doctor["id"])

        event = published_events[-1]
        assert event.name == "AppointmentStatusChanged"
        assert (event.previous_status, event.new_status) == ("pending", "approved")
        assert event.actor_id == doctor["id"]


class TestListAppointments:
    """GET /appointments"""

    @pytest.mark.asyncio
    async def test_doctor_and_patient_see_own(
        self, client: AsyncClient, doctor, patient, appointment
    ):
        for user, role in ((doctor, "doctor"), (patient, "patient")):
            response = await client.get(
                "/appointments", params={"user_id": user["id"], "role": role}
            )

            assert response.status_code == 200
            assert [a["appointment_id"] for a in response.json()] == [
                appointment["appointment_id"]
            ]

    @pytest.mark.asyncio
    async def test_role_must_match_user(self, client: AsyncClient, patient, appointment):
        response = await client.get(
            "/appointments", params={"user_id": patient["id"], "role": "doctor"}
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_status_filter(self, client: AsyncClient, doctor, appointment):
        response = await client.get(
            "/appointments",
            params={"user_id": doctor["id"], "role": "doctor", "status": "approved"},
        )

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_front_desk_sees_all(self, client: AsyncClient, doctor, appointment):
        await client.post(
            "/appointments",
            json={
                "doctor_id": doctor["id"],
                "patient_name": "Walk In",
                "patient_email": "walk.in@bookmd.org",
                "preferred_time": "2024-06-03T15:00:00",
            },
        )
        desk = await client.post(
            "/users",
            json=patient_payload(
                email="desk@bookmd.org", role="front_desk_administrator"
            ),
        )

        response = await client.get(
            "/appointments",
            params={"user_id": desk.json()["id"], "role": "front_desk_administrator"},
        )

        assert [a["preferred_time"] for a in response.json()] == [
            MONDAY_11,
            "2024-06-03T15:00:00",
        ]

    @pytest.mark.asyncio
    async def test_tech_support_cannot_list(self, client: AsyncClient):
        support = await client.post(
            "/users",
            json=patient_payload(email="it@bookmd.org", role="tech_support"),
        )

        response = await client.get(
            "/appointments",
            params={"user_id": support.json()["id"], "role": "tech_support"},
        )

        assert response.status_code == 403
