# app/db/models/user_table.py
from __future__ import annotations
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from sqlalchemy import String, Date, Enum as sqlalchemy_Enum
from sqlalchemy.orm import Mapped, mapped_column, validates
from app.domain.events import UserRegistered, UserProfileUpdated
from .db_base_model import DbBaseModel, utc_now


class UserRole(str, Enum):
    VISITOR = "visitor"
    PATIENT = "patient"
    DOCTOR = "doctor"
    FRONT_DESK_ADMINISTRATOR = "front_desk_administrator"
    TECH_SUPPORT = "tech_support"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum values ('doctor') instead of member names ('DOCTOR')."""
    return [member.value for member in enum_cls]


PROFILE_FIELDS = ("email", "first_name", "last_name", "phone", "date_of_birth", "address")


class User(DbBaseModel):
    """
    Common identity record for every role.

    The role column is the tag of the variant; role-specific payload lives
    in its own table keyed by user_id (see Doctor).
    """

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[UserRole] = mapped_column(
        sqlalchemy_Enum(
            UserRole,
            name="user_role",
            native_enum=False,
            length=40,
            values_callable=enum_values,
        ),
        nullable=False,
    )

    # Users are sharded by role; role-scoped listing is the dominant query
    partition_key: Mapped[str] = mapped_column(String(40), nullable=False, index=True)

    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    @validates("role")
    def _validate_role(self, key: str, value: UserRole) -> UserRole:
        if self.role is not None and self.role != value:
            raise ValueError("A user's role cannot change after registration")
        self.partition_key = UserRole(value).value
        return value

    @classmethod
    def register(
        cls,
        *,
        email: str,
        first_name: str,
        last_name: str,
        role: UserRole,
        phone: Optional[str] = None,
        date_of_birth: Optional[date] = None,
        address: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> tuple["User", UserRegistered]:
        now = at or utc_now()
        user = cls(
            user_id=cls.generate_uuid(),
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            phone=phone,
            date_of_birth=date_of_birth,
            address=address,
            created_at=now,
            updated_at=now,
        )
        return user, UserRegistered(
            user_id=user.user_id,
            email=user.email,
            role=role.value,
            occurred_at=now,
        )

    @property
    def display_name(self) -> str:
        if self.role == UserRole.DOCTOR:
            return f"Dr. {self.first_name} {self.last_name}"
        return f"{self.first_name} {self.last_name}"

    def update_profile(
        self, changes: dict[str, Any], at: Optional[datetime] = None
    ) -> Optional[UserProfileUpdated]:
        """
        Apply the given profile fields. Returns None when nothing changed.
        """
        changed: list[str] = []
        for field in PROFILE_FIELDS:
            if field in changes and getattr(self, field) != changes[field]:
                setattr(self, field, changes[field])
                changed.append(field)

        if not changed:
            return None

        now = at or utc_now()
        self.updated_at = now
        return UserProfileUpdated(
            user_id=self.user_id,
            changed_fields=tuple(changed),
            occurred_at=now,
        )


__all__ = ["User", "UserRole", "enum_values"]
