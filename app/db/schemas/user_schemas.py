# app/db/schemas/user_schemas.py
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    model_validator,
)
from datetime import date, datetime, timedelta
from typing import Optional, List
from ..models import UserRole


class UserDto(BaseModel):
    """Identity projection returned by CreateDoctor and ListUsers."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "user_id", "doctor_id"))
    email: str
    first_name: str
    last_name: str


class UserBase(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    date_of_birth: Optional[date] = None
    address: Optional[str] = Field(None, max_length=255)


class UserCreate(UserBase):
    role: UserRole = UserRole.PATIENT

    @classmethod
    def seed_records(
        cls,
        template: dict,
        records: int,
        start_index: int = 0,
        date_interval: int = 0,
    ) -> List["UserCreate"]:
        result = []
        base_date = template.get("date_of_birth", date.today())
        for i in range(start_index, start_index + records):
            record = cls(
                email=f"{template['email_prefix']}.{i}@{template['email_domain']}",
                first_name=template["first_name"],
                last_name=f"{template['last_name']}{i}",
                role=template.get("role", UserRole.PATIENT),
                phone=template.get("phone"),
                date_of_birth=base_date - timedelta(days=(i * date_interval)),
            )
            result.append(record)
        return result


class UserUpdate(BaseModel):
    # All fields optional for PATCH
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    date_of_birth: Optional[date] = None
    address: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def required_fields_not_cleared(self) -> "UserUpdate":
        for field in ("email", "first_name", "last_name"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be cleared")
        return self


class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    # Not EmailStr: stored values are echoed back as-is
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime
