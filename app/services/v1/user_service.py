# app/services/v1/user_service.py
from common.api_error import ConflictError, NotFoundError, ValidationError
from app.db.models import User, UserRole
from app.db.schemas import UserCreate, UserDto, UserResponse, UserUpdate
from app.db.unit_of_work import UnitOfWork


class UserService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_users(self) -> list[UserDto]:
        """
        Every user, in the order storage yields them.
        No pagination, filter or sort is promised.
        """
        users = await self.uow.users.find()
        return [UserDto.model_validate(user) for user in users]

    async def register_user(self, data: UserCreate) -> UserDto:
        if data.role == UserRole.DOCTOR:
            raise ValidationError(
                "Doctors carry a professional profile; register them through /doctors",
                code="ROLE_REQUIRES_PROFILE",
            )
        await ensure_email_free(self.uow, data.email)

        user, registered = User.register(**data.model_dump())
        self.uow.add(user, registered)
        await self.uow.save_changes()
        return UserDto.model_validate(user)

    async def get_user(self, user_id: str) -> UserResponse:
        return UserResponse.model_validate(await require_user(self.uow, user_id))

    async def update_profile(self, user_id: str, data: UserUpdate) -> UserResponse:
        user = await require_user(self.uow, user_id)
        changes = data.model_dump(exclude_unset=True)

        if "email" in changes and changes["email"] != user.email:
            await ensure_email_free(self.uow, changes["email"])

        updated = user.update_profile(changes)
        if updated is not None:
            self.uow.record(user, updated)
            await self.uow.save_changes()
        return UserResponse.model_validate(user)


async def require_user(uow: UnitOfWork, user_id: str, entity: str = "User") -> User:
    user = await uow.users.get(user_id)
    if user is None:
        raise NotFoundError(entity, user_id)
    return user


async def ensure_email_free(uow: UnitOfWork, email: str) -> None:
    if await uow.users.first(User.email == email) is not None:
        raise ConflictError(
            f"A user with email '{email}' already exists", code="DUPLICATE_EMAIL"
        )


__all__ = ["UserService", "require_user", "ensure_email_free"]
