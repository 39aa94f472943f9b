# app/api/v1/user_router.py
from fastapi import APIRouter, Depends, status
from app.db import UnitOfWork, get_unit_of_work
from app.db.schemas import UserCreate, UserDto, UserResponse, UserUpdate
from app.services.v1 import UserService

user_router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


@user_router.get(
    "",
    response_model=list[UserDto],
    status_code=status.HTTP_200_OK,
    summary="List users",
    description="""
    Every registered user as a `UserDto`, in storage order.

    **Database Impact:** - Single SELECT on `users`, no pagination.
    """,
)
async def list_users(uow: UnitOfWork = Depends(get_unit_of_work)):
    return await UserService(uow).list_users()


@user_router.post(
    "",
    response_model=UserDto,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    description="Register a visitor, patient or staff member. Doctors use `POST /doctors`.",
    responses={
        409: {"description": "Email already registered"},
        422: {"description": "Invalid payload or doctor role"},
    },
)
async def register_user(data: UserCreate, uow: UnitOfWork = Depends(get_unit_of_work)):
    return await UserService(uow).register_user(data)


@user_router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user profile",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    return await UserService(uow).get_user(user_id)


@user_router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user profile",
    responses={
        404: {"description": "User not found"},
        409: {"description": "Email already registered"},
    },
)
async def update_user(
    user_id: str,
    data: UserUpdate,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await UserService(uow).update_profile(user_id, data)


__all__ = ["user_router"]
