from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.models.auth.user import UserUpsert, UserProfileUpdate, UserUpdate
from app.services.auth.user import UserService
from app.routes.auth.dependencies import get_current_user
from app.utils.response import success_response, error_response

router = APIRouter(tags=["Users"])


@router.put("/user")
async def upsert_user(
    user_data: UserUpsert,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """
    Save a user on login.
    An email that is already known returns the stored user unchanged.
    """
    user_service = UserService(db)
    created, user = await user_service.upsert_user(user_data.model_dump(mode="json", exclude_none=True))

    return success_response(
        message="User created" if created else "User already exists",
        data=user,
        status_code=201 if created else 200
    )


@router.put("/user/update/{email}")
async def update_profile(
    email: str,
    profile_data: UserProfileUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Update profile fields (name, image, address)"""
    user_service = UserService(db)
    user = await user_service.update_profile(email, profile_data.model_dump(exclude_unset=True))

    if not user:
        return error_response(message="User not found", status_code=404)

    return success_response(message="Profile updated", data=user)


@router.patch("/user/update/{email}")
async def update_user(
    email: str,
    user_data: UserUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Update role or other fields, stamping updated_at"""
    user_service = UserService(db)
    user = await user_service.update_user(email, user_data.model_dump(mode="json", exclude_unset=True))

    if not user:
        return error_response(message="User not found", status_code=404)

    return success_response(message="User updated", data=user)


@router.delete("/user/delete/{user_id}")
async def delete_user(
    user_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Delete user by id"""
    user_service = UserService(db)

    try:
        deleted = await user_service.delete_user(user_id)
    except ValueError as e:
        return error_response(message=str(e))

    return success_response(
        message="User deleted" if deleted else "User not found",
        data={"deleted_count": int(deleted)}
    )


@router.get("/users")
async def get_users(
    current_user: dict = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """List every user"""
    user_service = UserService(db)
    users = await user_service.get_all_users()

    return success_response(message="Users retrieved successfully", data=users)


@router.get("/user/{email}")
async def get_user(
    email: str,
    current_user: dict = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Fetch one user; null when the email is unknown"""
    user_service = UserService(db)
    user = await user_service.get_user_by_email(email)

    return success_response(message="User retrieved successfully", data=user)
