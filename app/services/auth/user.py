from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Optional, List, Dict, Tuple
from datetime import datetime

from app.models.auth.user import UserRole
from app.utils.object_id import parse_object_id


class UserService:
    """Service for user records, keyed by email"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users = db.users

    async def get_user_by_email(self, email: str) -> Optional[Dict]:
        """Get user by email"""
        return await self.users.find_one({"email": email})

    async def get_all_users(self) -> List[Dict]:
        """Get every user"""
        return await self.users.find().to_list(length=None)

    async def upsert_user(self, user_data: Dict) -> Tuple[bool, Dict]:
        """
        Create the user on first login.

        Returns (created, user). An existing email is returned untouched.
        """
        email = user_data["email"]

        existing = await self.get_user_by_email(email)
        if existing:
            return False, existing

        now = datetime.utcnow()
        new_user = {
            **user_data,
            "role": user_data.get("role") or UserRole.PARTICIPANT.value,
            "created_at": now,
            "updated_at": now
        }

        # $setOnInsert keeps a concurrent first login from overwriting the winner
        await self.users.update_one(
            {"email": email},
            {"$setOnInsert": new_user},
            upsert=True
        )

        return True, await self.get_user_by_email(email)

    async def update_profile(self, email: str, profile_data: Dict) -> Optional[Dict]:
        """Set profile fields and return the updated user"""
        if profile_data:
            await self.users.update_one({"email": email}, {"$set": profile_data})
        return await self.get_user_by_email(email)

    async def update_user(self, email: str, user_data: Dict) -> Optional[Dict]:
        """Set arbitrary fields (role changes) with a fresh timestamp"""
        await self.users.update_one(
            {"email": email},
            {"$set": {**user_data, "updated_at": datetime.utcnow()}}
        )
        return await self.get_user_by_email(email)

    async def delete_user(self, user_id: str) -> bool:
        """Delete user by id"""
        result = await self.users.delete_one({"_id": parse_object_id(user_id, "user")})
        return result.deleted_count > 0
