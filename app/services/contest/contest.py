from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Optional, List, Dict
from datetime import datetime
import re

from app.models.contest.contest import ContestStatus
from app.utils.object_id import parse_object_id

# Denormalized winner fields, null until a winner is declared
WINNER_FIELDS = ("result", "winner_name", "winner_email", "winner_image")

# Owned by payment recording and winner declaration, never set by a plain update
DERIVED_FIELDS = ("participation_count", "declared_at", *WINNER_FIELDS)


class ContestService:
    """Service for contest operations"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.contests = db.contests

    async def create_contest(self, contest_data: Dict) -> Dict:
        """Create a contest waiting for admin approval"""
        now = datetime.utcnow()
        contest = {
            **contest_data,
            "status": ContestStatus.PENDING.value,
            "participation_count": 0,
            **{field: None for field in WINNER_FIELDS},
            "created_at": now,
            "updated_at": now
        }

        result = await self.contests.insert_one(contest)
        contest["_id"] = result.inserted_id
        return contest

    async def get_contest(self, contest_id: str) -> Optional[Dict]:
        """Get contest by id; raises ValueError on a malformed id"""
        return await self.contests.find_one({"_id": parse_object_id(contest_id, "contest")})

    async def list_contests(self, page: int = 0, size: int = 10, status: Optional[str] = None) -> List[Dict]:
        """
        Page through contests in insertion order.

        page is zero-based; consecutive pages never overlap because the
        ordering is on the immutable _id.
        """
        query = {"status": status} if status else {}

        cursor = self.contests.find(query, sort=[("_id", 1)], skip=page * size, limit=size)
        return await cursor.to_list(length=None)

    async def search_contests(self, value: str) -> List[Dict]:
        """Case-insensitive substring match against tags"""
        query = {"tags": {"$regex": re.escape(value), "$options": "i"}}
        return await self.contests.find(query).to_list(length=None)

    async def get_popular_contests(self) -> List[Dict]:
        """All contests, most participants first"""
        cursor = self.contests.find({}, sort=[("participation_count", -1)])
        return await cursor.to_list(length=None)

    async def count_contests(self) -> int:
        """Total number of contests"""
        return await self.contests.count_documents({})

    async def get_contests_by_creator(self, email: str) -> List[Dict]:
        """Contests created by a user"""
        return await self.contests.find({"creator_email": email}).to_list(length=None)

    async def update_contest(self, contest_id: str, update_data: Dict) -> Optional[Dict]:
        """Partial update; returns the contest after the write"""
        contest_oid = parse_object_id(contest_id, "contest")
        changes = {key: value for key, value in update_data.items() if key not in DERIVED_FIELDS}

        await self.contests.update_one(
            {"_id": contest_oid},
            {"$set": {**changes, "updated_at": datetime.utcnow()}}
        )
        return await self.contests.find_one({"_id": contest_oid})

    async def delete_contest(self, contest_id: str) -> bool:
        """Delete contest"""
        result = await self.contests.delete_one({"_id": parse_object_id(contest_id, "contest")})
        return result.deleted_count > 0
