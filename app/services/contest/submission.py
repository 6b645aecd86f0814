from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Dict
from datetime import datetime

from app.services.contest.contest import WINNER_FIELDS
from app.utils.object_id import parse_object_id


class SubmissionService:
    """Service for contest submissions"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.submissions = db.submissions
        self.contests = db.contests

    async def create_submission(self, submission_data: Dict) -> Dict:
        """
        Store a submission for an existing contest.

        Winner fields start as the contest's current values so a late entry
        to an already-decided contest carries the same result.
        """
        contest_id = submission_data["contest_id"]
        contest = await self.contests.find_one({"_id": parse_object_id(contest_id, "contest")})

        if not contest:
            raise ValueError("Contest not found")

        submission = {
            **submission_data,
            "contest_title": contest.get("title"),
            **{field: contest.get(field) for field in WINNER_FIELDS},
            "created_at": datetime.utcnow()
        }

        result = await self.submissions.insert_one(submission)
        submission["_id"] = result.inserted_id
        return submission

    async def get_all_submissions(self) -> List[Dict]:
        """Every submission"""
        return await self.submissions.find().to_list(length=None)

    async def get_contest_submissions(self, contest_id: str) -> List[Dict]:
        """Submissions for one contest"""
        return await self.submissions.find({"contest_id": contest_id}).to_list(length=None)
