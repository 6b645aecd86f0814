import os
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Dict, Optional
from dotenv import load_dotenv

load_dotenv()

TOP_CREATORS_LIMIT = int(os.getenv("TOP_CREATORS_LIMIT", "5"))

# A contest counts as decided once its result is set
DECLARED = {"result": {"$ne": None}}


class LeaderboardService:
    """Reporting queries over submissions, contests and users"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users = db.users
        self.contests = db.contests
        self.submissions = db.submissions

    def _win_rate_pipeline(self, email: str) -> List[Dict]:
        """
        One pass over the participant's submissions.
        Every submission is an attempt; the ones they won are completions.
        """
        return [
            {"$match": {"participant_email": email}},
            {
                "$group": {
                    "_id": None,
                    "attempted_count": {"$sum": 1},
                    "completed_count": {
                        "$sum": {"$cond": [{"$eq": ["$winner_email", email]}, 1, 0]}
                    }
                }
            }
        ]

    def _leaderboard_pipeline(self) -> List[Dict]:
        """
        Wins per winner email.

        Every submission of a decided contest carries the winner, so rows are
        first collapsed to one per (winner, contest) and then counted.
        """
        return [
            {"$match": {**DECLARED, "winner_email": {"$ne": None}}},
            {
                "$group": {
                    "_id": {"winner_email": "$winner_email", "contest_id": "$contest_id"},
                    "winner_name": {"$first": "$winner_name"},
                    "winner_image": {"$first": "$winner_image"}
                }
            },
            {
                "$group": {
                    "_id": "$_id.winner_email",
                    "wins": {"$sum": 1},
                    "winner_name": {"$first": "$winner_name"},
                    "winner_image": {"$first": "$winner_image"}
                }
            },
            {
                "$lookup": {
                    "from": "users",
                    "localField": "_id",
                    "foreignField": "email",
                    "as": "user_info"
                }
            },
            {"$sort": {"wins": -1, "_id": 1}}
        ]

    async def get_win_rate(self, email: str) -> Dict[str, int]:
        """attempted/completed counts for a participant, zero when they never entered"""
        rows = await self.submissions.aggregate(self._win_rate_pipeline(email)).to_list(length=1)

        if not rows:
            return {"attemptedCount": 0, "completedCount": 0}

        # Stored keys are snake_case, the record keeps the keys clients read
        return {
            "attemptedCount": rows[0].get("attempted_count", 0),
            "completedCount": rows[0].get("completed_count", 0)
        }

    async def get_leaderboard(self) -> List[Dict]:
        """Ranked winners, most wins first"""
        rows = await self.submissions.aggregate(self._leaderboard_pipeline()).to_list(length=None)

        leaderboard = []
        for rank, row in enumerate(rows, 1):
            # Prefer the live profile, fall back to the copy made at declaration
            user = row["user_info"][0] if row.get("user_info") else {}
            leaderboard.append({
                "rank": rank,
                "name": user.get("name") or row.get("winner_name"),
                "email": row["_id"],
                "image": user.get("image") or row.get("winner_image"),
                "wins": row["wins"]
            })

        return leaderboard

    async def get_top_creators(self, limit: int = TOP_CREATORS_LIMIT) -> List[Dict]:
        """Contests that drew participants, most participants first"""
        cursor = self.contests.find(
            {"participation_count": {"$gt": 0}},
            sort=[("participation_count", -1)],
            limit=limit
        )
        return await cursor.to_list(length=limit)

    async def get_latest_winner(self) -> Optional[Dict]:
        """Most recently created contest that has a declared result"""
        cursor = self.contests.find(DECLARED, sort=[("created_at", -1), ("_id", -1)], limit=1)
        rows = await cursor.to_list(length=1)
        return rows[0] if rows else None

    async def get_winning_contests(self, email: str) -> List[Dict]:
        """Contests won by a user"""
        return await self.contests.find({"winner_email": email}).to_list(length=None)
