"""
Winner Declaration Service

The contest document is the source of truth for the result. Submissions and
payments keep a copy of the winner fields for reporting; those copies are
rewritten from the contest whenever a winner is declared or a resync is
requested.

Partial-failure policy: the three writes (contest, submissions, payments)
are plain $set operations, so re-running any of them is harmless. Each stage
is retried on driver errors; if a stage still fails the remaining stages are
skipped and the report says how far the declaration got. Declaring again, or
calling resync, brings the copies back in line.
"""
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from dotenv import load_dotenv

from app.services.contest.contest import WINNER_FIELDS
from app.utils.object_id import parse_object_id

load_dotenv()

DECLARE_WIN_RETRIES = int(os.getenv("DECLARE_WIN_RETRIES", "2"))

STAGE_CONTEST = "contest"
STAGE_SUBMISSIONS = "submissions"
STAGE_PAYMENTS = "payments"


@dataclass
class DeclarationReport:
    """Outcome of a declaration or resync"""
    contest_id: str
    contest_found: bool = True
    completed_stages: List[str] = field(default_factory=list)
    failed_stage: Optional[str] = None
    error_message: Optional[str] = None
    submissions_updated: int = 0
    payments_updated: int = 0

    @property
    def success(self) -> bool:
        return self.contest_found and self.failed_stage is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contest_id": self.contest_id,
            "completed_stages": self.completed_stages,
            "failed_stage": self.failed_stage,
            "error_message": self.error_message,
            "submissions_updated": self.submissions_updated,
            "payments_updated": self.payments_updated
        }


class WinnerService:
    """Applies a contest result to the contest and its submissions and payments"""

    def __init__(self, db: AsyncIOMotorDatabase, retries: int = DECLARE_WIN_RETRIES):
        self.db = db
        self.contests = db.contests
        self.submissions = db.submissions
        self.payments = db.payments
        self.retries = retries

    async def _run_stage(self, name: str, operation: Callable[[], Awaitable[Any]]) -> Any:
        """Run one write, retrying driver errors; the last error propagates"""
        attempts = self.retries + 1

        for attempt in range(1, attempts + 1):
            try:
                return await operation()
            except PyMongoError as e:
                print(f"[WARN] Winner stage '{name}' failed (attempt {attempt}/{attempts}): {e}")
                if attempt == attempts:
                    raise

    async def _propagate(self, report: DeclarationReport, contest_id: str, update: Dict) -> DeclarationReport:
        """Copy the update onto every submission and payment of the contest"""
        stages = (
            (STAGE_SUBMISSIONS, self.submissions),
            (STAGE_PAYMENTS, self.payments),
        )

        for name, collection in stages:
            try:
                result = await self._run_stage(
                    name,
                    lambda collection=collection: collection.update_many({"contest_id": contest_id}, update)
                )
            except PyMongoError as e:
                report.failed_stage = name
                report.error_message = str(e)
                print(
                    f"[ERROR] Winner propagation for contest {contest_id} stopped at '{name}', "
                    f"completed: {report.completed_stages}"
                )
                return report

            if name == STAGE_SUBMISSIONS:
                report.submissions_updated = result.modified_count
            else:
                report.payments_updated = result.modified_count
            report.completed_stages.append(name)

        return report

    async def declare_win(self, contest_id: str, result_fields: Dict) -> DeclarationReport:
        """
        Record the result on the contest, then copy it to submissions and payments.

        result_fields: result, winner_name, winner_email, winner_image
        """
        contest_oid = parse_object_id(contest_id, "contest")
        report = DeclarationReport(contest_id=contest_id)

        winner = {key: result_fields.get(key) for key in WINNER_FIELDS}
        winner["declared_at"] = datetime.utcnow()
        update = {"$set": winner}

        try:
            result = await self._run_stage(
                STAGE_CONTEST,
                lambda: self.contests.update_one({"_id": contest_oid}, update)
            )
        except PyMongoError as e:
            report.failed_stage = STAGE_CONTEST
            report.error_message = str(e)
            print(f"[ERROR] Winner declaration for contest {contest_id} failed before any write: {e}")
            return report

        if result.matched_count == 0:
            report.contest_found = False
            return report

        report.completed_stages.append(STAGE_CONTEST)
        return await self._propagate(report, contest_id, update)

    async def resync(self, contest_id: str) -> DeclarationReport:
        """
        Rebuild the winner copies from the contest record.
        An undecided contest clears the copies.
        """
        contest = await self.contests.find_one({"_id": parse_object_id(contest_id, "contest")})
        report = DeclarationReport(contest_id=contest_id)

        if not contest:
            report.contest_found = False
            return report

        if contest.get("result") is None:
            update = {"$set": {key: None for key in WINNER_FIELDS}, "$unset": {"declared_at": ""}}
        else:
            winner = {key: contest.get(key) for key in WINNER_FIELDS}
            winner["declared_at"] = contest.get("declared_at")
            update = {"$set": winner}

        return await self._propagate(report, contest_id, update)
