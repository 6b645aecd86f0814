from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.services.contest.submission import SubmissionService
from app.models.contest.submission import SubmissionCreate
from app.utils.response import success_response, error_response

router = APIRouter(tags=["Submissions"])


@router.post("/submittedTask")
async def create_submission(
    submission_data: SubmissionCreate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Submit an entry to an existing contest"""
    submission_service = SubmissionService(db)

    try:
        submission = await submission_service.create_submission(
            submission_data.model_dump(mode="json", exclude_none=True)
        )
    except ValueError as e:
        return error_response(message=str(e))

    return success_response(message="Task submitted successfully", data=submission, status_code=201)


@router.get("/submittedTask")
async def list_submissions(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Every submission"""
    submission_service = SubmissionService(db)
    submissions = await submission_service.get_all_submissions()

    return success_response(message="Submissions retrieved successfully", data=submissions)


@router.get("/contestSubmitDetails/{contest_id}")
async def contest_submissions(contest_id: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Submissions for one contest"""
    submission_service = SubmissionService(db)
    submissions = await submission_service.get_contest_submissions(contest_id)

    return success_response(message="Submissions retrieved successfully", data=submissions)
