from fastapi import APIRouter, Depends, Query
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.services.contest.contest import ContestService
from app.models.contest.contest import ContestCreate, ContestUpdate, ContestStatus
from app.utils.response import success_response, error_response

router = APIRouter(tags=["Contests"])


async def fetch_contest(contest_id: str, db: AsyncIOMotorDatabase):
    """Shared body of the single-contest lookups"""
    contest_service = ContestService(db)

    try:
        contest = await contest_service.get_contest(contest_id)
    except ValueError as e:
        return error_response(message=str(e))

    return success_response(message="Contest retrieved successfully", data=contest)


@router.get("/contests")
async def list_contests(
    page: int = Query(0, ge=0, description="Zero-based page number"),
    size: int = Query(10, ge=1, le=100, description="Contests per page"),
    status: Optional[ContestStatus] = Query(None, description="Filter by status"),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Paginated contest list in creation order"""
    contest_service = ContestService(db)
    contests = await contest_service.list_contests(
        page=page,
        size=size,
        status=status.value if status else None
    )

    return success_response(message="Contests retrieved successfully", data=contests)


@router.get("/contests/search")
async def search_contests(
    value: str = Query("", description="Tag substring, case-insensitive"),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Contests with a tag containing `value`"""
    contest_service = ContestService(db)
    contests = await contest_service.search_contests(value)

    return success_response(message="Contests retrieved successfully", data=contests)


@router.get("/popularContests")
async def popular_contests(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Contests sorted by participation"""
    contest_service = ContestService(db)
    contests = await contest_service.get_popular_contests()

    return success_response(message="Popular contests retrieved successfully", data=contests)


@router.get("/contestCount")
async def contest_count(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Total contest count"""
    contest_service = ContestService(db)
    count = await contest_service.count_contests()

    return success_response(message="Contest count retrieved successfully", data={"count": count})


@router.get("/contestDetails/{contest_id}")
async def contest_details(contest_id: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Contest details page"""
    return await fetch_contest(contest_id, db)


@router.get("/editContest/{contest_id}")
async def edit_contest(contest_id: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Contest as loaded by the edit form"""
    return await fetch_contest(contest_id, db)


@router.get("/payment/{contest_id}")
async def payment_contest(contest_id: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Contest as loaded by the checkout page"""
    return await fetch_contest(contest_id, db)


@router.patch("/contests/update/{contest_id}")
async def update_contest(
    contest_id: str,
    update_data: ContestUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Partial update, also used by admins to approve"""
    contest_service = ContestService(db)

    try:
        contest = await contest_service.update_contest(
            contest_id,
            update_data.model_dump(mode="json", exclude_unset=True)
        )
    except ValueError as e:
        return error_response(message=str(e))

    if not contest:
        return error_response(message="Contest not found", status_code=404)

    return success_response(message="Contest updated successfully", data=contest)


@router.delete("/contests/delete/{contest_id}")
async def delete_contest(contest_id: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Delete contest"""
    contest_service = ContestService(db)

    try:
        deleted = await contest_service.delete_contest(contest_id)
    except ValueError as e:
        return error_response(message=str(e))

    return success_response(
        message="Contest deleted successfully" if deleted else "Contest not found",
        data={"deleted_count": int(deleted)}
    )


@router.post("/addContest")
async def add_contest(contest_data: ContestCreate, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Create a contest pending admin approval"""
    contest_service = ContestService(db)
    contest = await contest_service.create_contest(contest_data.model_dump(mode="json", exclude_none=True))

    return success_response(message="Contest created successfully", data=contest, status_code=201)


@router.get("/myContest/{email}")
async def my_contests(email: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Contests created by a user"""
    contest_service = ContestService(db)
    contests = await contest_service.get_contests_by_creator(email)

    return success_response(message="Contests retrieved successfully", data=contests)
