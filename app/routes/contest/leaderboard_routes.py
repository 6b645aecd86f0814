from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.models.contest.contest import WinnerDeclaration
from app.services.contest.leaderboard import LeaderboardService
from app.services.contest.winner import WinnerService
from app.utils.response import success_response, error_response

router = APIRouter(tags=["Results"])


@router.get("/leaderBoard")
async def get_leaderboard(db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Winners ranked by number of contests won.

    Each row: rank, name, email, image, wins. Users without a win are not
    listed.
    """
    leaderboard_service = LeaderboardService(db)
    leaderboard = await leaderboard_service.get_leaderboard()

    return success_response(message="Leaderboard retrieved successfully", data=leaderboard)


@router.get("/userWin/{email}")
async def get_user_win_rate(email: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Submissions attempted vs contests won by a participant"""
    leaderboard_service = LeaderboardService(db)
    win_rate = await leaderboard_service.get_win_rate(email)

    return success_response(message="Win rate retrieved successfully", data=win_rate)


@router.get("/topCreators")
async def get_top_creators(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Contests with the most participants"""
    leaderboard_service = LeaderboardService(db)
    contests = await leaderboard_service.get_top_creators()

    return success_response(message="Top creators retrieved successfully", data=contests)


@router.get("/latestWinner")
async def get_latest_winner(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Newest contest with a declared result, or null"""
    leaderboard_service = LeaderboardService(db)
    contest = await leaderboard_service.get_latest_winner()

    return success_response(message="Latest winner retrieved successfully", data=contest)


@router.get("/winningContest/{email}")
async def get_winning_contests(email: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Contests won by a user"""
    leaderboard_service = LeaderboardService(db)
    contests = await leaderboard_service.get_winning_contests(email)

    return success_response(message="Winning contests retrieved successfully", data=contests)


@router.patch("/declareWin")
async def declare_win(declaration: WinnerDeclaration, db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Declare the winner of a contest.

    Writes the result to the contest, then to all its submissions and
    payments. Safe to repeat: a 502 with a partial report means some copies
    are stale and the call (or the resync endpoint) should be retried.
    """
    winner_service = WinnerService(db)

    try:
        report = await winner_service.declare_win(
            declaration.contest_id,
            declaration.model_dump(mode="json", exclude={"contest_id"})
        )
    except ValueError as e:
        return error_response(message=str(e))

    if not report.contest_found:
        return error_response(message="Contest not found", status_code=404)

    if not report.success:
        return error_response(
            message=f"Winner declaration incomplete, failed at {report.failed_stage}",
            status_code=502,
            data=report.to_dict()
        )

    return success_response(message="Winner declared successfully", data=report.to_dict())


@router.post("/declareWin/resync/{contest_id}")
async def resync_winner(contest_id: str, db: AsyncIOMotorDatabase = Depends(get_database)):
    """Rebuild the winner copies on submissions and payments from the contest"""
    winner_service = WinnerService(db)

    try:
        report = await winner_service.resync(contest_id)
    except ValueError as e:
        return error_response(message=str(e))

    if not report.contest_found:
        return error_response(message="Contest not found", status_code=404)

    if not report.success:
        return error_response(
            message=f"Resync incomplete, failed at {report.failed_stage}",
            status_code=502,
            data=report.to_dict()
        )

    return success_response(message="Winner copies resynced", data=report.to_dict())
