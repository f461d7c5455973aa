from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_session, require_admin
from ..infrastructure.repositories import SqlAlchemyActivityLogRepository, SqlAlchemyStatsRepository
from ..schemas import ActivityLogPage, ActivityLogRead, BookingCounts, StatsRead
from ..usecases import admin as admin_usecase

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=StatsRead)
async def get_stats(session: AsyncSession = Depends(get_session)) -> StatsRead:
    stats = await admin_usecase.get_stats(SqlAlchemyStatsRepository(session))
    return StatsRead(
        users_count=stats.users_count,
        restaurants_count=stats.restaurants_count,
        bookings=BookingCounts(daily=stats.daily, weekly=stats.weekly, monthly=stats.monthly),
        total_seats_booked=stats.total_seats_booked,
    )


@router.get("/activity-logs", response_model=ActivityLogPage)
async def get_activity_logs(
    limit: Optional[int] = Query(default=None, ge=1),
    offset: Optional[int] = Query(default=None, ge=0),
    session: AsyncSession = Depends(get_session),
) -> ActivityLogPage:
    rows, total = await admin_usecase.list_activity_logs(
        SqlAlchemyActivityLogRepository(session),
        limit=limit,
        offset=offset,
    )
    return ActivityLogPage(logs=[ActivityLogRead.from_row(entry=e, user=u) for e, u in rows], total=total)
