from dataclasses import dataclass
from datetime import datetime

from ..domain.repositories import ActivityLogRepository, StatsRepository
from ..models import ActivityLog, User
from ..utils.time import start_of_day, start_of_month, start_of_week, utc_now_naive

DEFAULT_LOG_LIMIT = 100
MAX_LOG_LIMIT = 500


@dataclass(frozen=True)
class DashboardStats:
    users_count: int
    restaurants_count: int
    daily: int
    weekly: int
    monthly: int
    total_seats_booked: int


async def get_stats(stats_repo: StatsRepository, *, now: datetime | None = None) -> DashboardStats:
    """Counts for the admin dashboard; booking windows are computed in UTC."""
    now = now or utc_now_naive()
    return DashboardStats(
        users_count=await stats_repo.count_users(),
        restaurants_count=await stats_repo.count_restaurants(),
        daily=await stats_repo.count_reservations_created_since(start_of_day(now)),
        weekly=await stats_repo.count_reservations_created_since(start_of_week(now)),
        monthly=await stats_repo.count_reservations_created_since(start_of_month(now)),
        total_seats_booked=await stats_repo.sum_guests_from(now.date()),
    )


async def list_activity_logs(
    log_repo: ActivityLogRepository,
    *,
    limit: int | None,
    offset: int | None,
) -> tuple[list[tuple[ActivityLog, User | None]], int]:
    limit = min(limit or DEFAULT_LOG_LIMIT, MAX_LOG_LIMIT)
    offset = max(offset or 0, 0)
    rows = await log_repo.list_recent(limit=limit, offset=offset)
    return rows, await log_repo.count()
