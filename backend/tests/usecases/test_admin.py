from datetime import date, datetime
from typing import List, Optional, Tuple

import pytest
from app.models import ActivityLog, User
from app.usecases import admin as uc


class FakeStatsRepo:
    def __init__(self) -> None:
        self.since: List[datetime] = []
        self.from_day: Optional[date] = None

    async def count_users(self) -> int:
        return 3

    async def count_restaurants(self) -> int:
        return 2

    async def count_reservations_created_since(self, since: datetime) -> int:
        self.since.append(since)
        return len(self.since)

    async def sum_guests_from(self, day: date) -> int:
        self.from_day = day
        return 42


class FakeLogRepo:
    def __init__(self) -> None:
        self.calls: List[Tuple[int, int]] = []

    async def list_recent(self, *, limit: int, offset: int) -> List[Tuple[ActivityLog, Optional[User]]]:
        self.calls.append((limit, offset))
        return []

    async def count(self) -> int:
        return 0


@pytest.mark.asyncio
async def test_stats_use_day_week_month_windows() -> None:
    repo = FakeStatsRepo()
    # Wednesday
    now = datetime(2024, 6, 12, 15, 30)

    stats = await uc.get_stats(repo, now=now)

    assert repo.since == [datetime(2024, 6, 12), datetime(2024, 6, 9), datetime(2024, 6, 1)]
    assert repo.from_day == date(2024, 6, 12)
    assert (stats.users_count, stats.restaurants_count) == (3, 2)
    assert (stats.daily, stats.weekly, stats.monthly) == (1, 2, 3)
    assert stats.total_seats_booked == 42


@pytest.mark.asyncio
async def test_week_starts_on_sunday() -> None:
    repo = FakeStatsRepo()
    await uc.get_stats(repo, now=datetime(2024, 6, 9, 8, 0))
    assert repo.since[1] == datetime(2024, 6, 9)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("limit", "offset", "expected"),
    [(None, None, (100, 0)), (1000, 5, (500, 5)), (10, -3, (10, 0))],
)
async def test_activity_log_paging_defaults_and_caps(
    limit: Optional[int], offset: Optional[int], expected: Tuple[int, int]
) -> None:
    repo = FakeLogRepo()
    await uc.list_activity_logs(repo, limit=limit, offset=offset)
    assert repo.calls == [expected]
