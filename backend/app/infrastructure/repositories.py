from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional, Tuple, cast

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.repositories import (
    ActivityLogRepository,
    ReservationRepository,
    RestaurantRepository,
    StatsRepository,
    UserRepository,
)
from ..models import ActivityLog, Reservation, Restaurant, User, UserRole
from ..utils.time import utc_now_naive


class SqlAlchemyRestaurantRepository(RestaurantRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, restaurant_id: int) -> Restaurant | None:
        return await self.session.get(Restaurant, restaurant_id)

    async def get_for_update(self, restaurant_id: int) -> Restaurant | None:
        # Row lock held until the surrounding transaction ends. SQLite renders no FOR UPDATE.
        stmt = select(Restaurant).where(Restaurant.id == restaurant_id).with_for_update()
        result = await self.session.scalar(stmt)
        return result if isinstance(result, Restaurant) else None

    async def list_all(self) -> List[Restaurant]:
        rows = await self.session.scalars(select(Restaurant).order_by(Restaurant.name, Restaurant.id))
        return list(rows.all())

    async def search(self, term: str) -> List[Restaurant]:
        pattern = f"%{term}%"
        stmt = (
            select(Restaurant)
            .where(
                or_(
                    Restaurant.name.ilike(pattern),
                    Restaurant.cuisine.ilike(pattern),
                    Restaurant.location.ilike(pattern),
                )
            )
            .order_by(Restaurant.name, Restaurant.id)
        )
        rows = await self.session.scalars(stmt)
        return list(rows.all())

    async def list_by_owner(self, owner_id: int) -> List[Restaurant]:
        stmt = select(Restaurant).where(Restaurant.owner_id == owner_id).order_by(Restaurant.name, Restaurant.id)
        rows = await self.session.scalars(stmt)
        return list(rows.all())

    async def create(
        self,
        *,
        name: str,
        cuisine: str,
        location: str,
        rating: float | None,
        total_seats: int,
        owner_id: int,
    ) -> Restaurant:
        now = utc_now_naive()
        restaurant = Restaurant(
            name=name,
            cuisine=cuisine,
            location=location,
            rating=rating,
            total_seats=total_seats,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        self.session.add(restaurant)
        await self.session.flush()
        return restaurant

    async def update(self, restaurant: Restaurant, changes: dict[str, Any]) -> Restaurant:
        for field, value in changes.items():
            setattr(restaurant, field, value)
        restaurant.updated_at = utc_now_naive()
        self.session.add(restaurant)
        await self.session.flush()
        return restaurant

    async def delete(self, restaurant: Restaurant) -> None:
        await self.session.delete(restaurant)
        await self.session.flush()


class SqlAlchemyReservationRepository(ReservationRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def sum_booked(self, restaurant_id: int, date: date, time: str) -> int:
        stmt = select(func.coalesce(func.sum(Reservation.guests), 0)).where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.date == date,
            Reservation.time == time,
        )
        return int(await self.session.scalar(stmt) or 0)

    async def create(
        self,
        *,
        user_id: int,
        restaurant_id: int,
        date: date,
        time: str,
        guests: int,
        contact_number: str,
    ) -> Reservation:
        now = utc_now_naive()
        reservation = Reservation(
            user_id=user_id,
            restaurant_id=restaurant_id,
            date=date,
            time=time,
            guests=guests,
            contact_number=contact_number,
            created_at=now,
            updated_at=now,
        )
        self.session.add(reservation)
        await self.session.flush()
        return reservation

    async def list_by_user(self, user_id: int) -> List[Tuple[Reservation, Restaurant]]:
        stmt: Select[Tuple[Reservation, Restaurant]] = (
            select(Reservation, Restaurant)
            .join(Restaurant, Reservation.restaurant_id == Restaurant.id)
            .where(Reservation.user_id == user_id)
            .order_by(Reservation.date, Reservation.time, Reservation.id)
        )
        rows = await self.session.execute(stmt)
        return cast(List[Tuple[Reservation, Restaurant]], list(rows.all()))

    async def list_by_restaurant(self, restaurant_id: int) -> List[Tuple[Reservation, User]]:
        stmt: Select[Tuple[Reservation, User]] = (
            select(Reservation, User)
            .join(User, Reservation.user_id == User.id)
            .where(Reservation.restaurant_id == restaurant_id)
            .order_by(Reservation.date, Reservation.time, Reservation.id)
        )
        rows = await self.session.execute(stmt)
        return cast(List[Tuple[Reservation, User]], list(rows.all()))


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.scalar(select(User).where(User.email == email))
        return result if isinstance(result, User) else None

    async def create(self, *, name: str, email: str, password_hash: str, role: UserRole) -> User:
        now = utc_now_naive()
        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=now,
            updated_at=now,
        )
        self.session.add(user)
        await self.session.flush()
        return user


class SqlAlchemyActivityLogRepository(ActivityLogRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self,
        *,
        action: str,
        entity: str,
        entity_id: int | None,
        user_id: int | None,
        details: dict[str, Any] | None,
    ) -> ActivityLog:
        entry = ActivityLog(
            action=action,
            entity=entity,
            entity_id=entity_id,
            user_id=user_id,
            details=details,
            created_at=utc_now_naive(),
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_recent(self, *, limit: int, offset: int) -> List[Tuple[ActivityLog, Optional[User]]]:
        stmt: Select[Tuple[ActivityLog, User]] = (
            select(ActivityLog, User)
            .outerjoin(User, ActivityLog.user_id == User.id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
            .offset(offset)
        )
        rows = await self.session.execute(stmt)
        return cast(List[Tuple[ActivityLog, Optional[User]]], list(rows.all()))

    async def count(self) -> int:
        return int(await self.session.scalar(select(func.count(ActivityLog.id))) or 0)


class SqlAlchemyStatsRepository(StatsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def count_users(self) -> int:
        return int(await self.session.scalar(select(func.count(User.id))) or 0)

    async def count_restaurants(self) -> int:
        return int(await self.session.scalar(select(func.count(Restaurant.id))) or 0)

    async def count_reservations_created_since(self, since: datetime) -> int:
        stmt = select(func.count(Reservation.id)).where(Reservation.created_at >= since)
        return int(await self.session.scalar(stmt) or 0)

    async def sum_guests_from(self, day: date) -> int:
        stmt = select(func.coalesce(func.sum(Reservation.guests), 0)).where(Reservation.date >= day)
        return int(await self.session.scalar(stmt) or 0)
