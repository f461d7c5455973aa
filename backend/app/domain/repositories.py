from __future__ import annotations

from datetime import date, datetime
from typing import Any, Protocol

from ..models import ActivityLog, Reservation, Restaurant, User, UserRole


class RestaurantRepository(Protocol):
    async def get(self, restaurant_id: int) -> Restaurant | None: ...

    async def get_for_update(self, restaurant_id: int) -> Restaurant | None: ...

    async def list_all(self) -> list[Restaurant]: ...

    async def search(self, term: str) -> list[Restaurant]: ...

    async def list_by_owner(self, owner_id: int) -> list[Restaurant]: ...

    async def create(
        self,
        *,
        name: str,
        cuisine: str,
        location: str,
        rating: float | None,
        total_seats: int,
        owner_id: int,
    ) -> Restaurant: ...

    async def update(self, restaurant: Restaurant, changes: dict[str, Any]) -> Restaurant: ...

    async def delete(self, restaurant: Restaurant) -> None: ...


class ReservationRepository(Protocol):
    async def sum_booked(self, restaurant_id: int, date: date, time: str) -> int: ...

    async def create(
        self,
        *,
        user_id: int,
        restaurant_id: int,
        date: date,
        time: str,
        guests: int,
        contact_number: str,
    ) -> Reservation: ...

    async def list_by_user(self, user_id: int) -> list[tuple[Reservation, Restaurant]]: ...

    async def list_by_restaurant(self, restaurant_id: int) -> list[tuple[Reservation, User]]: ...


class UserRepository(Protocol):
    async def get(self, user_id: int) -> User | None: ...

    async def get_by_email(self, email: str) -> User | None: ...

    async def create(self, *, name: str, email: str, password_hash: str, role: UserRole) -> User: ...


class ActivityLogRepository(Protocol):
    async def add(
        self,
        *,
        action: str,
        entity: str,
        entity_id: int | None,
        user_id: int | None,
        details: dict[str, Any] | None,
    ) -> ActivityLog: ...

    async def list_recent(self, *, limit: int, offset: int) -> list[tuple[ActivityLog, User | None]]: ...

    async def count(self) -> int: ...


class StatsRepository(Protocol):
    async def count_users(self) -> int: ...

    async def count_restaurants(self) -> int: ...

    async def count_reservations_created_since(self, since: datetime) -> int: ...

    async def sum_guests_from(self, day: date) -> int: ...
