from datetime import datetime, timezone
from typing import Any, List, Optional

import pytest
from app.domain.errors import NotRestaurantOwnerError, RestaurantNotFoundError
from app.models import Restaurant
from app.usecases import restaurants as uc


def _utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class FakeRestaurantRepo:
    def __init__(self) -> None:
        self.rows: dict[int, Restaurant] = {}
        self.deleted: List[int] = []
        self.searched: Optional[str] = None

    async def get(self, restaurant_id: int) -> Optional[Restaurant]:
        return self.rows.get(restaurant_id)

    async def search(self, term: str) -> List[Restaurant]:
        self.searched = term
        return list(self.rows.values())

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
        now = _utc_now_naive()
        restaurant = Restaurant(
            id=len(self.rows) + 1,
            name=name,
            cuisine=cuisine,
            location=location,
            rating=rating,
            total_seats=total_seats,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        self.rows[restaurant.id] = restaurant
        return restaurant

    async def update(self, restaurant: Restaurant, changes: dict[str, Any]) -> Restaurant:
        for key, value in changes.items():
            setattr(restaurant, key, value)
        return restaurant

    async def delete(self, restaurant: Restaurant) -> None:
        self.deleted.append(restaurant.id)
        self.rows.pop(restaurant.id)


async def _seed(repo: FakeRestaurantRepo, owner_id: int = 1) -> Restaurant:
    return await uc.create_restaurant(
        repo,
        owner_id=owner_id,
        name="Bistro",
        cuisine="French",
        location="Old Town",
        rating=None,
        total_seats=12,
    )


@pytest.mark.asyncio
async def test_create_restaurant_sets_owner() -> None:
    repo = FakeRestaurantRepo()
    restaurant = await _seed(repo, owner_id=5)
    assert restaurant.owner_id == 5
    assert restaurant.total_seats == 12


@pytest.mark.asyncio
async def test_create_restaurant_rejects_zero_seats() -> None:
    repo = FakeRestaurantRepo()
    with pytest.raises(ValueError):
        await uc.create_restaurant(
            repo, owner_id=1, name="x", cuisine="y", location="z", rating=None, total_seats=0
        )


@pytest.mark.asyncio
async def test_update_applies_only_known_fields() -> None:
    repo = FakeRestaurantRepo()
    restaurant = await _seed(repo)
    updated = await uc.update_restaurant(
        repo,
        restaurant_id=restaurant.id,
        owner_id=1,
        changes={"total_seats": 4, "owner_id": 99},
    )
    assert updated.total_seats == 4
    assert updated.owner_id == 1


@pytest.mark.asyncio
async def test_update_by_other_user_is_rejected() -> None:
    repo = FakeRestaurantRepo()
    restaurant = await _seed(repo)
    with pytest.raises(NotRestaurantOwnerError):
        await uc.update_restaurant(repo, restaurant_id=restaurant.id, owner_id=2, changes={"name": "Mine"})


@pytest.mark.asyncio
async def test_update_rejects_null_total_seats() -> None:
    repo = FakeRestaurantRepo()
    restaurant = await _seed(repo)
    with pytest.raises(ValueError):
        await uc.update_restaurant(repo, restaurant_id=restaurant.id, owner_id=1, changes={"total_seats": None})


@pytest.mark.asyncio
async def test_delete_missing_restaurant() -> None:
    with pytest.raises(RestaurantNotFoundError):
        await uc.delete_restaurant(FakeRestaurantRepo(), restaurant_id=3, owner_id=1)


@pytest.mark.asyncio
async def test_delete_owned_restaurant() -> None:
    repo = FakeRestaurantRepo()
    restaurant = await _seed(repo)
    await uc.delete_restaurant(repo, restaurant_id=restaurant.id, owner_id=1)
    assert repo.deleted == [restaurant.id]


@pytest.mark.asyncio
async def test_search_strips_query_and_rejects_blank() -> None:
    repo = FakeRestaurantRepo()
    await uc.search_restaurants(repo, query="  pizza ")
    assert repo.searched == "pizza"
    with pytest.raises(ValueError):
        await uc.search_restaurants(repo, query="   ")
