from typing import Any

from ..domain.errors import NotRestaurantOwnerError, RestaurantNotFoundError
from ..domain.repositories import RestaurantRepository
from ..models import Restaurant

UPDATABLE_FIELDS = ("name", "cuisine", "location", "rating", "total_seats")


async def list_restaurants(restaurant_repo: RestaurantRepository) -> list[Restaurant]:
    return await restaurant_repo.list_all()


async def search_restaurants(restaurant_repo: RestaurantRepository, *, query: str) -> list[Restaurant]:
    term = query.strip()
    if not term:
        raise ValueError("Search query (q) is required")
    return await restaurant_repo.search(term)


async def list_owned_restaurants(restaurant_repo: RestaurantRepository, *, owner_id: int) -> list[Restaurant]:
    return await restaurant_repo.list_by_owner(owner_id)


async def create_restaurant(
    restaurant_repo: RestaurantRepository,
    *,
    owner_id: int,
    name: str,
    cuisine: str,
    location: str,
    rating: float | None,
    total_seats: int,
) -> Restaurant:
    if total_seats < 1:
        raise ValueError("total_seats must be >= 1")
    return await restaurant_repo.create(
        name=name,
        cuisine=cuisine,
        location=location,
        rating=rating,
        total_seats=total_seats,
        owner_id=owner_id,
    )


async def update_restaurant(
    restaurant_repo: RestaurantRepository,
    *,
    restaurant_id: int,
    owner_id: int,
    changes: dict[str, Any],
) -> Restaurant:
    """
    Partial update by the owner. Lowering total_seats leaves committed reservations
    untouched; it only caps future admissions.
    """
    restaurant = await _get_owned(restaurant_repo, restaurant_id=restaurant_id, owner_id=owner_id)
    allowed = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
    if "total_seats" in allowed and (allowed["total_seats"] is None or allowed["total_seats"] < 1):
        raise ValueError("total_seats must be >= 1")
    return await restaurant_repo.update(restaurant, allowed)


async def delete_restaurant(
    restaurant_repo: RestaurantRepository,
    *,
    restaurant_id: int,
    owner_id: int,
) -> None:
    restaurant = await _get_owned(restaurant_repo, restaurant_id=restaurant_id, owner_id=owner_id)
    await restaurant_repo.delete(restaurant)


async def _get_owned(restaurant_repo: RestaurantRepository, *, restaurant_id: int, owner_id: int) -> Restaurant:
    restaurant = await restaurant_repo.get(restaurant_id)
    if restaurant is None:
        raise RestaurantNotFoundError("Restaurant not found")
    if restaurant.owner_id != owner_id:
        raise NotRestaurantOwnerError("Not authorized to modify this restaurant")
    return restaurant
