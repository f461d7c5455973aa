from dataclasses import dataclass
from datetime import date

from ..domain.errors import RestaurantNotFoundError
from ..domain.repositories import ReservationRepository, RestaurantRepository
from ..domain.services import SlotKey, SlotSnapshot


@dataclass(frozen=True)
class Availability:
    total_seats: int
    booked: int
    available: int


async def get_availability(
    restaurant_repo: RestaurantRepository,
    res_repo: ReservationRepository,
    *,
    restaurant_id: int,
    date: date,
    time: str,
) -> Availability:
    """
    Preview of the seats left for a slot. Takes no lock: a concurrent admission may
    consume the seats before the caller books, and only admission is authoritative.
    """
    restaurant = await restaurant_repo.get(restaurant_id)
    if restaurant is None:
        raise RestaurantNotFoundError("Restaurant not found")

    slot = SlotKey(restaurant_id=restaurant.id, date=date, time=time.strip())
    booked = await res_repo.sum_booked(slot.restaurant_id, slot.date, slot.time)
    snapshot = SlotSnapshot(total_seats=restaurant.total_seats, booked=booked)
    return Availability(total_seats=snapshot.total_seats, booked=snapshot.booked, available=snapshot.available)
