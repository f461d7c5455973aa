from dataclasses import dataclass, field
from datetime import date

from ..domain.errors import InvalidReservationError, NotRestaurantOwnerError, RestaurantNotFoundError
from ..domain.repositories import ReservationRepository, RestaurantRepository
from ..domain.services import SlotKey, SlotSnapshot, validate_admission
from ..models import Reservation, Restaurant, User

MAX_CONTACT_LENGTH = 20
MAX_TIME_LENGTH = 10


@dataclass
class SlotBookings:
    date: date
    time: str
    booked: int = 0
    reservations: list[tuple[Reservation, User]] = field(default_factory=list)


@dataclass
class RestaurantBookings:
    restaurant: Restaurant
    slots: list[SlotBookings]
    reservations: list[tuple[Reservation, User]]


@dataclass(frozen=True)
class AdmissionRequest:
    restaurant_id: int
    date: date
    time: str
    guests: int
    contact_number: str
    user_id: int


def parse_admission(
    *,
    restaurant_id: int,
    date: date,
    time: str,
    guests: int,
    contact_number: str,
    user_id: int,
) -> AdmissionRequest:
    """Normalize and check an admission request. Runs before any lock or store access."""
    time = time.strip()
    contact_number = contact_number.strip()
    if restaurant_id <= 0:
        raise InvalidReservationError("restaurant id must be positive")
    if not time or len(time) > MAX_TIME_LENGTH:
        raise InvalidReservationError("time is required")
    if guests <= 0:
        raise InvalidReservationError("guests must be positive")
    if not contact_number or len(contact_number) > MAX_CONTACT_LENGTH:
        raise InvalidReservationError(f"contact number must be 1-{MAX_CONTACT_LENGTH} characters")
    return AdmissionRequest(
        restaurant_id=restaurant_id,
        date=date,
        time=time,
        guests=guests,
        contact_number=contact_number,
        user_id=user_id,
    )


async def create_reservation(
    restaurant_repo: RestaurantRepository,
    res_repo: ReservationRepository,
    *,
    restaurant_id: int,
    date: date,
    time: str,
    guests: int,
    contact_number: str,
    user_id: int,
) -> tuple[Reservation, Restaurant]:
    """
    Admit a reservation against the remaining seats of its slot.

    Must run inside one transaction, with admissions for the same restaurant
    serialized by the caller. Callers should run `parse_admission` before taking
    that lock; it is repeated here so malformed input never reaches the store.
    The restaurant row is locked before the booked total is read, so the sum
    below already includes every reservation committed by an earlier admission
    on this restaurant.
    """
    request = parse_admission(
        restaurant_id=restaurant_id,
        date=date,
        time=time,
        guests=guests,
        contact_number=contact_number,
        user_id=user_id,
    )

    restaurant = await restaurant_repo.get_for_update(request.restaurant_id)
    if restaurant is None:
        raise RestaurantNotFoundError("Restaurant not found")

    slot = SlotKey(restaurant_id=restaurant.id, date=request.date, time=request.time)
    booked = await res_repo.sum_booked(slot.restaurant_id, slot.date, slot.time)
    validate_admission(SlotSnapshot(total_seats=restaurant.total_seats, booked=booked), guests=request.guests)

    reservation = await res_repo.create(
        user_id=request.user_id,
        restaurant_id=slot.restaurant_id,
        date=slot.date,
        time=slot.time,
        guests=request.guests,
        contact_number=request.contact_number,
    )
    return reservation, restaurant


async def list_user_reservations(
    res_repo: ReservationRepository,
    *,
    user_id: int,
) -> list[tuple[Reservation, Restaurant]]:
    return await res_repo.list_by_user(user_id)


async def list_restaurant_bookings(
    restaurant_repo: RestaurantRepository,
    res_repo: ReservationRepository,
    *,
    restaurant_id: int,
    owner_id: int,
) -> RestaurantBookings:
    restaurant = await restaurant_repo.get(restaurant_id)
    if restaurant is None:
        raise RestaurantNotFoundError("Restaurant not found")
    if restaurant.owner_id != owner_id:
        raise NotRestaurantOwnerError("Not authorized to view this restaurant")

    rows = await res_repo.list_by_restaurant(restaurant_id)
    return RestaurantBookings(restaurant=restaurant, slots=group_by_slot(rows), reservations=rows)


def group_by_slot(rows: list[tuple[Reservation, User]]) -> list[SlotBookings]:
    """Group reservations per (date, time) keeping first-seen order, summing guests."""
    groups: dict[tuple[date, str], SlotBookings] = {}
    for reservation, user in rows:
        key = (reservation.date, reservation.time)
        group = groups.get(key)
        if group is None:
            group = groups[key] = SlotBookings(date=reservation.date, time=reservation.time)
        group.booked += reservation.guests
        group.reservations.append((reservation, user))
    return list(groups.values())
