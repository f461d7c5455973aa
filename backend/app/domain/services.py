from dataclasses import dataclass
from datetime import date

from .errors import CapacityExceededError, InvalidReservationError


@dataclass(frozen=True)
class SlotKey:
    restaurant_id: int
    date: date
    time: str


@dataclass(frozen=True)
class SlotSnapshot:
    total_seats: int
    booked: int

    @property
    def available(self) -> int:
        return available_seats(self.total_seats, self.booked)


def available_seats(total_seats: int, booked: int) -> int:
    """Seats left for a slot. Clamped at zero when capacity was lowered below bookings."""
    return max(0, total_seats - booked)


def validate_admission(snapshot: SlotSnapshot, *, guests: int) -> int:
    """
    Pure capacity check for a new reservation against a slot snapshot.
    Returns remaining seats after booking if OK. Raises domain errors otherwise.
    """
    if guests <= 0:
        raise InvalidReservationError("guests must be positive")

    available = snapshot.available
    if guests > available:
        raise CapacityExceededError(available)
    return available - guests
