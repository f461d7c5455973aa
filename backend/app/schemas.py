import re
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .models import ActivityLog, Reservation, Restaurant, User, UserRole
from .usecases.availability import Availability
from .usecases.reservations import MAX_CONTACT_LENGTH, MAX_TIME_LENGTH, RestaurantBookings
from .utils.auth import BCRYPT_MAX_BYTES

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_slot_date(value: Any) -> date:
    """Accept only YYYY-MM-DD strings (or date objects) that name a real calendar day."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.match(value.strip()):
        raise ValueError("Valid date (YYYY-MM-DD) is required")
    return date.fromisoformat(value.strip())


class RegisterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    role: UserRole = UserRole.USER

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    password: str = Field(min_length=1)


class AuthResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    token: str

    @classmethod
    def from_db(cls, *, user: User, token: str) -> "AuthResponse":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role, token=token)


class RestaurantCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    cuisine: str = Field(min_length=1, max_length=255)
    location: str = Field(min_length=1, max_length=255)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    total_seats: int = Field(ge=1)


class RestaurantUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    cuisine: Optional[str] = Field(default=None, min_length=1, max_length=255)
    location: Optional[str] = Field(default=None, min_length=1, max_length=255)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    total_seats: Optional[int] = Field(default=None, ge=1)

    @field_validator("name", "cuisine", "location", "total_seats")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value


class RestaurantRead(BaseModel):
    id: int
    name: str
    cuisine: str
    location: str
    rating: Optional[float]
    total_seats: int
    owner_id: Optional[int]

    @classmethod
    def from_db(cls, *, restaurant: Restaurant) -> "RestaurantRead":
        return cls(
            id=restaurant.id,
            name=restaurant.name,
            cuisine=restaurant.cuisine,
            location=restaurant.location,
            rating=restaurant.rating,
            total_seats=restaurant.total_seats,
            owner_id=restaurant.owner_id,
        )


class RestaurantSummary(BaseModel):
    id: int
    name: str
    cuisine: str
    location: str
    rating: Optional[float] = None


class AvailabilityRead(BaseModel):
    total_seats: int
    booked: int
    available: int

    @classmethod
    def from_domain(cls, availability: Availability) -> "AvailabilityRead":
        return cls(
            total_seats=availability.total_seats,
            booked=availability.booked,
            available=availability.available,
        )


class ReservationCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    restaurant_id: int = Field(ge=1)
    date: date
    time: str = Field(min_length=1, max_length=MAX_TIME_LENGTH)
    guests: int = Field(ge=1)
    contact_number: str = Field(min_length=1, max_length=MAX_CONTACT_LENGTH)

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> date:
        return parse_slot_date(value)


class ReservationRead(BaseModel):
    id: int
    user_id: int
    restaurant_id: int
    date: date
    time: str
    guests: int
    contact_number: str
    created_at: datetime
    restaurant: Optional[RestaurantSummary] = None

    @classmethod
    def from_db(cls, *, reservation: Reservation, restaurant: Optional[Restaurant] = None) -> "ReservationRead":
        summary = None
        if restaurant is not None:
            summary = RestaurantSummary(
                id=restaurant.id,
                name=restaurant.name,
                cuisine=restaurant.cuisine,
                location=restaurant.location,
                rating=restaurant.rating,
            )
        return cls(
            id=reservation.id,
            user_id=reservation.user_id,
            restaurant_id=reservation.restaurant_id,
            date=reservation.date,
            time=reservation.time,
            guests=reservation.guests,
            contact_number=reservation.contact_number,
            created_at=reservation.created_at,
            restaurant=summary,
        )


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    role: Optional[UserRole] = None


class BookingRead(ReservationRead):
    user: UserSummary

    @classmethod
    def from_row(cls, *, reservation: Reservation, user: User) -> "BookingRead":
        base = ReservationRead.from_db(reservation=reservation)
        return cls(**base.model_dump(), user=UserSummary(id=user.id, name=user.name, email=user.email))


class SlotBookingsRead(BaseModel):
    date: date
    time: str
    booked: int
    reservations: list[BookingRead]


class BookedRestaurant(BaseModel):
    id: int
    name: str
    total_seats: int


class RestaurantBookingsRead(BaseModel):
    restaurant: BookedRestaurant
    bookings: list[SlotBookingsRead]
    all_reservations: list[BookingRead]

    @classmethod
    def from_domain(cls, result: RestaurantBookings) -> "RestaurantBookingsRead":
        return cls(
            restaurant=BookedRestaurant(
                id=result.restaurant.id,
                name=result.restaurant.name,
                total_seats=result.restaurant.total_seats,
            ),
            bookings=[
                SlotBookingsRead(
                    date=slot.date,
                    time=slot.time,
                    booked=slot.booked,
                    reservations=[BookingRead.from_row(reservation=r, user=u) for r, u in slot.reservations],
                )
                for slot in result.slots
            ],
            all_reservations=[BookingRead.from_row(reservation=r, user=u) for r, u in result.reservations],
        )


class BookingCounts(BaseModel):
    daily: int
    weekly: int
    monthly: int


class StatsRead(BaseModel):
    users_count: int
    restaurants_count: int
    bookings: BookingCounts
    total_seats_booked: int


class ActivityLogRead(BaseModel):
    id: int
    action: str
    entity: str
    entity_id: Optional[int]
    user_id: Optional[int]
    metadata: Optional[dict[str, Any]]
    created_at: datetime
    user: Optional[UserSummary] = None

    @classmethod
    def from_row(cls, *, entry: ActivityLog, user: Optional[User]) -> "ActivityLogRead":
        return cls(
            id=entry.id,
            action=entry.action,
            entity=entry.entity,
            entity_id=entry.entity_id,
            user_id=entry.user_id,
            metadata=entry.details,
            created_at=entry.created_at,
            user=UserSummary(id=user.id, name=user.name, email=user.email, role=user.role) if user else None,
        )


class ActivityLogPage(BaseModel):
    logs: list[ActivityLogRead]
    total: int
