import pytest
from app.domain.errors import CapacityExceededError, InvalidReservationError
from app.domain.services import SlotSnapshot, available_seats, validate_admission


def test_available_seats_subtracts_booked() -> None:
    assert available_seats(20, 15) == 5


def test_available_seats_never_negative_after_capacity_lowered() -> None:
    assert available_seats(10, 14) == 0


def test_rejects_when_guests_exceed_remaining() -> None:
    snap = SlotSnapshot(total_seats=20, booked=16)
    with pytest.raises(CapacityExceededError) as excinfo:
        validate_admission(snap, guests=5)
    assert excinfo.value.available == 4
    assert "Only 4 seat(s) available" in str(excinfo.value)


def test_accepts_exactly_remaining_capacity() -> None:
    snap = SlotSnapshot(total_seats=20, booked=15)
    assert validate_admission(snap, guests=5) == 0


def test_rejects_remaining_plus_one() -> None:
    snap = SlotSnapshot(total_seats=20, booked=15)
    with pytest.raises(CapacityExceededError) as excinfo:
        validate_admission(snap, guests=6)
    assert excinfo.value.available == 5


def test_rejects_non_positive_guests() -> None:
    snap = SlotSnapshot(total_seats=4, booked=0)
    with pytest.raises(InvalidReservationError):
        validate_admission(snap, guests=0)


def test_full_slot_reports_zero_available() -> None:
    snap = SlotSnapshot(total_seats=20, booked=20)
    with pytest.raises(CapacityExceededError) as excinfo:
        validate_admission(snap, guests=1)
    assert "Only 0 seat(s) available" in str(excinfo.value)
