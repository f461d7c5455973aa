class DomainError(Exception):
    """Base class for business rule violations raised by use cases."""


class RestaurantNotFoundError(DomainError):
    pass


class NotRestaurantOwnerError(DomainError):
    pass


class CapacityExceededError(DomainError):
    def __init__(self, available: int) -> None:
        self.available = available
        super().__init__(
            f"Only {available} seat(s) available for this date and time. "
            "Please choose fewer guests or another slot."
        )


class InvalidReservationError(DomainError):
    pass


class EmailAlreadyRegisteredError(DomainError):
    pass


class InvalidCredentialsError(DomainError):
    pass
