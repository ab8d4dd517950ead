class BookingError(Exception):
    """Base class for booking workflow failures."""


class ResourceNotFound(BookingError):
    pass


class RequestNotFound(BookingError):
    pass


class ResourceUnavailable(BookingError):
    pass


class InvalidInterval(BookingError):
    pass


class InvalidStatus(BookingError):
    pass


class InvalidTransition(BookingError):
    pass


class NotRequestOwner(BookingError):
    pass


class BookingConflict(BookingError):
    """An approved booking already holds an overlapping slot."""
