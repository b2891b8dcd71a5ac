"""Domain errors raised by the reservation services."""

from __future__ import annotations


class ReservationError(Exception):
    """Base class for every failure reported by the reservation core."""

    code = "reservation_error"
    http_status = 400


class ValidationError(ReservationError):
    """Malformed or missing input: empty purpose, non-positive duration, bad enum value."""

    code = "validation_error"
    http_status = 400


class MissingAnnotation(ValidationError):
    """Raised when a rejection is submitted without an admin annotation."""

    code = "missing_annotation"


class Forbidden(ReservationError):
    """The actor lacks the role required for the operation."""

    code = "forbidden"
    http_status = 403


class NotOwner(Forbidden):
    """The actor tried to cancel a reservation that belongs to someone else."""

    code = "not_owner"


class ReservationNotFound(ReservationError):
    code = "not_found"
    http_status = 404


class InvalidTransition(ReservationError):
    """The reservation is not in the status the transition requires."""

    code = "invalid_transition"
    http_status = 409

    def __init__(self, reservation_id: int, current_status: str, target_status: str) -> None:
        super().__init__(
            f"Reservation {reservation_id} is {current_status}; cannot move to {target_status}."
        )
        self.reservation_id = reservation_id
        self.current_status = current_status
        self.target_status = target_status


class ReservationConflict(ReservationError):
    """Another live reservation already holds the resource for an overlapping window."""

    code = "conflict"
    http_status = 409


class StoreUnavailable(ReservationError):
    """The backing store could not be reached. Callers may retry with backoff."""

    code = "store_unavailable"
    http_status = 503
