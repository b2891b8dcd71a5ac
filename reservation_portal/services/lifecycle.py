"""Reservation lifecycle engine.

``pending`` moves to ``approved``/``rejected`` by an admin decision or to
``cancelled`` by its owner. ``approved`` becomes ``completed`` only in the
eyes of viewers once its end has passed (see :func:`observed_status`); the
stored row is never rewritten for that. Every other status is final.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from flask import current_app

from ..data_access import reservations_dao, resources_dao
from ..data_access.db import utcnow
from ..errors import (
    Forbidden,
    InvalidTransition,
    MissingAnnotation,
    NotOwner,
    ReservationConflict,
    ReservationNotFound,
    ValidationError,
)
from ..models.entities import Reservation, ReservationStatus, ResourceKind, User

DECISION_OUTCOMES = (ReservationStatus.APPROVED, ReservationStatus.REJECTED)


def _as_utc(value: datetime, field: str) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationError(f"{field} must be a datetime.")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _load(reservation_id: int) -> Reservation:
    reservation = reservations_dao.get_reservation_by_id(reservation_id)
    if reservation is None:
        raise ReservationNotFound(f"Reservation {reservation_id} does not exist.")
    return reservation


def _lost_race(reservation_id: int, target: ReservationStatus) -> InvalidTransition:
    """Build the error for a conditional write that matched no row."""

    current = _load(reservation_id)
    current_app.logger.warning(
        "Reservation %s changed to %s before it could become %s",
        reservation_id,
        current.status.value,
        target.value,
    )
    return InvalidTransition(reservation_id, current.status.value, target.value)


def observed_status(reservation: Reservation, now: datetime) -> ReservationStatus:
    """Status as shown to viewers: approved reservations past their end read as completed."""

    if reservation.status is ReservationStatus.APPROVED and _as_utc(now, "now") > reservation.end_datetime:
        return ReservationStatus.COMPLETED
    return reservation.status


def submit(
    requester: User,
    kind: str | ResourceKind,
    resource_id: int,
    purpose: str,
    start: datetime,
    end: datetime,
    now: Optional[datetime] = None,
) -> Reservation:
    """Create a pending reservation.

    Catalog availability is not re-checked here; callers pick from
    :func:`resources_dao.list_available` beforehand. Overlapping reservations
    for the same resource are accepted unless ``RESERVATION_REJECT_OVERLAPS``
    is enabled.
    """

    kind = resources_dao.parse_kind(kind)
    purpose = _clean_text(purpose)
    if not purpose:
        raise ValidationError("A purpose is required.")
    start = _as_utc(start, "start")
    end = _as_utc(end, "end")
    if end <= start:
        raise ValidationError("The return time must be after the pick-up time.")
    if resources_dao.get_resource(kind, resource_id) is None:
        raise ValidationError(f"Unknown {kind.value} resource {resource_id}.")
    if current_app.config.get("RESERVATION_REJECT_OVERLAPS") and reservations_dao.has_conflict(
        kind, resource_id, start, end
    ):
        raise ReservationConflict("This time overlaps an existing reservation for the resource.")

    reservation = reservations_dao.insert_reservation(
        requester.user_id,
        kind,
        resource_id,
        purpose,
        start,
        end,
        created_at=now or utcnow(),
    )
    current_app.logger.info(
        "Reservation %s submitted by user %s for %s %s",
        reservation.reservation_id,
        requester.user_id,
        kind.value,
        resource_id,
    )
    return reservation


def cancel(actor: User, reservation_id: int, now: Optional[datetime] = None) -> Reservation:
    """Let the owner withdraw a reservation that is still pending."""

    reservation = _load(reservation_id)
    target = ReservationStatus.CANCELLED
    if reservation.status is not ReservationStatus.PENDING:
        raise InvalidTransition(reservation_id, reservation.status.value, target.value)
    if reservation.requester_id != actor.user_id:
        current_app.logger.warning(
            "User %s tried to cancel reservation %s owned by %s",
            actor.user_id,
            reservation_id,
            reservation.requester_id,
        )
        raise NotOwner("Only the requester can cancel this reservation.")

    if not reservations_dao.transition_from_pending(
        reservation_id, target, now or utcnow(), requester_id=actor.user_id
    ):
        raise _lost_race(reservation_id, target)
    current_app.logger.info("Reservation %s cancelled by its requester", reservation_id)
    return _load(reservation_id)


def decide(
    actor: User,
    reservation_id: int,
    outcome: str | ReservationStatus,
    annotation: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Reservation:
    """Approve or reject a pending reservation. Rejections need an annotation."""

    try:
        outcome = ReservationStatus(outcome)
    except ValueError as exc:
        raise ValidationError(f"Unknown decision '{outcome}'.") from exc
    if outcome not in DECISION_OUTCOMES:
        raise ValidationError("A decision must approve or reject.")
    annotation = _clean_text(annotation)
    if outcome is ReservationStatus.REJECTED and not annotation:
        raise MissingAnnotation("A rejection needs a note for the requester.")

    reservation = _load(reservation_id)
    if reservation.status is not ReservationStatus.PENDING:
        raise InvalidTransition(reservation_id, reservation.status.value, outcome.value)
    if not actor.is_admin:
        current_app.logger.warning(
            "User %s without admin role tried to %s reservation %s",
            actor.user_id,
            outcome.value,
            reservation_id,
        )
        raise Forbidden("Only administrators can decide reservations.")

    if not reservations_dao.transition_from_pending(reservation_id, outcome, now or utcnow(), annotation=annotation):
        raise _lost_race(reservation_id, outcome)
    current_app.logger.info("Reservation %s %s by admin %s", reservation_id, outcome.value, actor.user_id)
    return _load(reservation_id)
