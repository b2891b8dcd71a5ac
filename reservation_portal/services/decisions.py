"""Admin decision workflow around :func:`lifecycle.decide`.

Resolves the caller through the users table, refuses non-admins before the
engine is touched, then records the decision in ``admin_logs`` and drops a
notification in the requester's inbox.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from flask import current_app

from ..data_access import notifications_dao, reservations_dao, users_dao
from ..data_access.db import utcnow
from ..errors import Forbidden, StoreUnavailable
from ..models.entities import Reservation, ReservationStatus, User
from . import lifecycle, queries

_NOTIFICATION_TEMPLATES = {
    ReservationStatus.APPROVED: "Your reservation #{reservation_id} has been approved.",
    ReservationStatus.REJECTED: "Your reservation #{reservation_id} has been rejected.",
}


def _resolve_admin(actor_id: int) -> User:
    actor = users_dao.get_user_by_id(actor_id)
    if actor is None or not actor.is_active or not actor.is_admin:
        current_app.logger.warning("Rejected admin decision attempt by user %s", actor_id)
        raise Forbidden("Only administrators can decide reservations.")
    return actor


def _notify_requester(reservation: Reservation, now: datetime) -> None:
    message = _NOTIFICATION_TEMPLATES[reservation.status].format(reservation_id=reservation.reservation_id)
    if reservation.admin_annotation:
        message = f"{message} Note: {reservation.admin_annotation}"
    notifications_dao.create_notification(
        reservation.requester_id,
        message,
        created_at=now,
        reservation_id=reservation.reservation_id,
    )


def decide(
    actor_id: int,
    reservation_id: int,
    outcome: str | ReservationStatus,
    annotation: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Reservation:
    actor = _resolve_admin(actor_id)
    now = now or utcnow()
    reservation = lifecycle.decide(actor, reservation_id, outcome, annotation=annotation, now=now)
    # The decision is already committed; follow-on write failures are logged, not raised.
    try:
        reservations_dao.log_admin_action(
            actor.user_id,
            f"{reservation.status.value.title()} reservation {reservation_id}",
            details=reservation.admin_annotation,
        )
    except StoreUnavailable:
        current_app.logger.error("Audit entry for reservation %s was not recorded", reservation_id)
    try:
        _notify_requester(reservation, now)
    except StoreUnavailable:
        current_app.logger.error("Requester of reservation %s was not notified", reservation_id)
    return reservation


def approve(actor_id: int, reservation_id: int, annotation: Optional[str] = None) -> Reservation:
    return decide(actor_id, reservation_id, ReservationStatus.APPROVED, annotation)


def reject(actor_id: int, reservation_id: int, annotation: Optional[str]) -> Reservation:
    return decide(actor_id, reservation_id, ReservationStatus.REJECTED, annotation)


def pending_queue(actor_id: int) -> list[Reservation]:
    """Pending reservations awaiting a decision, oldest first."""

    return queries.pending_queue(_resolve_admin(actor_id))
