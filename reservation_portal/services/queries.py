"""Role-scoped reservation listings for history pages and dashboards."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from ..data_access import reservations_dao
from ..data_access.db import utcnow
from ..errors import Forbidden, ValidationError
from ..models.entities import Reservation, ReservationStatus, User


class Scope(str, Enum):
    OWN = "own"
    ALL = "all"


def parse_scope(value: str | Scope) -> Scope:
    try:
        return Scope(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown scope '{value}'.") from exc


def parse_status_filter(value: Optional[str | ReservationStatus]) -> Optional[ReservationStatus]:
    if value is None or value == "":
        return None
    try:
        return ReservationStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown status '{value}'.") from exc


def _requester_filter(actor: User, scope: Scope) -> Optional[int]:
    if scope is Scope.ALL:
        if not actor.is_admin:
            raise Forbidden("Only administrators can list every reservation.")
        return None
    return actor.user_id


def list_for(
    actor: User,
    scope: str | Scope = Scope.OWN,
    status: Optional[str | ReservationStatus] = None,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> list[Reservation]:
    """Return reservations newest first.

    ``status`` matches the observed status, so ``completed`` finds approved
    reservations that have already ended. ``limit`` keeps the ``n`` most recent.
    """

    requester_id = _requester_filter(actor, parse_scope(scope))
    if limit is not None and limit <= 0:
        raise ValidationError("limit must be a positive integer.")
    return reservations_dao.list_reservations(
        now or utcnow(),
        requester_id=requester_id,
        status=parse_status_filter(status),
        limit=limit,
    )


def pending_queue(actor: User) -> list[Reservation]:
    """Pending reservations across all users, oldest first, for moderation."""

    _requester_filter(actor, Scope.ALL)
    return reservations_dao.list_reservations(
        utcnow(),
        status=ReservationStatus.PENDING,
        oldest_first=True,
    )


def summarize(actor: User, scope: str | Scope = Scope.OWN, now: Optional[datetime] = None) -> dict:
    """Dashboard counters: totals plus a breakdown by observed status."""

    requester_id = _requester_filter(actor, parse_scope(scope))
    counts = reservations_dao.count_by_observed_status(now or utcnow(), requester_id=requester_id)
    return {
        "total": sum(counts.values()),
        "pending": counts[ReservationStatus.PENDING.value],
        # approved ever, including those that have since completed
        "approved": counts[ReservationStatus.APPROVED.value] + counts[ReservationStatus.COMPLETED.value],
        "active": counts[ReservationStatus.APPROVED.value],
        "by_status": counts,
    }
