"""Data access helpers for reservations.

State changes go through :func:`transition_from_pending`, a single conditional
``UPDATE`` that only matches rows still in ``pending``. Callers learn whether
they won by the returned row count, never by reading first.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..models.entities import Reservation, ReservationStatus, ResourceKind, Role
from .db import execute, from_db_datetime, get_db, query_all, query_one, to_db_datetime

_RESERVATION_SELECT = """
    SELECT r.*,
           u.full_name AS requester_name,
           u.nim_nip AS requester_nim_nip,
           u.role AS requester_role
    FROM reservations r
    LEFT JOIN users u ON u.user_id = r.requester_id
"""


def _row_to_reservation(row) -> Reservation:
    return Reservation(
        reservation_id=row["reservation_id"],
        requester_id=row["requester_id"],
        kind=ResourceKind(row["kind"]),
        resource_id=row["resource_id"],
        purpose=row["purpose"],
        start_datetime=from_db_datetime(row["start_datetime"]),
        end_datetime=from_db_datetime(row["end_datetime"]),
        status=ReservationStatus(row["status"]),
        admin_annotation=row["admin_annotation"],
        created_at=from_db_datetime(row["created_at"]),
        updated_at=from_db_datetime(row["updated_at"]),
        requester_name=row["requester_name"],
        requester_nim_nip=row["requester_nim_nip"],
        requester_role=Role(row["requester_role"]) if row["requester_role"] else None,
    )


def insert_reservation(
    requester_id: int,
    kind: ResourceKind,
    resource_id: int,
    purpose: str,
    start_datetime: datetime,
    end_datetime: datetime,
    created_at: datetime,
) -> Reservation:
    """Persist a new pending reservation with matching created/updated stamps."""

    db = get_db()
    stamp = to_db_datetime(created_at)
    cursor = execute(
        db,
        """
        INSERT INTO reservations (
            requester_id, kind, resource_id, purpose,
            start_datetime, end_datetime, status, created_at, updated_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            requester_id,
            kind.value,
            resource_id,
            purpose,
            to_db_datetime(start_datetime),
            to_db_datetime(end_datetime),
            ReservationStatus.PENDING.value,
            stamp,
            stamp,
        ),
    )
    return get_reservation_by_id(cursor.lastrowid, connection=db)


def get_reservation_by_id(reservation_id: int, connection=None) -> Reservation | None:
    """Fetch a specific reservation."""

    db = connection or get_db()
    row = query_one(
        db,
        _RESERVATION_SELECT + " WHERE r.reservation_id = ?",
        (reservation_id,),
    )
    return _row_to_reservation(row) if row else None


def transition_from_pending(
    reservation_id: int,
    target: ReservationStatus,
    updated_at: datetime,
    annotation: Optional[str] = None,
    requester_id: Optional[int] = None,
) -> bool:
    """Move a reservation out of ``pending`` in one conditional write.

    ``annotation`` is only written when moving to an admin decision. When
    ``requester_id`` is given the row must also belong to that requester.
    Returns ``True`` when this call performed the transition.
    """

    query = "UPDATE reservations SET status = ?, updated_at = ?"
    params: list = [target.value, to_db_datetime(updated_at)]
    if target in (ReservationStatus.APPROVED, ReservationStatus.REJECTED):
        query += ", admin_annotation = ?"
        params.append(annotation)
    query += " WHERE reservation_id = ? AND status = ?"
    params.extend([reservation_id, ReservationStatus.PENDING.value])
    if requester_id is not None:
        query += " AND requester_id = ?"
        params.append(requester_id)
    cursor = execute(get_db(), query, params)
    return cursor.rowcount == 1


def has_conflict(
    kind: ResourceKind,
    resource_id: int,
    start_datetime: datetime,
    end_datetime: datetime,
    exclude_reservation_id: Optional[int] = None,
) -> bool:
    """Return True when a pending/approved reservation overlaps the window.

    Windows that merely touch (one ends when the other starts) do not conflict.
    """

    query = """
        SELECT 1 FROM reservations
        WHERE kind = ?
          AND resource_id = ?
          AND status IN ('pending', 'approved')
          AND NOT (end_datetime <= ? OR start_datetime >= ?)
    """
    params: list = [kind.value, resource_id, to_db_datetime(start_datetime), to_db_datetime(end_datetime)]
    if exclude_reservation_id:
        query += " AND reservation_id != ?"
        params.append(exclude_reservation_id)
    row = query_one(get_db(), query + " LIMIT 1", params)
    return row is not None


def _observed_status_clause(status: ReservationStatus, now: datetime) -> tuple[str, list]:
    """SQL predicate matching reservations whose observed status is ``status``."""

    stamp = to_db_datetime(now)
    if status is ReservationStatus.COMPLETED:
        return (
            "(r.status = 'completed' OR (r.status = 'approved' AND r.end_datetime < ?))",
            [stamp],
        )
    if status is ReservationStatus.APPROVED:
        return "(r.status = 'approved' AND r.end_datetime >= ?)", [stamp]
    return "r.status = ?", [status.value]


def list_reservations(
    now: datetime,
    requester_id: Optional[int] = None,
    status: Optional[ReservationStatus] = None,
    limit: Optional[int] = None,
    oldest_first: bool = False,
) -> list[Reservation]:
    """Return reservations newest first, optionally scoped and filtered."""

    query = _RESERVATION_SELECT
    clauses: list[str] = []
    params: list = []
    if requester_id is not None:
        clauses.append("r.requester_id = ?")
        params.append(requester_id)
    if status is not None:
        clause, clause_params = _observed_status_clause(status, now)
        clauses.append(clause)
        params.extend(clause_params)
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    direction = "ASC" if oldest_first else "DESC"
    query += f" ORDER BY r.created_at {direction}, r.reservation_id {direction}"
    if limit:
        query += " LIMIT ?"
        params.append(limit)
    rows = query_all(get_db(), query, params)
    return [_row_to_reservation(row) for row in rows]


def count_by_observed_status(now: datetime, requester_id: Optional[int] = None) -> dict[str, int]:
    """Count reservations per observed status in one pass."""

    query = """
        SELECT
            CASE
                WHEN status = 'approved' AND end_datetime < ? THEN 'completed'
                ELSE status
            END AS observed,
            COUNT(*) AS total
        FROM reservations
    """
    params: list = [to_db_datetime(now)]
    if requester_id is not None:
        query += " WHERE requester_id = ?"
        params.append(requester_id)
    query += " GROUP BY observed"
    rows = query_all(get_db(), query, params)
    counts = {status.value: 0 for status in ReservationStatus}
    for row in rows:
        counts[row["observed"]] = row["total"]
    return counts


def log_admin_action(admin_id: int, action: str, details: Optional[str] = None) -> None:
    """Insert a row into admin_logs."""

    execute(
        get_db(),
        """
        INSERT INTO admin_logs (admin_id, action, target_table, details)
        VALUES (?, ?, ?, ?)
        """,
        (admin_id, action, "reservations", details),
    )


def list_admin_actions(limit: int = 50) -> list[dict]:
    rows = query_all(
        get_db(),
        "SELECT * FROM admin_logs ORDER BY log_id DESC LIMIT ?",
        (limit,),
    )
    return [dict(row) for row in rows]
