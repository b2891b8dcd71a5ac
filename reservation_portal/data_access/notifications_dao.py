"""Per-user notification inbox written when an admin decides a reservation."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..models.entities import Notification
from .db import execute, from_db_datetime, get_db, query_all, to_db_datetime


def _row_to_notification(row) -> Notification:
    return Notification(
        notification_id=row["notification_id"],
        user_id=row["user_id"],
        reservation_id=row["reservation_id"],
        message=row["message"],
        is_read=bool(row["is_read"]),
        created_at=from_db_datetime(row["created_at"]),
    )


def create_notification(
    user_id: int,
    message: str,
    created_at: datetime,
    reservation_id: Optional[int] = None,
) -> None:
    execute(
        get_db(),
        """
        INSERT INTO notifications (user_id, reservation_id, message, created_at)
        VALUES (?, ?, ?, ?)
        """,
        (user_id, reservation_id, message, to_db_datetime(created_at)),
    )


def list_for_user(user_id: int, unread_only: bool = False) -> list[Notification]:
    """Newest notifications first."""

    query = "SELECT * FROM notifications WHERE user_id = ?"
    if unread_only:
        query += " AND is_read = 0"
    query += " ORDER BY created_at DESC, notification_id DESC"
    rows = query_all(get_db(), query, (user_id,))
    return [_row_to_notification(row) for row in rows]


def mark_all_read(user_id: int) -> int:
    cursor = execute(
        get_db(),
        "UPDATE notifications SET is_read = 1 WHERE user_id = ? AND is_read = 0",
        (user_id,),
    )
    return cursor.rowcount
