"""Schedule index: weekly teaching slots and the teaching-overlap lookup."""

from __future__ import annotations

from datetime import time
from typing import Optional

from ..errors import ValidationError
from ..models.entities import TeachingSlot, Weekday
from .db import execute, get_db, query_all, query_one

_SLOT_SELECT = """
    SELECT
        s.*,
        u.full_name AS instructor_name
    FROM teaching_slots s
    JOIN users u ON u.user_id = s.instructor_id
"""

_WEEKDAY_ORDER = "CASE s.weekday " + " ".join(
    f"WHEN '{day.value}' THEN {index}" for index, day in enumerate(Weekday)
) + " END"


def parse_weekday(value: str | Weekday) -> Weekday:
    try:
        return Weekday(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown weekday '{value}'.") from exc


def parse_time(value: str | time) -> time:
    """Accept ``time`` objects or ``HH:MM`` / ``HH:MM:SS`` strings."""

    if isinstance(value, time):
        return value.replace(tzinfo=None)
    try:
        return time.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"Invalid time of day '{value}'.") from exc


def _time_key(value: time) -> str:
    return value.strftime("%H:%M:%S")


def _row_to_slot(row) -> TeachingSlot:
    return TeachingSlot(
        slot_id=row["slot_id"],
        instructor_id=row["instructor_id"],
        instructor_name=row["instructor_name"],
        weekday=Weekday(row["weekday"]),
        start_time=time.fromisoformat(row["start_time"]),
        end_time=time.fromisoformat(row["end_time"]),
        course_label=row["course_label"],
        room_id=row["room_id"],
    )


def create_slot(
    instructor_id: int,
    weekday: str | Weekday,
    start_time: str | time,
    end_time: str | time,
    course_label: str,
    room_id: Optional[int] = None,
) -> TeachingSlot:
    """Append a teaching slot to the timetable."""

    start = parse_time(start_time)
    end = parse_time(end_time)
    if end <= start:
        raise ValidationError("A teaching slot must end after it starts.")
    db = get_db()
    cursor = execute(
        db,
        """
        INSERT INTO teaching_slots (instructor_id, weekday, start_time, end_time, course_label, room_id)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (instructor_id, parse_weekday(weekday).value, _time_key(start), _time_key(end), course_label, room_id),
    )
    row = query_one(db, _SLOT_SELECT + " WHERE s.slot_id = ?", (cursor.lastrowid,))
    return _row_to_slot(row)


def find_overlapping(
    weekday: str | Weekday,
    window_start: str | time,
    window_end: str | time,
) -> list[TeachingSlot]:
    """Return slots on ``weekday`` that overlap the window.

    Boundaries are inclusive: a slot ending exactly when the window starts, or
    starting exactly when it ends, counts as overlapping.
    """

    day = parse_weekday(weekday)
    start = parse_time(window_start)
    end = parse_time(window_end)
    if end < start:
        raise ValidationError("The lookup window must not end before it starts.")
    rows = query_all(
        get_db(),
        _SLOT_SELECT
        + """
        WHERE s.weekday = ?
          AND s.end_time >= ?
          AND s.start_time <= ?
        ORDER BY s.start_time ASC, s.slot_id ASC
        """,
        (day.value, _time_key(start), _time_key(end)),
    )
    return [_row_to_slot(row) for row in rows]


def list_slots_for_instructor(instructor_id: int) -> list[TeachingSlot]:
    rows = query_all(
        get_db(),
        _SLOT_SELECT + f" WHERE s.instructor_id = ? ORDER BY {_WEEKDAY_ORDER}, s.start_time ASC",
        (instructor_id,),
    )
    return [_row_to_slot(row) for row in rows]
