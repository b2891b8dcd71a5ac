"""Reservation query and filter layer tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from reservation_portal.errors import Forbidden, ValidationError
from reservation_portal.models.entities import ReservationStatus
from reservation_portal.services import lifecycle, queries

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _submit_series(requester, resource, count, first_created):
    created = []
    for index in range(count):
        start = datetime(2025, 7, 1, 8, 0, tzinfo=timezone.utc) + timedelta(days=index)
        created.append(
            lifecycle.submit(
                requester,
                resource.kind,
                resource.resource_id,
                f"Kegiatan {index}",
                start,
                start + timedelta(hours=2),
                now=first_created + timedelta(minutes=index),
            )
        )
    return created


def test_own_scope_returns_only_actor_rows_newest_first(app, student_user, other_student, room):
    with app.app_context():
        mine = _submit_series(student_user, room, 3, NOW - timedelta(days=1))
        _submit_series(other_student, room, 2, NOW - timedelta(days=1))

        rows = queries.list_for(student_user, "own", now=NOW)

        assert {row.requester_id for row in rows} == {student_user.user_id}
        created = [row.created_at for row in rows]
        assert created == sorted(created, reverse=True)
        assert rows[0].reservation_id == mine[-1].reservation_id
        # three new rows plus the seeded pending one
        assert len(rows) == 4


def test_all_scope_requires_admin(app, student_user, faculty_user, admin_user):
    with app.app_context():
        with pytest.raises(Forbidden):
            queries.list_for(student_user, "all")
        with pytest.raises(Forbidden):
            queries.list_for(faculty_user, "all")

        every = queries.list_for(admin_user, "all", now=NOW)
        assert len(every) == 3
        assert {row.requester_id for row in every} != {admin_user.user_id}


def test_own_scope_for_admin_is_still_restricted(app, admin_user):
    with app.app_context():
        assert queries.list_for(admin_user, "own", now=NOW) == []


def test_status_filter_matches_exactly(app, admin_user, other_student):
    with app.app_context():
        rejected = queries.list_for(other_student, "own", status="rejected", now=NOW)
        assert [row.status for row in rejected] == [ReservationStatus.REJECTED]

        pending = queries.list_for(admin_user, "all", status=ReservationStatus.PENDING, now=NOW)
        assert all(row.status is ReservationStatus.PENDING for row in pending)
        assert len(pending) == 1


def test_status_filter_uses_observed_completion(app, other_student):
    """The seeded approved projector reservation ended on 2025-01-06."""

    with app.app_context():
        completed = queries.list_for(other_student, "own", status="completed", now=NOW)
        assert len(completed) == 1
        assert completed[0].status is ReservationStatus.APPROVED
        assert queries.list_for(other_student, "own", status="approved", now=NOW) == []

        before_end = datetime(2025, 1, 6, 9, 30, tzinfo=timezone.utc)
        assert len(queries.list_for(other_student, "own", status="approved", now=before_end)) == 1
        assert queries.list_for(other_student, "own", status="completed", now=before_end) == []


def test_bounded_listing_truncates_most_recent(app, student_user, room):
    with app.app_context():
        created = _submit_series(student_user, room, 6, NOW)
        latest = queries.list_for(student_user, "own", limit=5, now=NOW)
        assert len(latest) == 5
        assert [row.reservation_id for row in latest] == [r.reservation_id for r in reversed(created[1:])]


def test_invalid_arguments(app, student_user):
    with app.app_context():
        with pytest.raises(ValidationError):
            queries.list_for(student_user, "everyone")
        with pytest.raises(ValidationError):
            queries.list_for(student_user, "own", status="lost")
        with pytest.raises(ValidationError):
            queries.list_for(student_user, "own", limit=0)


def test_summary_counts(app, admin_user, other_student, student_user):
    with app.app_context():
        own = queries.summarize(other_student, "own", now=NOW)
        assert own["total"] == 2
        assert own["pending"] == 0
        assert own["approved"] == 1
        assert own["active"] == 0
        assert own["by_status"]["completed"] == 1
        assert own["by_status"]["rejected"] == 1

        overall = queries.summarize(admin_user, "all", now=NOW)
        assert overall["total"] == 3
        assert overall["pending"] == 1

        with pytest.raises(Forbidden):
            queries.summarize(student_user, "all")


def test_pending_queue_is_oldest_first(app, admin_user, student_user, room):
    with app.app_context():
        _submit_series(student_user, room, 2, NOW)
        queue = queries.pending_queue(admin_user)
        created = [row.created_at for row in queue]
        assert created == sorted(created)
        assert len(queue) == 3
