"""Admin decision workflow tests: authorization, audit trail, notifications."""

from __future__ import annotations

import pytest

from reservation_portal.data_access import notifications_dao, reservations_dao, users_dao
from reservation_portal.data_access.db import get_db
from reservation_portal.errors import Forbidden, InvalidTransition, MissingAnnotation
from reservation_portal.models.entities import ReservationStatus
from reservation_portal.services import decisions, lifecycle


def test_approve_records_audit_and_notifies_requester(app, admin_user, student_user, pending_reservation):
    with app.app_context():
        approved = decisions.approve(admin_user.user_id, pending_reservation.reservation_id)
        assert approved.status is ReservationStatus.APPROVED

        logs = reservations_dao.list_admin_actions()
        assert logs[0]["admin_id"] == admin_user.user_id
        assert logs[0]["action"] == f"Approved reservation {pending_reservation.reservation_id}"

        inbox = notifications_dao.list_for_user(student_user.user_id)
        assert len(inbox) == 1
        assert inbox[0].reservation_id == pending_reservation.reservation_id
        assert "approved" in inbox[0].message


def test_reject_passes_annotation_to_requester(app, admin_user, student_user, pending_reservation):
    with app.app_context():
        rejected = decisions.reject(admin_user.user_id, pending_reservation.reservation_id, "Lab dipakai UTS")
        assert rejected.admin_annotation == "Lab dipakai UTS"
        message = notifications_dao.list_for_user(student_user.user_id)[0].message
        assert message.endswith("Note: Lab dipakai UTS")


def test_decision_survives_a_failed_notification_write(app, admin_user, pending_reservation, caplog):
    with app.app_context():
        db = get_db()
        db.execute("DROP TABLE notifications")
        db.commit()

        approved = decisions.approve(admin_user.user_id, pending_reservation.reservation_id)
        assert approved.status is ReservationStatus.APPROVED
        assert "was not notified" in caplog.text

        stored = reservations_dao.get_reservation_by_id(pending_reservation.reservation_id)
        assert stored.status is ReservationStatus.APPROVED
        assert reservations_dao.list_admin_actions()[0]["action"] == (
            f"Approved reservation {pending_reservation.reservation_id}"
        )

        with pytest.raises(InvalidTransition):
            decisions.approve(admin_user.user_id, pending_reservation.reservation_id)


def test_non_admin_is_refused_before_the_engine_runs(app, faculty_user, pending_reservation, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("engine should not be invoked")

    monkeypatch.setattr(lifecycle, "decide", fail)
    with app.app_context():
        with pytest.raises(Forbidden):
            decisions.approve(faculty_user.user_id, pending_reservation.reservation_id)
        with pytest.raises(Forbidden):
            decisions.approve(99999, pending_reservation.reservation_id)


def test_deactivated_admin_is_refused(app, admin_user, pending_reservation):
    with app.app_context():
        users_dao.deactivate_user(admin_user.user_id)
        with pytest.raises(Forbidden):
            decisions.approve(admin_user.user_id, pending_reservation.reservation_id)


def test_failed_decisions_leave_no_side_effects(app, admin_user, student_user, pending_reservation):
    with app.app_context():
        with pytest.raises(MissingAnnotation):
            decisions.reject(admin_user.user_id, pending_reservation.reservation_id, "")

        decisions.approve(admin_user.user_id, pending_reservation.reservation_id)
        with pytest.raises(InvalidTransition):
            decisions.reject(admin_user.user_id, pending_reservation.reservation_id, "Too late")

        assert len(reservations_dao.list_admin_actions()) == 1
        assert len(notifications_dao.list_for_user(student_user.user_id)) == 1


def test_pending_queue_requires_admin(app, admin_user, student_user):
    with app.app_context():
        assert [r.status for r in decisions.pending_queue(admin_user.user_id)] == [ReservationStatus.PENDING]
        with pytest.raises(Forbidden):
            decisions.pending_queue(student_user.user_id)
