"""Schedule index overlap tests."""

from __future__ import annotations

from datetime import date, time

import pytest

from reservation_portal.data_access import schedule_dao
from reservation_portal.errors import ValidationError
from reservation_portal.models.entities import Weekday


def _course_labels(slots):
    return [slot.course_label for slot in slots]


def test_overlap_includes_boundary_and_excludes_later_slot(app, faculty_user):
    with app.app_context():
        touching = schedule_dao.create_slot(faculty_user.user_id, "Senin", "11:00", "12:00", "Touching Slot")
        later = schedule_dao.create_slot(faculty_user.user_id, "Senin", "11:01", "12:00", "Later Slot")

        slots = schedule_dao.find_overlapping("Senin", "09:00", "11:00")
        labels = _course_labels(slots)

        # seeded Senin 10:00-12:00 slot overlaps the window
        assert "Algoritma dan Pemrograman" in labels
        assert touching.course_label in labels
        assert later.course_label not in labels
        assert "Basis Data" not in labels


def test_slot_ending_at_window_start_counts_as_overlap(app, faculty_user):
    with app.app_context():
        schedule_dao.create_slot(faculty_user.user_id, "Kamis", "07:00", "09:00", "Pagi")
        slots = schedule_dao.find_overlapping(Weekday.KAMIS, time(9, 0), time(10, 0))
        assert _course_labels(slots) == ["Pagi"]


def test_overlap_carries_instructor_details(app, faculty_user):
    with app.app_context():
        slots = schedule_dao.find_overlapping("Senin", "10:30", "10:45")
        assert len(slots) == 1
        slot = slots[0]
        assert slot.instructor_id == faculty_user.user_id
        assert slot.instructor_name == "Dr. Rina Wulandari"
        assert slot.weekday is Weekday.SENIN
        assert slot.start_time == time(10, 0)
        assert slot.end_time == time(12, 0)


def test_overlap_returns_empty_list_when_nothing_matches(app):
    with app.app_context():
        assert schedule_dao.find_overlapping("Minggu", "08:00", "17:00") == []
        assert schedule_dao.find_overlapping("Senin", "06:00", "07:00") == []


def test_overlap_results_are_ordered_by_start_time(app):
    with app.app_context():
        slots = schedule_dao.find_overlapping("Senin", "08:00", "16:00")
        assert _course_labels(slots) == ["Algoritma dan Pemrograman", "Basis Data"]


def test_invalid_lookup_arguments(app):
    with app.app_context():
        with pytest.raises(ValidationError):
            schedule_dao.find_overlapping("Monday", "09:00", "10:00")
        with pytest.raises(ValidationError):
            schedule_dao.find_overlapping("Senin", "9 o'clock", "10:00")
        with pytest.raises(ValidationError):
            schedule_dao.find_overlapping("Senin", "11:00", "10:00")


def test_create_slot_requires_positive_length(app, faculty_user):
    with app.app_context():
        with pytest.raises(ValidationError):
            schedule_dao.create_slot(faculty_user.user_id, "Selasa", "10:00", "10:00", "Kosong")


def test_weekday_from_date():
    assert Weekday.from_date(date(2025, 1, 6)) is Weekday.SENIN
    assert Weekday.from_date(date(2025, 1, 10)) is Weekday.JUMAT
    assert Weekday.from_date(date(2025, 1, 12)) is Weekday.MINGGU


def test_instructor_timetable_is_ordered_by_weekday(app, faculty_user):
    with app.app_context():
        schedule_dao.create_slot(faculty_user.user_id, "Selasa", "08:00", "09:00", "Tutorial")
        slots = schedule_dao.list_slots_for_instructor(faculty_user.user_id)
        assert [slot.weekday for slot in slots] == [Weekday.SENIN, Weekday.SELASA, Weekday.RABU]
