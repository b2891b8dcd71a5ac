"""Catalog and timetable lookups used while filling in a reservation."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, jsonify, request
from flask_login import login_required

from ..data_access import resources_dao, schedule_dao
from ..errors import ValidationError
from ..models.entities import Weekday
from .serializers import resource_payload, slot_payload

bp = Blueprint("catalog", __name__)


@bp.route("/catalog/<kind>")
@login_required
def available(kind: str):
    """List resources of one kind that can currently be requested."""

    resources = resources_dao.list_available(kind)
    return jsonify([resource_payload(resource) for resource in resources])


@bp.route("/schedule/overlaps")
@login_required
def overlaps():
    """Instructors teaching during a window, by weekday or by calendar date."""

    raw_weekday = (request.args.get("weekday") or "").strip()
    raw_date = (request.args.get("date") or "").strip()
    start = (request.args.get("start") or "").strip()
    end = (request.args.get("end") or "").strip()
    if not start or not end:
        raise ValidationError("Both start and end times are required.")
    if raw_date:
        try:
            weekday = Weekday.from_date(date.fromisoformat(raw_date))
        except ValueError as exc:
            raise ValidationError(f"Invalid date '{raw_date}'.") from exc
    elif raw_weekday:
        weekday = schedule_dao.parse_weekday(raw_weekday)
    else:
        raise ValidationError("Provide either a weekday or a date.")

    slots = schedule_dao.find_overlapping(weekday, start, end)
    return jsonify({"weekday": weekday.value, "slots": [slot_payload(slot) for slot in slots]})
