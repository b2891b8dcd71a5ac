"""Reservation requests, history, and owner cancellation."""

from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify, request
from flask_login import current_user, login_required
from flask_wtf import FlaskForm
from wtforms import DateTimeLocalField, IntegerField, SelectField, SubmitField, TextAreaField
from wtforms.validators import InputRequired, Length

from ..data_access import reservations_dao
from ..data_access.db import utcnow
from ..errors import ValidationError
from ..models.entities import ResourceKind
from ..services import lifecycle, queries
from .serializers import form_errors, reservation_payload

bp = Blueprint("reservations", __name__, url_prefix="/reservations")


class ReservationRequestForm(FlaskForm):
    """Form to request a room key or projector."""

    kind = SelectField(
        "Item",
        choices=[(ResourceKind.ROOM_KEY.value, "Room key"), (ResourceKind.PROJECTOR.value, "Projector")],
        validators=[InputRequired()],
    )
    resource_id = IntegerField("Resource", validators=[InputRequired()])
    purpose = TextAreaField("Purpose", validators=[InputRequired(), Length(max=500)])
    start_datetime = DateTimeLocalField(
        "Pick-up",
        format="%Y-%m-%dT%H:%M",
        validators=[InputRequired(message="Please provide a pick-up time.")],
    )
    end_datetime = DateTimeLocalField(
        "Return",
        format="%Y-%m-%dT%H:%M",
        validators=[InputRequired(message="Please provide a return time.")],
    )
    submit = SubmitField("Request reservation")


def _parse_limit(raw: str | None) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError("limit must be a positive integer.") from exc


@bp.route("/", methods=["POST"])
@login_required
def create():
    """Submit a reservation request; it starts out pending."""

    form = ReservationRequestForm()
    if not form.validate_on_submit():
        return form_errors(form)
    reservation = lifecycle.submit(
        current_user,
        form.kind.data,
        form.resource_id.data,
        form.purpose.data,
        form.start_datetime.data,
        form.end_datetime.data,
    )
    return jsonify(reservation_payload(reservation, utcnow())), 201


@bp.route("/")
@login_required
def history():
    """List reservations. ``scope=all`` is reserved for administrators."""

    reservations = queries.list_for(
        current_user,
        scope=request.args.get("scope", "own"),
        status=request.args.get("status") or None,
        limit=_parse_limit(request.args.get("limit")),
    )
    now = utcnow()
    return jsonify([reservation_payload(reservation, now) for reservation in reservations])


@bp.route("/summary")
@login_required
def summary():
    """Dashboard counters plus the most recent reservations."""

    scope = request.args.get("scope", "own")
    now = utcnow()
    recent = queries.list_for(
        current_user,
        scope=scope,
        limit=current_app.config["DASHBOARD_RECENT_LIMIT"],
        now=now,
    )
    return jsonify(
        {
            "counts": queries.summarize(current_user, scope=scope, now=now),
            "recent": [reservation_payload(reservation, now) for reservation in recent],
        }
    )


@bp.route("/<int:reservation_id>")
@login_required
def detail(reservation_id: int):
    reservation = reservations_dao.get_reservation_by_id(reservation_id)
    if not reservation:
        abort(404)
    if reservation.requester_id != current_user.user_id and not current_user.is_admin:
        abort(403)
    return jsonify(reservation_payload(reservation, utcnow()))


@bp.route("/<int:reservation_id>/cancel", methods=["POST"])
@login_required
def cancel(reservation_id: int):
    """Allow the requester to withdraw a pending reservation."""

    reservation = lifecycle.cancel(current_user, reservation_id)
    return jsonify(reservation_payload(reservation, utcnow()))
