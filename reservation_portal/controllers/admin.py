"""Administrative moderation routes."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user
from flask_wtf import FlaskForm
from wtforms import TextAreaField
from wtforms.validators import Length

from ..data_access import reservations_dao
from ..data_access.db import utcnow
from ..models.entities import Role
from ..services import decisions
from .auth import role_required
from .serializers import form_errors, reservation_payload

bp = Blueprint("admin", __name__, url_prefix="/admin")


class DecisionForm(FlaskForm):
    """Optional note on approval, mandatory on rejection (enforced by the workflow)."""

    admin_annotation = TextAreaField("Note", validators=[Length(max=1000)])


def _decide(reservation_id: int, action):
    form = DecisionForm()
    if not form.validate_on_submit():
        return form_errors(form)
    reservation = action(current_user.user_id, reservation_id, form.admin_annotation.data or None)
    return jsonify(reservation_payload(reservation, utcnow()))


@bp.route("/reservations/pending")
@role_required(Role.ADMIN)
def pending():
    """Pending reservations waiting for a decision, oldest first."""

    now = utcnow()
    reservations = decisions.pending_queue(current_user.user_id)
    return jsonify([reservation_payload(reservation, now) for reservation in reservations])


@bp.route("/reservations/<int:reservation_id>/approve", methods=["POST"])
@role_required(Role.ADMIN)
def approve(reservation_id: int):
    return _decide(reservation_id, decisions.approve)


@bp.route("/reservations/<int:reservation_id>/reject", methods=["POST"])
@role_required(Role.ADMIN)
def reject(reservation_id: int):
    return _decide(reservation_id, decisions.reject)


@bp.route("/logs")
@role_required(Role.ADMIN)
def logs():
    """Most recent admin decisions."""

    limit = request.args.get("limit", default=50, type=int)
    return jsonify(reservations_dao.list_admin_actions(limit=max(1, min(limit, 500))))
