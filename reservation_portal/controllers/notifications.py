"""Notification inbox for the signed-in user."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from ..data_access import notifications_dao
from .serializers import notification_payload

bp = Blueprint("notifications", __name__, url_prefix="/notifications")


@bp.route("/")
@login_required
def inbox():
    unread_only = request.args.get("unread") in {"1", "true", "yes"}
    notifications = notifications_dao.list_for_user(current_user.user_id, unread_only=unread_only)
    return jsonify([notification_payload(item) for item in notifications])


@bp.route("/read", methods=["POST"])
@login_required
def mark_read():
    updated = notifications_dao.mark_all_read(current_user.user_id)
    return jsonify({"updated": updated})
