"""JSON payload builders shared by the blueprints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from flask import jsonify
from flask_wtf import FlaskForm

from ..models.entities import Notification, Reservation, Resource, TeachingSlot, User
from ..services.lifecycle import observed_status


def user_payload(user: User) -> Dict[str, Any]:
    return {
        "user_id": user.user_id,
        "full_name": user.full_name,
        "email": user.email,
        "role": user.role.value,
        "nim_nip": user.nim_nip,
        "phone": user.phone,
    }


def resource_payload(resource: Resource) -> Dict[str, Any]:
    return {
        "resource_id": resource.resource_id,
        "kind": resource.kind.value,
        "name": resource.name,
        "details": resource.details,
        "description": resource.description,
        "status": resource.status.value,
    }


def slot_payload(slot: TeachingSlot) -> Dict[str, Any]:
    return {
        "slot_id": slot.slot_id,
        "instructor_id": slot.instructor_id,
        "instructor_name": slot.instructor_name,
        "weekday": slot.weekday.value,
        "start_time": slot.start_time.strftime("%H:%M"),
        "end_time": slot.end_time.strftime("%H:%M"),
        "course_label": slot.course_label,
        "room_id": slot.room_id,
    }


def reservation_payload(reservation: Reservation, now: datetime) -> Dict[str, Any]:
    return {
        "reservation_id": reservation.reservation_id,
        "requester_id": reservation.requester_id,
        "requester": {
            "full_name": reservation.requester_name,
            "nim_nip": reservation.requester_nim_nip,
            "role": reservation.requester_role.value if reservation.requester_role else None,
        },
        "kind": reservation.kind.value,
        "resource_id": reservation.resource_id,
        "purpose": reservation.purpose,
        "start": reservation.start_datetime.isoformat(),
        "end": reservation.end_datetime.isoformat(),
        "status": reservation.status.value,
        "observed_status": observed_status(reservation, now).value,
        "admin_annotation": reservation.admin_annotation,
        "created_at": reservation.created_at.isoformat(),
        "updated_at": reservation.updated_at.isoformat(),
    }


def notification_payload(notification: Notification) -> Dict[str, Any]:
    return {
        "notification_id": notification.notification_id,
        "reservation_id": notification.reservation_id,
        "message": notification.message,
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat(),
    }


def form_errors(form: FlaskForm):
    """400 response listing every field error of a failed form."""

    return (
        jsonify(
            {
                "error": "validation_error",
                "message": "Please fix the highlighted fields.",
                "fields": form.errors,
            }
        ),
        400,
    )
