from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ...http import bool_arg, int_arg
from ...schemas.notification import NotificationSchema
from ...security import require_identity
from .service import list_for_user, mark_all_read, mark_read, unread_count

bp = Blueprint("notifications", __name__, url_prefix="/notifications")

_notification_schema = NotificationSchema()


def _poll_interval() -> int:
    return int(current_app.config.get("NOTIFICATIONS_POLL_INTERVAL_SECONDS", 10))


@bp.get("")
def list_notifications():
    """Caller's notifications, newest first.

    Clients poll this endpoint; ``pollIntervalSeconds`` tells them how often.
    """
    ident = require_identity()
    rows = list_for_user(ident.user_id, limit=int_arg("limit", 50), unread_only=bool_arg("unreadOnly"))
    return jsonify(
        {
            "notifications": _notification_schema.dump(rows, many=True),
            "unreadCount": unread_count(ident.user_id),
            "pollIntervalSeconds": _poll_interval(),
        }
    )


@bp.get("/count")
def count():
    ident = require_identity()
    return jsonify({"unreadCount": unread_count(ident.user_id), "pollIntervalSeconds": _poll_interval()})


@bp.patch("/<int:notif_id>/read")
def read_one(notif_id: int):
    ident = require_identity()
    n = mark_read(notif_id, ident.user_id)
    return jsonify({"notification": _notification_schema.dump(n)})


@bp.post("/read-all")
def read_all():
    ident = require_identity()
    updated = mark_all_read(ident.user_id)
    return jsonify({"updated": updated, "unreadCount": 0})
