from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ...errors import ValidationError
from ...http import int_arg, load_body
from ...schemas.message import ConversationReadSchema, MessageCreateSchema, MessageSchema
from ...security import require_identity
from ..items.service import get_item
from .service import (
    can_converse,
    conversation,
    mark_conversation_read,
    mark_read,
    send_message,
    unread_count,
)

bp = Blueprint("messages", __name__, url_prefix="/messages")

_create_schema = MessageCreateSchema()
_message_schema = MessageSchema()
_read_schema = ConversationReadSchema()


def _poll_interval() -> int:
    return int(current_app.config.get("MESSAGES_POLL_INTERVAL_SECONDS", 5))


@bp.get("")
def list_messages():
    """Conversation between the caller and ``with`` about ``itemId``, oldest first."""
    ident = require_identity()
    item_id = int_arg("itemId", required=True)
    other = (request.args.get("with") or "").strip()
    if not other:
        raise ValidationError("with", "with is required")
    rows = conversation(item_id, ident.user_id, other)
    return jsonify(
        {
            "messages": _message_schema.dump(rows, many=True),
            "canSend": can_converse(get_item(item_id), ident.user_id),
            "unreadCount": unread_count(ident.user_id, item_id=item_id),
            "pollIntervalSeconds": _poll_interval(),
        }
    )


@bp.post("")
def create_message():
    ident = require_identity()
    data = load_body(_create_schema)
    msg = send_message(data["item_id"], ident.user_id, data["receiver_id"], data["body"], sender_email=ident.email)
    return jsonify({"message": _message_schema.dump(msg)}), 201


@bp.patch("/<int:message_id>/read")
def read_one(message_id: int):
    ident = require_identity()
    msg = mark_read(message_id, ident.user_id)
    return jsonify({"message": _message_schema.dump(msg)})


@bp.post("/read")
def read_conversation():
    ident = require_identity()
    data = load_body(_read_schema)
    updated = mark_conversation_read(data["item_id"], ident.user_id, data["with_user_id"])
    return jsonify({"updated": updated})


@bp.get("/unread-count")
def unread():
    ident = require_identity()
    return jsonify(
        {
            "unreadCount": unread_count(ident.user_id, item_id=int_arg("itemId")),
            "pollIntervalSeconds": _poll_interval(),
        }
    )
