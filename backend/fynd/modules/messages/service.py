"""Per-item conversations between an item owner and a claimant.

A conversation exists between the owner and any user holding a claim (of any
status) on the item. New messages require the item to be active; the
participants can still read their history afterwards.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import and_, func, or_

from ...errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ...extensions import db
from ...models.claim import Claim
from ...models.item import Item
from ...models.message import Message
from ..notifications.dispatcher import MessageReceived, dispatch

logger = logging.getLogger(__name__)

MAX_BODY = 2000


def _load_item(item_id: int) -> Item:
    item = db.session.get(Item, item_id)
    if not item:
        raise NotFoundError("Item not found")
    return item


def has_claim(item_id: int, user_id: str) -> bool:
    return (
        db.session.query(Claim.id)
        .filter(Claim.item_id == item_id, Claim.claimant_user_id == user_id)
        .first()
        is not None
    )


def is_participant(item: Item, user_id: str) -> bool:
    return item.is_owned_by(user_id) or has_claim(item.id, user_id)


def _require_pair(item: Item, user_id: str, other_user_id: str) -> None:
    """The pair must be exactly {owner, claimant}."""
    if not user_id or not other_user_id or user_id == other_user_id:
        raise ValidationError("receiverId", "A conversation needs two different users")
    if item.is_owned_by(user_id):
        counterpart = other_user_id
    elif item.is_owned_by(other_user_id):
        counterpart = user_id
    else:
        raise AuthorizationError("Conversations are only between the item owner and a claimant")
    if not has_claim(item.id, counterpart):
        raise AuthorizationError("Conversations are only between the item owner and a claimant")


def can_converse(item: Item, user_id: str) -> bool:
    return item.status == "active" and is_participant(item, user_id)


def send_message(item_id: int, sender_id: str, receiver_id: str, body: str, sender_email: str | None = None) -> Message:
    text = (body or "").strip()
    if not text:
        raise ValidationError("body", "Message body is required")
    if len(text) > MAX_BODY:
        raise ValidationError("body", f"Message body must be at most {MAX_BODY} characters")

    item = _load_item(item_id)
    _require_pair(item, sender_id, receiver_id)
    if item.status != "active":
        raise ConflictError("Messaging is closed for resolved items", code="item_resolved")

    msg = Message(item_id=item.id, sender_id=sender_id, receiver_id=receiver_id, body=text, read=False)
    db.session.add(msg)
    db.session.commit()
    logger.debug("Message %s on item %s from %s to %s", msg.id, item.id, sender_id, receiver_id)

    dispatch(MessageReceived(receiver_id=receiver_id, item_id=item.id, item_title=item.title, sender_email=sender_email))
    return msg


def _pair_filter(item_id: int, a: str, b: str):
    return and_(
        Message.item_id == item_id,
        or_(
            and_(Message.sender_id == a, Message.receiver_id == b),
            and_(Message.sender_id == b, Message.receiver_id == a),
        ),
    )


def conversation(item_id: int, user_id: str, other_user_id: str) -> list[Message]:
    item = _load_item(item_id)
    _require_pair(item, user_id, other_user_id)
    return (
        Message.query
        .filter(_pair_filter(item.id, user_id, other_user_id))
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


def mark_read(message_id: int, user_id: str) -> Message:
    msg = db.session.get(Message, message_id)
    if not msg:
        raise NotFoundError("Message not found")
    if msg.receiver_id != user_id:
        raise AuthorizationError("Only the receiver can mark a message read")
    if not msg.read:
        msg.read = True
        msg.read_at = datetime.now(timezone.utc)
        db.session.commit()
    return msg


def mark_conversation_read(item_id: int, user_id: str, other_user_id: str) -> int:
    """Mark everything ``other_user_id`` sent to ``user_id`` about the item as read."""
    item = _load_item(item_id)
    _require_pair(item, user_id, other_user_id)
    updated = (
        Message.query
        .filter(
            Message.item_id == item.id,
            Message.sender_id == other_user_id,
            Message.receiver_id == user_id,
            Message.read.is_(False),
        )
        .update({"read": True, "read_at": datetime.now(timezone.utc)}, synchronize_session=False)
    )
    db.session.commit()
    return int(updated or 0)


def unread_count(user_id: str, item_id: int | None = None) -> int:
    q = db.session.query(func.count(Message.id)).filter(Message.receiver_id == user_id, Message.read.is_(False))
    if item_id is not None:
        q = q.filter(Message.item_id == item_id)
    return q.scalar() or 0
