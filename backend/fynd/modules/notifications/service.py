from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func

from ...errors import AuthorizationError, NotFoundError
from ...extensions import db
from ...models.notification import Notification


def list_for_user(user_id: str, limit: int = 50, unread_only: bool = False) -> list[Notification]:
    q = Notification.query.filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.read.is_(False))
    return (
        q.order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(max(1, min(100, limit)))
        .all()
    )


def unread_count(user_id: str) -> int:
    return (
        db.session.query(func.count(Notification.id))
        .filter(Notification.user_id == user_id, Notification.read.is_(False))
        .scalar()
        or 0
    )


def mark_read(notification_id: int, user_id: str) -> Notification:
    """Mark one notification read. Marking an already-read one is a no-op."""
    n = db.session.get(Notification, notification_id)
    if not n:
        raise NotFoundError("Notification not found")
    if n.user_id != user_id:
        raise AuthorizationError("Not authorized to modify this notification")
    if not n.read:
        n.read = True
        n.read_at = datetime.now(timezone.utc)
        db.session.commit()
    return n


def mark_all_read(user_id: str) -> int:
    updated = (
        Notification.query
        .filter(Notification.user_id == user_id, Notification.read.is_(False))
        .update({"read": True, "read_at": datetime.now(timezone.utc)}, synchronize_session=False)
    )
    db.session.commit()
    return int(updated or 0)
