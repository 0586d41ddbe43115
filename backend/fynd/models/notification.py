from sqlalchemy import Index, false, func
from ..extensions import db
from .enums import BigIntPK, notification_kind_enum


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(BigIntPK, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False)
    kind = db.Column(notification_kind_enum, nullable=False)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    link = db.Column(db.String(512))
    read = db.Column(db.Boolean, nullable=False, server_default=false())
    read_at = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_notifications_user_read", "user_id", "read"),
    )
