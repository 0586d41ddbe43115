from sqlalchemy import Index, false, func
from ..extensions import db
from .enums import BigIntPK


class Message(db.Model):
    __tablename__ = "messages"

    id = db.Column(BigIntPK, primary_key=True)
    item_id = db.Column(db.BigInteger, db.ForeignKey("items.id", ondelete="CASCADE"), nullable=False)
    sender_id = db.Column(db.String(64), nullable=False)
    receiver_id = db.Column(db.String(64), nullable=False)
    body = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, nullable=False, server_default=false())
    read_at = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())

    item = db.relationship("Item")

    __table_args__ = (
        Index("idx_messages_item_pair", "item_id", "sender_id", "receiver_id"),
        Index("idx_messages_receiver_read", "receiver_id", "read"),
    )
