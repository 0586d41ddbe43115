from sqlalchemy import func, text, Index
from ..extensions import db
from .enums import BigIntPK, JSONType, verification_status_enum


class Verification(db.Model):
    __tablename__ = "verifications"

    id = db.Column(BigIntPK, primary_key=True)
    item_id = db.Column(db.BigInteger, db.ForeignKey("items.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.String(64), nullable=False)
    status = db.Column(verification_status_enum, nullable=False, server_default="pending")
    # References into external photo storage; uploads happen before the record is written
    photos = db.Column(JSONType, nullable=False)
    notes = db.Column(db.Text)
    reviewer_user_id = db.Column(db.String(64))
    review_notes = db.Column(db.Text)
    decided_at = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    item = db.relationship("Item", back_populates="verifications")

    __table_args__ = (
        # One outstanding request per item
        Index(
            "uq_verifications_item_pending",
            "item_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
        Index("idx_verifications_item", "item_id"),
    )
