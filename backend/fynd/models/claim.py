from sqlalchemy import func, text, UniqueConstraint, Index
from ..extensions import db
from .enums import BigIntPK, claim_status_enum


class Claim(db.Model):
    __tablename__ = "claims"

    id = db.Column(BigIntPK, primary_key=True)
    item_id = db.Column(db.BigInteger, db.ForeignKey("items.id", ondelete="CASCADE"), nullable=False)
    claimant_user_id = db.Column(db.String(64), nullable=False)
    status = db.Column(claim_status_enum, nullable=False, server_default="pending")
    message = db.Column(db.Text)
    decided_at = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    item = db.relationship("Item", back_populates="claims")

    __table_args__ = (
        UniqueConstraint("item_id", "claimant_user_id", name="uq_claims_item_claimant"),
        # At most one approved claim per item, enforced by the store rather than by callers
        Index(
            "uq_claims_item_approved",
            "item_id",
            unique=True,
            postgresql_where=text("status = 'approved'"),
            sqlite_where=text("status = 'approved'"),
        ),
        Index("idx_claims_item", "item_id"),
        Index("idx_claims_claimant", "claimant_user_id"),
        Index("idx_claims_status", "status"),
    )
