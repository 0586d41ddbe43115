from sqlalchemy import false, func, Index
from ..extensions import db
from .enums import BigIntPK, item_category_enum, item_status_enum, verification_status_enum


class Item(db.Model):
    __tablename__ = "items"

    id = db.Column(BigIntPK, primary_key=True)
    # Opaque id issued by the external identity service
    user_id = db.Column(db.String(64), nullable=False)
    category = db.Column(item_category_enum, nullable=False)
    item_type = db.Column(db.String(40))
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    location = db.Column(db.String(255))
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    image_url = db.Column(db.String(512))
    contact_info = db.Column(db.String(255))
    status = db.Column(item_status_enum, nullable=False, server_default="active")
    verified = db.Column(db.Boolean, nullable=False, server_default=false())
    verification_status = db.Column(verification_status_enum)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    claims = db.relationship("Claim", back_populates="item", lazy=True)
    verifications = db.relationship("Verification", back_populates="item", lazy=True)
    lost_matches = db.relationship(
        "Match",
        back_populates="lost_item",
        foreign_keys="Match.lost_item_id",
        lazy=True,
    )
    found_matches = db.relationship(
        "Match",
        back_populates="found_item",
        foreign_keys="Match.found_item_id",
        lazy=True,
    )

    __table_args__ = (
        Index("idx_items_category_status", "category", "status"),
        Index("idx_items_user", "user_id"),
        Index("idx_items_created_at", "created_at"),
    )

    def is_owned_by(self, user_id: str | None) -> bool:
        return user_id is not None and str(self.user_id) == str(user_id)
