from __future__ import annotations

import logging

from flask import current_app
from sqlalchemy import func, or_

from ...errors import NotFoundError
from ...extensions import db
from ...integrations.geocoding.client import forward_geocode, reverse_geocode
from ...models.claim import Claim
from ...models.item import Item

logger = logging.getLogger(__name__)


def _geocoder_kwargs() -> dict:
    return {
        "base_url": current_app.config.get("GEOCODER_BASE_URL"),
        "user_agent": current_app.config.get("GEOCODER_USER_AGENT"),
        "timeout": current_app.config.get("GEOCODER_TIMEOUT"),
    }


def _fill_location(data: dict) -> None:
    """Best-effort: complete coordinates from text or a label from coordinates."""
    if not current_app.config.get("GEOCODING_ENABLED"):
        return
    has_coords = data.get("latitude") is not None and data.get("longitude") is not None
    if not has_coords and data.get("location"):
        point = forward_geocode(data["location"], **_geocoder_kwargs())
        if point is not None:
            data["latitude"], data["longitude"] = point.lat, point.lon
    elif has_coords and not data.get("location"):
        data["location"] = reverse_geocode(data["latitude"], data["longitude"], **_geocoder_kwargs())


def create_item(owner_id: str, data: dict) -> Item:
    """Create an item report owned by ``owner_id`` from validated input."""
    data = dict(data)
    _fill_location(data)
    item = Item(
        user_id=owner_id,
        category=data["category"],
        item_type=data.get("item_type"),
        title=data["title"].strip(),
        description=(data.get("description") or "").strip() or None,
        location=(data.get("location") or "").strip() or None,
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        image_url=data.get("image_url"),
        contact_info=data.get("contact_info"),
        status="active",
        verified=False,
    )
    db.session.add(item)
    db.session.commit()
    logger.info("Item %s (%s) posted by user %s", item.id, item.category, owner_id)
    return item


def get_item(item_id: int) -> Item:
    item = db.session.get(Item, item_id)
    if not item:
        raise NotFoundError("Item not found")
    return item


def list_items(
    *,
    category: str | None = None,
    status: str | None = None,
    item_type: str | None = None,
    user_id: str | None = None,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Item], int]:
    q = Item.query
    if category:
        q = q.filter(Item.category == category)
    if status:
        q = q.filter(Item.status == status)
    if item_type:
        q = q.filter(Item.item_type == item_type)
    if user_id:
        q = q.filter(Item.user_id == user_id)
    term = (search or "").strip()
    if term:
        pattern = "%" + term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
        q = q.filter(or_(Item.title.ilike(pattern, escape="\\"), Item.description.ilike(pattern, escape="\\")))
    total = q.count()
    rows = (
        q.order_by(Item.created_at.desc(), Item.id.desc())
        .offset(max(0, offset))
        .limit(max(1, min(200, limit)))
        .all()
    )
    return rows, total


def user_stats(user_id: str) -> dict:
    """Activity counts shown on a user's profile and as trust indicators."""
    item_counts = dict(
        db.session.query(Item.status, func.count(Item.id))
        .filter(Item.user_id == user_id)
        .group_by(Item.status)
        .all()
    )
    items_verified = (
        db.session.query(func.count(Item.id))
        .filter(Item.user_id == user_id, Item.verified.is_(True))
        .scalar()
        or 0
    )
    claim_counts = dict(
        db.session.query(Claim.status, func.count(Claim.id))
        .filter(Claim.claimant_user_id == user_id)
        .group_by(Claim.status)
        .all()
    )
    items_posted = sum(item_counts.values())
    return {
        "itemsPosted": items_posted,
        "itemsResolved": item_counts.get("resolved", 0),
        "itemsVerified": items_verified,
        "claimsMade": sum(claim_counts.values()),
        "claimsApproved": claim_counts.get("approved", 0),
        # Percentage of the user's items that passed verification
        "verificationRate": round(items_verified * 100 / items_posted) if items_posted else 0,
    }
