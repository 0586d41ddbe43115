"""Owner-submitted photo evidence for an item.

Policy for repeat submissions: while a request is pending another one is
refused (``verification_pending``); once an item is verified further requests
are refused (``already_verified``); after a rejection the owner may submit
again. Photos are uploaded to external storage before this is called, so only
references arrive here and the record is written in a single transaction.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError

from ...errors import ConflictError, NotFoundError, ValidationError
from ...extensions import db
from ...models.item import Item
from ...models.verification import Verification
from ..notifications.dispatcher import VerificationApproved, VerificationRejected, dispatch

logger = logging.getLogger(__name__)

MIN_PHOTOS = 2
MAX_PHOTOS = 5


def submit_verification(item_id: int, submitter_id: str, photos: list[str], notes: str | None = None) -> Verification:
    # Repeated references are one photo
    photos = list(dict.fromkeys(p.strip() for p in (photos or []) if p and p.strip()))
    if not MIN_PHOTOS <= len(photos) <= MAX_PHOTOS:
        raise ValidationError("photos", f"Between {MIN_PHOTOS} and {MAX_PHOTOS} verification photos are required")

    item = db.session.get(Item, item_id)
    if not item:
        raise NotFoundError("Item not found")
    if not item.is_owned_by(submitter_id):
        raise ValidationError("owner", "Only the item owner can request verification")
    if item.status != "active":
        raise ValidationError("status", "Resolved items cannot be verified")
    if item.verified:
        raise ConflictError("This item is already verified", code="already_verified")

    verification = Verification(
        item_id=item.id,
        user_id=submitter_id,
        status="pending",
        photos=photos,
        notes=(notes or "").strip() or None,
    )
    db.session.add(verification)
    item.verification_status = "pending"
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("A verification request for this item is already pending", code="verification_pending")
    logger.info("Verification %s submitted for item %s with %d photos", verification.id, item.id, len(photos))
    return verification


def decide_verification(verification_id: int, reviewer_id: str, approved: bool, review_notes: str | None = None) -> Verification:
    """Apply an external reviewer's decision to a pending request."""
    verification = db.session.get(Verification, verification_id)
    if not verification:
        raise NotFoundError("Verification not found")
    new_status = "approved" if approved else "rejected"
    updated = (
        Verification.query
        .filter(Verification.id == verification.id, Verification.status == "pending")
        .update(
            {
                "status": new_status,
                "reviewer_user_id": reviewer_id,
                "review_notes": (review_notes or "").strip() or None,
                "decided_at": datetime.now(timezone.utc),
            },
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.session.rollback()
        raise ConflictError(f"Verification is already {verification.status}", code="verification_decided")

    item = db.session.get(Item, verification.item_id)
    item.verification_status = new_status
    if approved:
        item.verified = True
    db.session.commit()
    db.session.refresh(verification)
    logger.info("Verification %s %s by reviewer %s", verification.id, new_status, reviewer_id)

    event_cls = VerificationApproved if approved else VerificationRejected
    dispatch(event_cls(owner_id=item.user_id, item_id=item.id, item_title=item.title))
    return verification


def list_for_item(item_id: int) -> list[Verification]:
    return (
        Verification.query
        .filter(Verification.item_id == item_id)
        .order_by(Verification.created_at.desc(), Verification.id.desc())
        .all()
    )
