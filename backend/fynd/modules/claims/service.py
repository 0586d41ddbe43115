"""Claim lifecycle: pending -> approved | rejected, decided by the item owner.

The one-claim-per-user and one-approval-per-item rules live in the database
(unique constraint and partial unique index). The transitions here are
conditional UPDATEs, so two concurrent requests cannot both win. Notifications
go out only after the state change has committed.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError

from ...errors import AuthorizationError, ConflictError, NotFoundError
from ...extensions import db
from ...models.claim import Claim
from ...models.item import Item
from ..notifications.dispatcher import (
    ClaimApproved,
    ClaimRejected,
    ClaimSubmitted,
    ItemResolved,
    dispatch,
)

logger = logging.getLogger(__name__)


def _load_item(item_id: int) -> Item:
    item = db.session.get(Item, item_id)
    if not item:
        raise NotFoundError("Item not found")
    return item


def _load_claim(claim_id: int) -> Claim:
    claim = db.session.get(Claim, claim_id)
    if not claim:
        raise NotFoundError("Claim not found")
    return claim


def _require_owner(item: Item, actor_id: str, action: str) -> None:
    if not item.is_owned_by(actor_id):
        raise AuthorizationError(f"Only the item owner can {action}")


def submit_claim(item_id: int, claimant_id: str, message: str | None = None, claimant_email: str | None = None) -> Claim:
    item = _load_item(item_id)
    if item.is_owned_by(claimant_id):
        raise AuthorizationError("You cannot claim your own item", code="own_item")
    if item.status != "active":
        # A repeat claimant hears about the duplicate, not the resolution
        if Claim.query.filter_by(item_id=item.id, claimant_user_id=claimant_id).first():
            raise ConflictError("You have already claimed this item", code="already_claimed")
        raise ConflictError("This item has already been resolved", code="item_resolved")

    claim = Claim(
        item_id=item.id,
        claimant_user_id=claimant_id,
        status="pending",
        message=(message or "").strip() or None,
    )
    db.session.add(claim)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("You have already claimed this item", code="already_claimed")
    logger.info("Claim %s submitted on item %s by user %s", claim.id, item.id, claimant_id)

    dispatch(ClaimSubmitted(owner_id=item.user_id, item_id=item.id, item_title=item.title, claimant_email=claimant_email))
    return claim


def _decide(claim: Claim, new_status: str) -> int:
    return (
        Claim.query
        .filter(Claim.id == claim.id, Claim.status == "pending")
        .update({"status": new_status, "decided_at": datetime.now(timezone.utc)}, synchronize_session=False)
    )


def approve_claim(claim_id: int, actor_id: str) -> Claim:
    """Approve a pending claim and resolve its item in one transaction."""
    claim = _load_claim(claim_id)
    item = _load_item(claim.item_id)
    _require_owner(item, actor_id, "approve claims")
    if claim.status != "pending":
        raise ConflictError(f"Claim is already {claim.status}", code="claim_not_pending")

    try:
        if _decide(claim, "approved") != 1:
            db.session.rollback()
            raise ConflictError("Claim is no longer pending", code="claim_not_pending")
        resolved = (
            Item.query
            .filter(Item.id == item.id, Item.status == "active")
            .update({"status": "resolved"}, synchronize_session=False)
        )
        if resolved != 1:
            db.session.rollback()
            raise ConflictError("This item has already been resolved", code="item_resolved")
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Another claim on this item was already approved", code="already_approved")

    # Re-read the committed state instead of trusting in-memory objects
    db.session.refresh(claim)
    db.session.refresh(item)
    logger.info("Claim %s approved; item %s resolved", claim.id, item.id)

    dispatch(ClaimApproved(claimant_id=claim.claimant_user_id, item_id=item.id, item_title=item.title))
    return claim


def reject_claim(claim_id: int, actor_id: str) -> Claim:
    claim = _load_claim(claim_id)
    item = _load_item(claim.item_id)
    _require_owner(item, actor_id, "reject claims")
    if claim.status != "pending":
        raise ConflictError(f"Claim is already {claim.status}", code="claim_not_pending")

    if _decide(claim, "rejected") != 1:
        db.session.rollback()
        raise ConflictError("Claim is no longer pending", code="claim_not_pending")
    db.session.commit()
    db.session.refresh(claim)
    logger.info("Claim %s rejected", claim.id)

    dispatch(ClaimRejected(claimant_id=claim.claimant_user_id, item_id=item.id, item_title=item.title))
    return claim


def mark_item_resolved(item_id: int, actor_id: str) -> Item:
    """Owner closes the case directly, independent of any single claim."""
    item = _load_item(item_id)
    _require_owner(item, actor_id, "resolve this item")
    updated = (
        Item.query
        .filter(Item.id == item.id, Item.status == "active")
        .update({"status": "resolved"}, synchronize_session=False)
    )
    if updated != 1:
        db.session.rollback()
        raise ConflictError("This item has already been resolved", code="item_resolved")
    db.session.commit()
    db.session.refresh(item)
    logger.info("Item %s marked resolved by owner", item.id)

    approved = Claim.query.filter(Claim.item_id == item.id, Claim.status == "approved").all()
    for c in approved:
        dispatch(ItemResolved(claimant_id=c.claimant_user_id, item_id=item.id, item_title=item.title))
    return item


def get_claim(claim_id: int, viewer_id: str) -> Claim:
    claim = _load_claim(claim_id)
    item = _load_item(claim.item_id)
    if claim.claimant_user_id != viewer_id and not item.is_owned_by(viewer_id):
        # Hide existence from unrelated users
        raise NotFoundError("Claim not found")
    return claim


def list_for_item(item_id: int, viewer_id: str) -> list[Claim]:
    """Owners see every claim on the item; anyone else only their own."""
    item = _load_item(item_id)
    q = Claim.query.filter(Claim.item_id == item.id)
    if not item.is_owned_by(viewer_id):
        q = q.filter(Claim.claimant_user_id == viewer_id)
    return q.order_by(Claim.created_at.desc(), Claim.id.desc()).all()


def list_for_claimant(claimant_id: str, status: str | None = None, limit: int = 200) -> list[Claim]:
    q = Claim.query.filter(Claim.claimant_user_id == claimant_id)
    if status:
        q = q.filter(Claim.status == status)
    return q.order_by(Claim.created_at.desc(), Claim.id.desc()).limit(max(1, min(500, limit))).all()
