"""Persisting and serving lost/found matches.

Scores are computed on demand: pairwise, per item as transient suggestions,
or in a batch pass over every active lost/found pair (run from the API or the
Celery beat schedule). Item changes never trigger a recompute by themselves.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import or_

from ...errors import AuthorizationError, NotFoundError, ValidationError
from ...extensions import db
from ...models.item import Item
from ...models.match import Match
from .scoring import DEFAULT_POLICY, MatchScore, ScoringPolicy, orient, score_pair

logger = logging.getLogger(__name__)


def _upsert(lost: Item, found: Item, result: MatchScore, existing: Match | None = None) -> Match:
    if existing is None:
        existing = Match.query.filter_by(lost_item_id=lost.id, found_item_id=found.id).first()
    now = datetime.now(timezone.utc)
    if existing:
        # Viewer status survives a recompute; only the snapshot is refreshed
        existing.score = result.score
        existing.reasons = list(result.reasons)
        existing.distance_km = result.distance_km
        existing.computed_at = now
        return existing
    m = Match(
        lost_item_id=lost.id,
        found_item_id=found.id,
        score=result.score,
        reasons=list(result.reasons),
        distance_km=result.distance_km,
        status="pending",
        computed_at=now,
    )
    db.session.add(m)
    return m


def compute_pair(lost_item_id: int, found_item_id: int, policy: ScoringPolicy = DEFAULT_POLICY) -> Match:
    lost = db.session.get(Item, lost_item_id)
    found = db.session.get(Item, found_item_id)
    if not lost or not found:
        raise NotFoundError("Item not found")
    if lost.category != "lost":
        raise ValidationError("lostItemId", "lostItemId must reference a lost item")
    if found.category != "found":
        raise ValidationError("foundItemId", "foundItemId must reference a found item")

    match = _upsert(lost, found, score_pair(lost, found, policy))
    db.session.commit()
    return match


def recompute_all(min_score: float = 30.0, policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    """Batch pass over active items. Returns the number of match rows written.

    Pairs at or above ``min_score`` are stored; pairs that already have a row
    are refreshed whatever their new score.
    """
    lost_items = Item.query.filter(Item.category == "lost", Item.status == "active").all()
    found_items = Item.query.filter(Item.category == "found", Item.status == "active").all()
    if not lost_items or not found_items:
        return 0

    lost_ids = [it.id for it in lost_items]
    existing = {
        (m.lost_item_id, m.found_item_id): m
        for m in Match.query.filter(Match.lost_item_id.in_(lost_ids)).all()
    }

    written = 0
    for lost in lost_items:
        for found in found_items:
            result = score_pair(lost, found, policy)
            current = existing.get((lost.id, found.id))
            if current is None and result.score < min_score:
                continue
            _upsert(lost, found, result, existing=current)
            written += 1
    db.session.commit()
    logger.info(
        "Match recompute: %d lost x %d found items, %d rows written",
        len(lost_items), len(found_items), written,
    )
    return written


def suggestions_for_item(
    item_id: int,
    limit: int = 10,
    min_score: float = 30.0,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> list[tuple[Item, MatchScore]]:
    """Score an item against active items of the opposite category without persisting."""
    base = db.session.get(Item, item_id)
    if not base:
        raise NotFoundError("Item not found")
    opposite = "found" if base.category == "lost" else "lost"
    candidates = (
        Item.query
        .filter(Item.category == opposite, Item.status == "active", Item.id != base.id)
        .order_by(Item.created_at.desc())
        .limit(400)
        .all()
    )
    out = []
    for cand in candidates:
        result = score_pair(*orient(base, cand), policy)
        if result.score >= min_score:
            out.append((cand, result))
    out.sort(key=lambda pair: (-pair[1].score, pair[0].id))
    return out[: max(1, min(50, limit))]


def list_for_item(item_id: int, limit: int = 10, include_dismissed: bool = False) -> list[Match]:
    item = db.session.get(Item, item_id)
    if not item:
        raise NotFoundError("Item not found")
    q = Match.query.filter(or_(Match.lost_item_id == item.id, Match.found_item_id == item.id))
    if not include_dismissed:
        q = q.filter(Match.status != "dismissed")
    return q.order_by(Match.score.desc(), Match.id.asc()).limit(max(1, min(100, limit))).all()


def update_status(match_id: int, viewer_id: str, status: str) -> Match:
    if status not in {"viewed", "contacted", "dismissed"}:
        raise ValidationError("status", "status must be one of viewed, contacted, dismissed")
    m = db.session.get(Match, match_id)
    if not m:
        raise NotFoundError("Match not found")
    # Only the owners of the two matched items act on it
    owners = {getattr(m.lost_item, "user_id", None), getattr(m.found_item, "user_id", None)}
    if viewer_id is None or str(viewer_id) not in owners:
        raise AuthorizationError("Only the owners of the matched items can update this match")
    m.status = status
    db.session.commit()
    logger.debug("Match %s marked %s by user %s", m.id, status, viewer_id)
    return m
