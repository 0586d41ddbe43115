"""Lost/found compatibility scoring.

Four heuristic signals are combined into a 0-100 score:

- category: both items carry the same ``item_type`` tag (all or nothing)
- keywords: overlap coefficient of the normalized title + description tokens
- location: full credit within ``full_radius_km``, linear decay to zero at
  ``cutoff_radius_km``; items without coordinates get nothing (no penalty)
- date: full credit within ``full_days`` of each other's ``created_at``,
  linear decay to zero at ``cutoff_days``

Scores are a pure function of the two items as passed in. Nothing here touches
the database, so a stored score only changes when someone recomputes it.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional

from ...geo import distance_between, point_of

# ---- Text utilities ----
_WORD_RE = re.compile(r"[A-Za-z0-9]+")
_STOP = {
    "the","a","an","and","or","to","for","in","on","at","of","with","is","are","was","were","it","this","that",
    "my","your","our","their","i","you","we","they","as","by","be","from","near","around","about","into",
}


def tokenize(text: str | None) -> List[str]:
    if not text:
        return []
    words = [w.lower() for w in _WORD_RE.findall(text)]
    return [w for w in words if w not in _STOP and len(w) > 1]


def keyword_set(item: Any) -> FrozenSet[str]:
    text = f"{getattr(item, 'title', None) or ''} {getattr(item, 'description', None) or ''}"
    return frozenset(tokenize(text))


def overlap_ratio(a: FrozenSet[str], b: FrozenSet[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / min(len(a), len(b))


def _linear_decay(value: float, full: float, cutoff: float) -> float:
    """1.0 up to ``full``, 0.0 from ``cutoff`` on, linear in between."""
    if value <= full:
        return 1.0
    if value >= cutoff:
        return 0.0
    return 1.0 - (value - full) / (cutoff - full)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive timestamps; treat them as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class ScoringPolicy:
    category_weight: float = 30.0
    keywords_weight: float = 30.0
    location_weight: float = 20.0
    date_weight: float = 20.0
    full_radius_km: float = 1.0
    cutoff_radius_km: float = 25.0
    full_days: float = 1.0
    cutoff_days: float = 30.0
    # A signal is listed as a reason once it contributes at least this many points
    reason_min_points: float = 5.0


DEFAULT_POLICY = ScoringPolicy()


@dataclass(frozen=True)
class MatchScore:
    score: float
    reasons: tuple
    distance_km: Optional[float] = None
    breakdown: Optional[Dict[str, float]] = None

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "reasons": list(self.reasons),
            "distanceKm": self.distance_km,
            "breakdown": dict(self.breakdown or {}),
        }


def _category_points(lost: Any, found: Any, policy: ScoringPolicy) -> float:
    a = getattr(lost, "item_type", None)
    b = getattr(found, "item_type", None)
    if a and b and a == b:
        return policy.category_weight
    return 0.0


def _keyword_points(lost: Any, found: Any, policy: ScoringPolicy) -> float:
    return policy.keywords_weight * overlap_ratio(keyword_set(lost), keyword_set(found))


def _location_points(lost: Any, found: Any, policy: ScoringPolicy) -> tuple[float, Optional[float]]:
    a = point_of(lost)
    b = point_of(found)
    if a is None or b is None:
        return 0.0, None
    km = distance_between(a, b)
    return policy.location_weight * _linear_decay(km, policy.full_radius_km, policy.cutoff_radius_km), km


def _date_points(lost: Any, found: Any, policy: ScoringPolicy) -> float:
    a = getattr(lost, "created_at", None)
    b = getattr(found, "created_at", None)
    if a is None or b is None:
        return 0.0
    days = abs((_as_utc(a) - _as_utc(b)).total_seconds()) / 86400.0
    return policy.date_weight * _linear_decay(days, policy.full_days, policy.cutoff_days)


def score_pair(lost: Any, found: Any, policy: ScoringPolicy = DEFAULT_POLICY) -> MatchScore:
    """Score a lost item against a found item.

    Raises ValueError when the items are not a lost/found pair; callers are
    expected to validate before getting here.
    """
    if getattr(lost, "category", None) != "lost":
        raise ValueError("first item must be a lost item")
    if getattr(found, "category", None) != "found":
        raise ValueError("second item must be a found item")

    location_points, km = _location_points(lost, found, policy)
    breakdown = {
        "category": _category_points(lost, found, policy),
        "keywords": _keyword_points(lost, found, policy),
        "location": location_points,
        "date": _date_points(lost, found, policy),
    }
    total = sum(breakdown.values())
    total = max(0.0, min(100.0, total))
    reasons = tuple(name for name, pts in breakdown.items() if pts >= policy.reason_min_points)
    return MatchScore(
        score=round(total, 2),
        reasons=reasons,
        distance_km=km,
        breakdown={k: round(v, 2) for k, v in breakdown.items()},
    )


def orient(a: Any, b: Any) -> tuple[Any, Any]:
    """Return (lost, found) for two items of opposite categories."""
    if getattr(a, "category", None) == "lost":
        return a, b
    return b, a
