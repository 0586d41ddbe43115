from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify

from ...geo import format_distance
from ...http import bool_arg, int_arg, load_body
from ...models.match import Match
from ...schemas.item import ItemSchema
from ...schemas.match import MatchComputeSchema, MatchSchema, MatchStatusSchema
from ...security import require_identity
from .service import compute_pair, list_for_item, recompute_all, suggestions_for_item, update_status

logger = logging.getLogger(__name__)

bp = Blueprint("matches", __name__, url_prefix="/matches")

_compute_schema = MatchComputeSchema()
_status_schema = MatchStatusSchema()
_match_schema = MatchSchema()
_item_schema = ItemSchema()


def _min_score() -> float:
    return float(current_app.config.get("MATCH_MIN_SCORE", 30))


def _strong(score: float) -> bool:
    return float(score or 0) >= float(current_app.config.get("MATCH_STRONG_SCORE", 50))


def _distance_label(km: float | None) -> str | None:
    return format_distance(km) if km is not None else None


def _match_to_dict(m: Match) -> dict:
    out = _match_schema.dump(m)
    out["strong"] = _strong(out.get("score"))
    out["distanceLabel"] = _distance_label(m.distance_km)
    return out


@bp.get("")
def list_matches():
    """Stored matches for an item (either side), best first.

    Query params: itemId (required), limit (default 10), includeDismissed.
    """
    item_id = int_arg("itemId", required=True)
    rows = list_for_item(
        item_id,
        limit=int_arg("limit", 10),
        include_dismissed=bool_arg("includeDismissed"),
    )
    return jsonify({"matches": [_match_to_dict(m) for m in rows]})


@bp.get("/suggestions")
def suggestions():
    item_id = int_arg("itemId", required=True)
    pairs = suggestions_for_item(item_id, limit=int_arg("limit", 10), min_score=_min_score())
    out = []
    for cand, result in pairs:
        row = result.to_dict()
        row["item"] = _item_schema.dump(cand)
        row["strong"] = _strong(result.score)
        row["distanceLabel"] = _distance_label(result.distance_km)
        out.append(row)
    return jsonify({"suggestions": out})


@bp.post("/compute")
def compute():
    require_identity()
    data = load_body(_compute_schema)
    match = compute_pair(data["lost_item_id"], data["found_item_id"])
    return jsonify({"match": _match_to_dict(match)})


@bp.post("/recompute")
def recompute():
    require_identity()
    if current_app.config.get("MATCH_RECOMPUTE_ASYNC"):
        from ...tasks.jobs.matching import recompute_matches
        result = recompute_matches.delay()
        logger.info("Queued match recompute task %s", result.id)
        return jsonify({"queued": True, "taskId": result.id}), 202
    written = recompute_all(min_score=_min_score())
    return jsonify({"queued": False, "written": written})


@bp.patch("/<int:match_id>")
def patch_match(match_id: int):
    ident = require_identity()
    data = load_body(_status_schema)
    match = update_status(match_id, ident.user_id, data["status"])
    return jsonify({"match": _match_to_dict(match)})
