from flask import Blueprint, jsonify, request

from ...http import int_arg, load_body
from ...schemas.claim import ClaimCreateSchema, ClaimSchema
from ...schemas.item import ItemSchema
from ...security import require_identity
from .service import (
    approve_claim,
    get_claim,
    list_for_claimant,
    list_for_item,
    reject_claim,
    submit_claim,
)

bp = Blueprint("claims", __name__, url_prefix="/claims")

_create_schema = ClaimCreateSchema()
_claim_schema = ClaimSchema()
_item_schema = ItemSchema()


def _claim_with_item(claim) -> dict:
    out = _claim_schema.dump(claim)
    out["item"] = _item_schema.dump(claim.item) if claim.item else None
    return out


@bp.post("")
def create_claim():
    ident = require_identity()
    data = load_body(_create_schema)
    claim = submit_claim(data["item_id"], ident.user_id, data.get("message"), claimant_email=ident.email)
    return jsonify({"claim": _claim_schema.dump(claim)}), 201


@bp.get("")
def list_claims():
    """Claims on an item (``itemId``) or, without it, the caller's own claims.

    Owners see every claim on their item; other users only see their own.
    """
    ident = require_identity()
    item_id = int_arg("itemId")
    if item_id is not None:
        claims = list_for_item(item_id, ident.user_id)
    else:
        claims = list_for_claimant(
            ident.user_id,
            status=request.args.get("status") or None,
            limit=int_arg("limit", 200),
        )
    return jsonify({"claims": [_claim_with_item(c) for c in claims]})


@bp.get("/<int:claim_id>")
def show_claim(claim_id: int):
    ident = require_identity()
    return jsonify({"claim": _claim_with_item(get_claim(claim_id, ident.user_id))})


@bp.post("/<int:claim_id>/approve")
def approve(claim_id: int):
    ident = require_identity()
    claim = approve_claim(claim_id, ident.user_id)
    return jsonify({"claim": _claim_with_item(claim)})


@bp.post("/<int:claim_id>/reject")
def reject(claim_id: int):
    ident = require_identity()
    claim = reject_claim(claim_id, ident.user_id)
    return jsonify({"claim": _claim_with_item(claim)})
