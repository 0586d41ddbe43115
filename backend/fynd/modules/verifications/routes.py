from flask import Blueprint, current_app, jsonify

from ...errors import AuthorizationError
from ...http import int_arg, load_body
from ...schemas.verification import (
    VerificationCreateSchema,
    VerificationDecisionSchema,
    VerificationSchema,
)
from ...security import require_identity, require_role
from ..items.service import get_item
from .service import decide_verification, list_for_item, submit_verification

bp = Blueprint("verifications", __name__, url_prefix="/verifications")

_create_schema = VerificationCreateSchema()
_decision_schema = VerificationDecisionSchema()
_verification_schema = VerificationSchema()


def _reviewer_roles() -> set[str]:
    raw = current_app.config.get("REVIEWER_ROLES") or ""
    return {r.strip().lower() for r in raw.split(",") if r.strip()}


@bp.post("")
def create_verification():
    ident = require_identity()
    data = load_body(_create_schema)
    verification = submit_verification(data["item_id"], ident.user_id, data["photos"], data.get("notes"))
    return jsonify({"verification": _verification_schema.dump(verification)}), 201


@bp.get("")
def list_verifications():
    ident = require_identity()
    item_id = int_arg("itemId", required=True)
    item = get_item(item_id)
    if not item.is_owned_by(ident.user_id) and ident.role.lower() not in _reviewer_roles():
        raise AuthorizationError("Only the item owner or a reviewer can view verification requests")
    rows = list_for_item(item.id)
    return jsonify({"verifications": _verification_schema.dump(rows, many=True)})


@bp.post("/<int:verification_id>/decision")
def decide(verification_id: int):
    ident = require_role(_reviewer_roles())
    data = load_body(_decision_schema)
    verification = decide_verification(
        verification_id,
        ident.user_id,
        approved=data["status"] == "approved",
        review_notes=data.get("notes"),
    )
    return jsonify({"verification": _verification_schema.dump(verification)})
