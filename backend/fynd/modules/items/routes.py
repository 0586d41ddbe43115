from flask import Blueprint, jsonify, request

from ...http import int_arg, load_body
from ...schemas.item import ItemCreateSchema, ItemSchema
from ...security import require_identity
from ..claims.service import mark_item_resolved
from .service import create_item, get_item, list_items

bp = Blueprint("items", __name__, url_prefix="/items")

_create_schema = ItemCreateSchema()
_item_schema = ItemSchema()


@bp.post("")
def post_item():
    ident = require_identity()
    data = load_body(_create_schema)
    item = create_item(ident.user_id, data)
    return jsonify({"item": _item_schema.dump(item)}), 201


@bp.get("")
def index():
    """List items newest first.

    Query params: category, status, itemType, userId, q (title/description
    search), limit (default 50), offset.
    """
    rows, total = list_items(
        category=request.args.get("category") or None,
        status=request.args.get("status") or None,
        item_type=request.args.get("itemType") or None,
        user_id=request.args.get("userId") or None,
        search=request.args.get("q") or None,
        limit=int_arg("limit", 50),
        offset=int_arg("offset", 0),
    )
    return jsonify({"items": _item_schema.dump(rows, many=True), "total": total})


@bp.get("/<int:item_id>")
def show(item_id: int):
    return jsonify({"item": _item_schema.dump(get_item(item_id))})


@bp.post("/<int:item_id>/resolve")
def resolve(item_id: int):
    ident = require_identity()
    item = mark_item_resolved(item_id, ident.user_id)
    return jsonify({"item": _item_schema.dump(item)})
