from flask import Blueprint, jsonify

from ..items.service import user_stats

bp = Blueprint("users", __name__, url_prefix="/users")


@bp.get("/<string:user_id>/stats")
def stats(user_id: str):
    return jsonify({"userId": user_id, "stats": user_stats(user_id)})
