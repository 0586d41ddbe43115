from marshmallow import EXCLUDE, Schema, fields, validate

from .item import ItemSchema


class MatchComputeSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    lost_item_id = fields.Int(data_key="lostItemId", required=True)
    found_item_id = fields.Int(data_key="foundItemId", required=True)


class MatchStatusSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # pending is the initial state only
    status = fields.Str(required=True, validate=validate.OneOf(["viewed", "contacted", "dismissed"]))


class MatchSchema(Schema):
    id = fields.Int(dump_only=True)
    lost_item_id = fields.Int(data_key="lostItemId")
    found_item_id = fields.Int(data_key="foundItemId")
    score = fields.Float()
    reasons = fields.List(fields.Str())
    distance_km = fields.Float(data_key="distanceKm")
    status = fields.Str()
    created_at = fields.DateTime(data_key="createdAt")
    computed_at = fields.DateTime(data_key="computedAt")
    lost_item = fields.Nested(ItemSchema, data_key="lostItem")
    found_item = fields.Nested(ItemSchema, data_key="foundItem")
