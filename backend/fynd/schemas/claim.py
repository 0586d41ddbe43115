from marshmallow import EXCLUDE, Schema, fields, validate


class ClaimCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    item_id = fields.Int(data_key="itemId", required=True)
    message = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=1000))


class ClaimSchema(Schema):
    id = fields.Int(dump_only=True)
    item_id = fields.Int(data_key="itemId")
    claimant_id = fields.Str(attribute="claimant_user_id", data_key="claimantId")
    status = fields.Str(dump_only=True)
    message = fields.Str()
    decided_at = fields.DateTime(data_key="decidedAt")
    created_at = fields.DateTime(data_key="createdAt", dump_only=True)
