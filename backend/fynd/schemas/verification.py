from marshmallow import EXCLUDE, Schema, fields, validate


class VerificationCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    item_id = fields.Int(data_key="itemId", required=True)
    # Photo count is checked by the workflow so the error names the precondition
    photos = fields.List(fields.Str(validate=validate.Length(min=1, max=512)), required=True)
    notes = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=1000))


class VerificationDecisionSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.Str(required=True, validate=validate.OneOf(["approved", "rejected"]))
    notes = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=1000))


class VerificationSchema(Schema):
    id = fields.Int(dump_only=True)
    item_id = fields.Int(data_key="itemId")
    user_id = fields.Str(data_key="userId")
    status = fields.Str()
    photos = fields.List(fields.Str())
    notes = fields.Str()
    reviewer_user_id = fields.Str(data_key="reviewerUserId")
    review_notes = fields.Str(data_key="reviewNotes")
    decided_at = fields.DateTime(data_key="decidedAt")
    created_at = fields.DateTime(data_key="createdAt")
