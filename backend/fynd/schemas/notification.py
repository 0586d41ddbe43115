from marshmallow import Schema, fields


class NotificationSchema(Schema):
    id = fields.Int(dump_only=True)
    user_id = fields.Str(data_key="userId")
    kind = fields.Method("_kind")
    title = fields.Str()
    message = fields.Str()
    link = fields.Str()
    read = fields.Bool()
    read_at = fields.DateTime(data_key="readAt")
    created_at = fields.DateTime(data_key="createdAt")

    def _kind(self, obj):
        kind = obj.kind
        return getattr(kind, "value", kind)
