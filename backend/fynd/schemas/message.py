from marshmallow import EXCLUDE, Schema, fields, validate


class MessageCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    item_id = fields.Int(data_key="itemId", required=True)
    receiver_id = fields.Str(data_key="receiverId", required=True, validate=validate.Length(min=1, max=64))
    body = fields.Str(required=True, validate=validate.Length(max=2000))


class MessageSchema(Schema):
    id = fields.Int(dump_only=True)
    item_id = fields.Int(data_key="itemId")
    sender_id = fields.Str(data_key="senderId")
    receiver_id = fields.Str(data_key="receiverId")
    body = fields.Str()
    read = fields.Bool()
    read_at = fields.DateTime(data_key="readAt")
    created_at = fields.DateTime(data_key="createdAt")


class ConversationReadSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    item_id = fields.Int(data_key="itemId", required=True)
    with_user_id = fields.Str(data_key="with", required=True, validate=validate.Length(min=1, max=64))
