from marshmallow import EXCLUDE, Schema, fields, validate, validates_schema, ValidationError

from ..models.enums import ITEM_TYPES


class ItemCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    description = fields.Str(load_default=None, allow_none=True)
    category = fields.Str(required=True, validate=validate.OneOf(["lost", "found"]))
    item_type = fields.Str(data_key="itemType", load_default=None, allow_none=True, validate=validate.OneOf(ITEM_TYPES))
    location = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=255))
    latitude = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=-90, max=90))
    longitude = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=-180, max=180))
    image_url = fields.Str(data_key="imageUrl", load_default=None, allow_none=True, validate=validate.Length(max=512))
    contact_info = fields.Str(data_key="contactInfo", load_default=None, allow_none=True, validate=validate.Length(max=255))

    @validates_schema
    def _coordinates_together(self, data, **kwargs):
        if (data.get("latitude") is None) != (data.get("longitude") is None):
            raise ValidationError("latitude and longitude must be provided together", field_name="latitude")


class ItemSchema(Schema):
    id = fields.Int(dump_only=True)
    user_id = fields.Str(data_key="userId")
    title = fields.Str()
    description = fields.Str()
    category = fields.Str()
    item_type = fields.Str(data_key="itemType")
    location = fields.Str()
    latitude = fields.Float()
    longitude = fields.Float()
    image_url = fields.Str(data_key="imageUrl")
    contact_info = fields.Str(data_key="contactInfo")
    status = fields.Str()
    verified = fields.Bool()
    verification_status = fields.Str(data_key="verificationStatus")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
