import enum

from sqlalchemy import BigInteger, Enum, Integer, JSON
from sqlalchemy.dialects.postgresql import JSONB

# Column types shared by the models. BIGINT keys fall back to INTEGER on SQLite so
# rowid autoincrement keeps working in tests; JSON is JSONB on Postgres.
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")
JSONType = JSON().with_variant(JSONB(), "postgresql")

ITEM_TYPES = (
    "electronics",
    "clothing",
    "keys",
    "pets",
    "jewelry",
    "books",
    "wallet",
    "accessories",
    "vehicles",
    "sports",
    "toys",
    "other",
)


class NotificationKind(str, enum.Enum):
    CLAIM = "claim"
    CLAIM_APPROVED = "claim_approved"
    CLAIM_REJECTED = "claim_rejected"
    MESSAGE = "message"
    ITEM_RESOLVED = "item_resolved"
    VERIFICATION_APPROVED = "verification_approved"
    VERIFICATION_REJECTED = "verification_rejected"


item_category_enum = Enum("lost", "found", name="item_category_enum")
item_status_enum = Enum("active", "resolved", name="item_status_enum")
claim_status_enum = Enum("pending", "approved", "rejected", name="claim_status_enum")
verification_status_enum = Enum("pending", "approved", "rejected", name="verification_status_enum")
match_status_enum = Enum("pending", "viewed", "contacted", "dismissed", name="match_status_enum")
notification_kind_enum = Enum(
    NotificationKind,
    name="notification_kind_enum",
    values_callable=lambda kinds: [k.value for k in kinds],
)
