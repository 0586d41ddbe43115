from .item import Item
from .claim import Claim
from .verification import Verification
from .match import Match
from .notification import Notification
from .message import Message

__all__ = [
    "Item",
    "Claim",
    "Verification",
    "Match",
    "Notification",
    "Message",
]
