"""Turn workflow transitions into notification rows.

Each event type maps to exactly one ``NotificationKind``. ``render`` is pure;
``dispatch`` writes the result in its own commit and never raises, so a
failed write cannot undo the transition that triggered it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Type

from ...extensions import db
from ...models.enums import NotificationKind
from ...models.notification import Notification

logger = logging.getLogger(__name__)


def item_link(item_id: int) -> str:
    return f"/item/{item_id}"


@dataclass(frozen=True)
class ClaimSubmitted:
    owner_id: str
    item_id: int
    item_title: str
    claimant_email: Optional[str] = None


@dataclass(frozen=True)
class ClaimApproved:
    claimant_id: str
    item_id: int
    item_title: str


@dataclass(frozen=True)
class ClaimRejected:
    claimant_id: str
    item_id: int
    item_title: str


@dataclass(frozen=True)
class MessageReceived:
    receiver_id: str
    item_id: int
    item_title: str
    sender_email: Optional[str] = None


@dataclass(frozen=True)
class ItemResolved:
    claimant_id: str
    item_id: int
    item_title: str


@dataclass(frozen=True)
class VerificationApproved:
    owner_id: str
    item_id: int
    item_title: str


@dataclass(frozen=True)
class VerificationRejected:
    owner_id: str
    item_id: int
    item_title: str


@dataclass(frozen=True)
class NotificationDraft:
    kind: NotificationKind
    recipient: str
    title: str
    message: str
    link: Optional[str] = None


def _claim_submitted(e: ClaimSubmitted) -> NotificationDraft:
    return NotificationDraft(
        kind=NotificationKind.CLAIM,
        recipient=e.owner_id,
        title="New Claim",
        message=f"{e.claimant_email or 'Someone'} claimed your item: {e.item_title}",
        link=item_link(e.item_id),
    )


def _claim_approved(e: ClaimApproved) -> NotificationDraft:
    return NotificationDraft(
        kind=NotificationKind.CLAIM_APPROVED,
        recipient=e.claimant_id,
        title="Claim Approved!",
        message=f"Your claim for \"{e.item_title}\" has been approved! Contact the owner to arrange pickup.",
        link=item_link(e.item_id),
    )


def _claim_rejected(e: ClaimRejected) -> NotificationDraft:
    return NotificationDraft(
        kind=NotificationKind.CLAIM_REJECTED,
        recipient=e.claimant_id,
        title="Claim Rejected",
        message=f"Your claim for \"{e.item_title}\" was not approved.",
        link=item_link(e.item_id),
    )


def _message_received(e: MessageReceived) -> NotificationDraft:
    return NotificationDraft(
        kind=NotificationKind.MESSAGE,
        recipient=e.receiver_id,
        title="New Message",
        message=f"{e.sender_email or 'Someone'} sent you a message about \"{e.item_title}\"",
        link=item_link(e.item_id),
    )


def _item_resolved(e: ItemResolved) -> NotificationDraft:
    return NotificationDraft(
        kind=NotificationKind.ITEM_RESOLVED,
        recipient=e.claimant_id,
        title="Item Resolved",
        message=f"The item \"{e.item_title}\" has been marked as resolved.",
        link=item_link(e.item_id),
    )


def _verification_approved(e: VerificationApproved) -> NotificationDraft:
    return NotificationDraft(
        kind=NotificationKind.VERIFICATION_APPROVED,
        recipient=e.owner_id,
        title="Verification Approved",
        message=f"Your item \"{e.item_title}\" is now verified.",
        link=item_link(e.item_id),
    )


def _verification_rejected(e: VerificationRejected) -> NotificationDraft:
    return NotificationDraft(
        kind=NotificationKind.VERIFICATION_REJECTED,
        recipient=e.owner_id,
        title="Verification Rejected",
        message=f"The verification request for \"{e.item_title}\" was not approved. You can submit new photos.",
        link=item_link(e.item_id),
    )


RENDERERS: Dict[Type, Callable] = {
    ClaimSubmitted: _claim_submitted,
    ClaimApproved: _claim_approved,
    ClaimRejected: _claim_rejected,
    MessageReceived: _message_received,
    ItemResolved: _item_resolved,
    VerificationApproved: _verification_approved,
    VerificationRejected: _verification_rejected,
}


def render(event) -> NotificationDraft:
    renderer = RENDERERS.get(type(event))
    if renderer is None:
        raise TypeError(f"No notification renderer for {type(event).__name__}")
    return renderer(event)


def _write(draft: NotificationDraft) -> Notification:
    row = Notification(
        user_id=draft.recipient,
        kind=draft.kind,
        title=draft.title,
        message=draft.message,
        link=draft.link,
        read=False,
    )
    db.session.add(row)
    db.session.commit()
    return row


def dispatch(event) -> Optional[Notification]:
    """Best-effort: persist the notification for ``event``, or log and return None."""
    try:
        draft = render(event)
        row = _write(draft)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to dispatch %s notification", type(event).__name__)
        return None
    logger.info("Notification %s sent to user %s", draft.kind.value, draft.recipient)
    return row
