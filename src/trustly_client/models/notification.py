"""
Notification methods and the rows persisted for every inbound notification.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class NotificationMethod:
    """Notification methods Trustly calls on the merchant."""
    PENDING = "pending"  # payment completed by the end-user, money not yet received
    CREDIT = "credit"    # end-user balance should be increased
    DEBIT = "debit"      # end-user balance should be decreased, e.g. a disputed deposit
    CANCEL = "cancel"    # order cancelled by the end-user


def _now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationRecord(BaseModel):
    """One accepted notification. ``id`` is unique for the integration."""
    id: int
    uuid: Optional[str] = None
    method: Optional[str] = None
    signature: Optional[str] = None
    data: str
    created_at: datetime = Field(default_factory=_now)


class SignatureAuditRecord(BaseModel):
    """One signature check of an inbound notification. Append-only."""
    customer_id: Optional[str] = None
    order_id: Optional[str] = None
    uuid: Optional[str] = None
    notification_id: int = 0
    is_bad_signature: bool
    created: datetime = Field(default_factory=_now)
