"""
Inbound notification handling: verify, audit, dedupe, persist, acknowledge.

    request = NotificationRequest(body)
    notification = Notification(request, private_key, public_key, store)
    if not notification.is_duplicate():
        ... act on notification.request.get_data() ...
        notification.save()
    return notification.build_acknowledgement(True).to_json()

The signature is checked, and the outcome written to the audit table, as soon
as a :class:`Notification` is created. A forged notification leaves an audit
row behind and raises :class:`~trustly_client.errors.SignatureError`.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

from cryptography.hazmat.primitives.asymmetric import rsa

from trustly_client import signing
from trustly_client.config import Settings
from trustly_client.errors import SignatureError, StorageError
from trustly_client.models.envelope import NotificationRequest, NotificationResponse
from trustly_client.models.notification import NotificationMethod, NotificationRecord, SignatureAuditRecord
from trustly_client.storage import NotificationStore, SQLiteNotificationStore

logger = logging.getLogger(__name__)

KeySource = Union[str, Path]

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group())
    return 0


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class Notification:
    def __init__(
        self,
        request: NotificationRequest,
        private_key: Union[rsa.RSAPrivateKey, KeySource],
        public_key: Union[rsa.RSAPublicKey, KeySource],
        store: NotificationStore,
        key_dir: Optional[KeySource] = None,
    ):
        self.request = request
        self._store = store
        if not isinstance(private_key, rsa.RSAPrivateKey):
            private_key = signing.load_private_key(private_key, key_dir)
        if not isinstance(public_key, rsa.RSAPublicKey):
            public_key = signing.load_public_key(public_key, key_dir)
        self._private_key = private_key
        self._public_key = public_key

        self.notification_id = _int(request.get_data("notificationid"))

        valid = self.verify()
        audit_error = self._record_signature_check(bad_signature=not valid)
        self.audit_recorded = audit_error is None
        if not valid:
            logger.warning(
                "Rejected notification %s (%s): bad signature", self.notification_id, request.method
            )
            raise SignatureError(
                "Incoming message signature is not valid",
                request.get_data(),
                details={"audit_recorded": self.audit_recorded},
            ) from audit_error

        logger.info("Accepted %s notification %s", request.method, self.notification_id)

    @classmethod
    def from_settings(
        cls, body: Union[str, bytes], settings: Settings, store: Optional[NotificationStore] = None,
    ) -> "Notification":
        return cls(
            NotificationRequest(body),
            settings.private_key,
            settings.public_key,
            store or SQLiteNotificationStore(settings.database),
            key_dir=settings.key_dir,
        )

    def verify(self) -> bool:
        r = self.request
        return signing.verify(r.method, r.uuid, r.get_data(), r.signature, self._public_key)

    def _record_signature_check(self, bad_signature: bool) -> Optional[StorageError]:
        record = SignatureAuditRecord(
            customer_id=_text(self.request.get_data("enduserid")),
            order_id=_text(self.request.get_data("orderid")),
            uuid=_text(self.request.uuid),
            notification_id=self.notification_id,
            is_bad_signature=bad_signature,
        )
        try:
            self._store.insert_signature_audit(record)
        except StorageError as e:
            logger.warning("Signature audit save() failed for notification %s: %s", self.notification_id, e)
            return e
        return None

    def is_pending(self) -> bool:
        return self.request.method == NotificationMethod.PENDING

    def is_credit(self) -> bool:
        return self.request.method == NotificationMethod.CREDIT

    def is_debit(self) -> bool:
        return self.request.method == NotificationMethod.DEBIT

    def is_cancel(self) -> bool:
        return self.request.method == NotificationMethod.CANCEL

    def is_duplicate(self) -> bool:
        """Whether this notification id was saved before.

        A storage failure is logged and answered with False, so an unavailable
        store never blocks processing.
        """
        try:
            return self._store.notification_exists(self.notification_id)
        except StorageError as e:
            logger.warning("Notification is_duplicate() storage error: %s", e)
            return False

    def save(self) -> bool:
        """Persist the notification. False means the id was already stored."""
        record = NotificationRecord(
            id=self.notification_id,
            uuid=_text(self.request.uuid),
            method=_text(self.request.method),
            signature=_text(self.request.signature),
            data=self.request.body,
        )
        try:
            return self._store.insert_notification(record)
        except StorageError as e:
            logger.warning("Notification save() storage error: %s", e)
            raise

    def build_acknowledgement(self, success: bool) -> NotificationResponse:
        """Signed response telling Trustly the notification was handled (or not)."""
        response = NotificationResponse(self.request, success)
        response.signature = signing.sign(
            response.method, response.uuid, response.get_data(), self._private_key
        )
        return response
