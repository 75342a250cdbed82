"""
trustly-client — Trustly API client for Python.

Signed JSON-RPC calls to the Trustly API and verification of the
notifications Trustly pushes back.
"""

from trustly_client.client import TrustlyClient
from trustly_client.config import Settings, load_settings, API_URL, TEST_API_URL
from trustly_client.errors import (
    TrustlyError,
    ConnectionError,
    DataError,
    VersionError,
    SignatureError,
    ConfigurationError,
    StorageError,
)
from trustly_client.models.envelope import Request, Response, NotificationRequest, NotificationResponse
from trustly_client.models.methods import Deposit, Refund
from trustly_client.models.notification import NotificationMethod
from trustly_client.notifications import Notification
from trustly_client.storage import NotificationStore, SQLiteNotificationStore

__version__ = "0.1.0"
__all__ = [
    "TrustlyClient",
    "Settings",
    "load_settings",
    "API_URL",
    "TEST_API_URL",
    "TrustlyError",
    "ConnectionError",
    "DataError",
    "VersionError",
    "SignatureError",
    "ConfigurationError",
    "StorageError",
    "Request",
    "Response",
    "NotificationRequest",
    "NotificationResponse",
    "Deposit",
    "Refund",
    "NotificationMethod",
    "Notification",
    "NotificationStore",
    "SQLiteNotificationStore",
]
