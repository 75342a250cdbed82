"""
Trustly error types.

Every failure surfaced by the client or the notification verifier is one of
these. The ``code`` attribute is stable and safe to branch on.
"""

from typing import Any, Optional


class TrustlyError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConnectionError(TrustlyError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("connection_error", message, details)


class DataError(TrustlyError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("data_error", message, details)


class VersionError(TrustlyError):
    def __init__(self, message: str, version: Any = None):
        super().__init__("version_error", message, {"version": version})
        self.version = version


class SignatureError(TrustlyError):
    """A message could not be signed, or an inbound signature did not verify.

    The payload that failed verification is kept off ``details`` and out of the
    message text. It is only reachable through :meth:`get_unverified_data`.
    """

    def __init__(self, message: str, unverified_data: Any = None, details: Optional[dict[str, Any]] = None):
        super().__init__("signature_error", message, details)
        self._unverified_data = unverified_data

    def get_unverified_data(self) -> Any:
        """Return the data that failed verification.

        For debugging only. The content is untrusted and must not be acted upon.
        """
        return self._unverified_data


class ConfigurationError(TrustlyError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("configuration_error", message, details)


class StorageError(TrustlyError):
    def __init__(self, message: str):
        super().__init__("storage_error", message)
