"""Basic unit tests for the trustly-client package."""

from trustly_client import (
    TrustlyClient,
    Notification,
    TrustlyError,
    ConnectionError,
    DataError,
    VersionError,
    SignatureError,
    ConfigurationError,
    StorageError,
    NotificationMethod,
    __version__,
)


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert TrustlyClient is not None
    assert Notification is not None


def test_error_hierarchy():
    for cls in (ConnectionError, DataError, VersionError, SignatureError, ConfigurationError, StorageError):
        assert issubclass(cls, TrustlyError)


def test_error_attributes():
    err = TrustlyError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    err_with_details = DataError("bad data", details={"id": "123"})
    assert err_with_details.code == "data_error"
    assert err_with_details.details == {"id": "123"}

    version_err = VersionError("unsupported", "2.0")
    assert version_err.code == "version_error"
    assert version_err.version == "2.0"


def test_signature_error_keeps_data_out_of_sight():
    err = SignatureError("Incoming message signature is not valid", {"amount": "1000000.00"})
    assert err.code == "signature_error"
    assert err.details is None
    assert "1000000" not in str(err)
    assert "1000000" not in repr(err)
    assert err.get_unverified_data() == {"amount": "1000000.00"}


def test_notification_method_constants():
    assert NotificationMethod.PENDING == "pending"
    assert NotificationMethod.CREDIT == "credit"
    assert NotificationMethod.DEBIT == "debit"
    assert NotificationMethod.CANCEL == "cancel"
