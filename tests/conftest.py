"""Shared fixtures: throwaway RSA keys and signed message factories."""

import json
from typing import Any, Optional

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from trustly_client import signing


def _generate_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _private_pem(key: rsa.RSAPrivateKey) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _public_pem(key: rsa.RSAPrivateKey) -> bytes:
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture(scope="session")
def merchant_key() -> rsa.RSAPrivateKey:
    return _generate_key()


@pytest.fixture(scope="session")
def trustly_key() -> rsa.RSAPrivateKey:
    return _generate_key()


@pytest.fixture(scope="session")
def forger_key() -> rsa.RSAPrivateKey:
    return _generate_key()


@pytest.fixture(scope="session")
def key_dir(tmp_path_factory, merchant_key, trustly_key):
    """Directory laid out like ~/.trustly with both sides' PEM files."""
    d = tmp_path_factory.mktemp("keys")
    (d / "merchant_private.pem").write_bytes(_private_pem(merchant_key))
    (d / "merchant_public.pem").write_bytes(_public_pem(merchant_key))
    (d / "trustly_private.pem").write_bytes(_private_pem(trustly_key))
    (d / "trustly_public.pem").write_bytes(_public_pem(trustly_key))
    (d / "garbage.pem").write_bytes(b"-----BEGIN PUBLIC KEY-----\nnot a key\n-----END PUBLIC KEY-----\n")
    return d


@pytest.fixture
def signed_reply(trustly_key):
    """Build a response body the way the Trustly API would send it."""

    def build(
        method: Optional[str],
        uuid: Optional[str],
        data: Any,
        kind: str = "result",
        version: Any = "1.1",
        key: Optional[rsa.RSAPrivateKey] = None,
        extra: Optional[dict] = None,
    ) -> str:
        section = {
            "uuid": uuid,
            "method": method,
            "signature": signing.sign(method, uuid, data, key or trustly_key),
            "data": data,
        }
        section.update(extra or {})
        return json.dumps({"version": version, kind: section})

    return build


@pytest.fixture
def notification_body(trustly_key):
    """Build a notification body as pushed by Trustly."""

    def build(
        method: str = "credit",
        notification_id: str = "2902437560",
        uuid: str = "258a2184-2842-b485-25ca-293525152425",
        key: Optional[rsa.RSAPrivateKey] = None,
        tamper: Optional[dict] = None,
        version: str = "1.1",
    ) -> str:
        data = {
            "amount": "10.00",
            "currency": "EUR",
            "messageid": "m-1",
            "orderid": "1436375433",
            "enduserid": "42",
            "notificationid": notification_id,
            "timestamp": "2026-10-19 09:12:00.123456+00",
        }
        signature = signing.sign(method, uuid, data, key or trustly_key)
        data.update(tamper or {})
        return json.dumps({
            "method": method,
            "version": version,
            "params": {"uuid": uuid, "signature": signature, "data": data},
        })

    return build
