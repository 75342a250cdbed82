"""
RSA-SHA1 message signatures and key loading.

Signatures cover ``method + uuid + serialize(data)`` and travel base64-encoded.
Keys are PEM files. Relative paths are resolved against a key directory.
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Any, Optional, Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from trustly_client.errors import ConfigurationError, SignatureError
from trustly_client.serialization import signable_material

logger = logging.getLogger(__name__)

DEFAULT_KEY_DIR = Path.home() / ".trustly"

PathLike = Union[str, Path]


def resolve_key_path(path: PathLike, key_dir: Optional[PathLike] = None) -> Path:
    base = Path(key_dir).expanduser() if key_dir is not None else DEFAULT_KEY_DIR
    return (base / Path(path).expanduser()).resolve()


def _read_key_file(path: PathLike, key_dir: Optional[PathLike]) -> tuple[Path, bytes]:
    key_file = resolve_key_path(path, key_dir)
    try:
        return key_file, key_file.read_bytes()
    except OSError as e:
        raise ConfigurationError(f"The key could not be read from {key_file}: {e}", {"path": str(key_file)}) from e


def load_private_key(path: PathLike, key_dir: Optional[PathLike] = None) -> rsa.RSAPrivateKey:
    """Load the merchant's RSA private key from an unencrypted PEM file."""
    key_file, pem = _read_key_file(path, key_dir)
    try:
        key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ConfigurationError(f"Invalid private key in {key_file}: {e}", {"path": str(key_file)}) from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigurationError(f"Private key in {key_file} is not an RSA key", {"path": str(key_file)})
    return key


def load_public_key(path: PathLike, key_dir: Optional[PathLike] = None) -> rsa.RSAPublicKey:
    """Load the counterparty's RSA public key from a PEM key or certificate."""
    key_file, pem = _read_key_file(path, key_dir)
    try:
        if b"BEGIN CERTIFICATE" in pem:
            key = x509.load_pem_x509_certificate(pem).public_key()
        else:
            key = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ConfigurationError(f"Invalid public key in {key_file}: {e}", {"path": str(key_file)}) from e
    if not isinstance(key, rsa.RSAPublicKey):
        raise ConfigurationError(f"Public key in {key_file} is not an RSA key", {"path": str(key_file)})
    return key


def sign(method: Optional[str], uuid: Optional[str], data: Any, private_key: rsa.RSAPrivateKey) -> str:
    """Sign a message and return the base64 signature.

    A missing method or UUID signs as the empty string. Any failure inside the
    crypto backend is raised as :class:`SignatureError` with its diagnostic.
    """
    if private_key is None:
        raise SignatureError("No private key has been loaded for signing")
    try:
        raw = private_key.sign(signable_material(method, uuid, data), padding.PKCS1v15(), hashes.SHA1())
    except (ValueError, TypeError, AttributeError, UnsupportedAlgorithm) as e:
        raise SignatureError(f"Failed to sign the outgoing message. {e}") from e
    return base64.b64encode(raw).decode("ascii")


def verify(
    method: Optional[str],
    uuid: Optional[str],
    data: Any,
    signature: Optional[str],
    public_key: rsa.RSAPublicKey,
) -> bool:
    """Check a base64 signature. Never raises; any problem means ``False``."""
    if not signature or not isinstance(signature, str):
        return False
    if not isinstance(public_key, rsa.RSAPublicKey):
        logger.warning("Signature check attempted without a usable RSA public key")
        return False
    try:
        raw = base64.b64decode("".join(signature.split()), validate=True)
        public_key.verify(raw, signable_material(method, uuid, data), padding.PKCS1v15(), hashes.SHA1())
    except (InvalidSignature, binascii.Error, ValueError, TypeError):
        return False
    return True
