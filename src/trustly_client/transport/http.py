"""
HTTPS transport for the Trustly JSON-RPC endpoint.

Only POSTs a body and hands back status + body. Certificates are always
verified and a verification failure is a connection error.
"""

from __future__ import annotations

import logging
import ssl
from typing import Optional, Protocol

import httpx
from pydantic import BaseModel

from trustly_client.errors import ConnectionError

logger = logging.getLogger(__name__)

USER_AGENT = "trustly-client/0.1.0"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 5.0

X509_ERRORS = {
    0: "X509_V_OK",
    2: "X509_V_ERR_UNABLE_TO_GET_ISSUER_CERT",
    3: "X509_V_ERR_UNABLE_TO_GET_CRL",
    4: "X509_V_ERR_UNABLE_TO_DECRYPT_CERT_SIGNATURE",
    5: "X509_V_ERR_UNABLE_TO_DECRYPT_CRL_SIGNATURE",
    6: "X509_V_ERR_UNABLE_TO_DECODE_ISSUER_PUBLIC_KEY",
    7: "X509_V_ERR_CERT_SIGNATURE_FAILURE",
    8: "X509_V_ERR_CRL_SIGNATURE_FAILURE",
    9: "X509_V_ERR_CERT_NOT_YET_VALID",
    10: "X509_V_ERR_CERT_HAS_EXPIRED",
    11: "X509_V_ERR_CRL_NOT_YET_VALID",
    12: "X509_V_ERR_CRL_HAS_EXPIRED",
    13: "X509_V_ERR_ERROR_IN_CERT_NOT_BEFORE_FIELD",
    14: "X509_V_ERR_ERROR_IN_CERT_NOT_AFTER_FIELD",
    15: "X509_V_ERR_ERROR_IN_CRL_LAST_UPDATE_FIELD",
    16: "X509_V_ERR_ERROR_IN_CRL_NEXT_UPDATE_FIELD",
    17: "X509_V_ERR_OUT_OF_MEM",
    18: "X509_V_ERR_DEPTH_ZERO_SELF_SIGNED_CERT",
    19: "X509_V_ERR_SELF_SIGNED_CERT_IN_CHAIN",
    20: "X509_V_ERR_UNABLE_TO_GET_ISSUER_CERT_LOCALLY",
    21: "X509_V_ERR_UNABLE_TO_VERIFY_LEAF_SIGNATURE",
    22: "X509_V_ERR_CERT_CHAIN_TOO_LONG",
    23: "X509_V_ERR_CERT_REVOKED",
    24: "X509_V_ERR_INVALID_CA",
    25: "X509_V_ERR_PATH_LENGTH_EXCEEDED",
    26: "X509_V_ERR_INVALID_PURPOSE",
    27: "X509_V_ERR_CERT_UNTRUSTED",
    28: "X509_V_ERR_CERT_REJECTED",
    29: "X509_V_ERR_SUBJECT_ISSUER_MISMATCH",
    30: "X509_V_ERR_AKID_SKID_MISMATCH",
    31: "X509_V_ERR_AKID_ISSUER_SERIAL_MISMATCH",
    32: "X509_V_ERR_KEYUSAGE_NO_CERTSIGN",
    50: "X509_V_ERR_APPLICATION_VERIFICATION",
    62: "X509_V_ERR_HOSTNAME_MISMATCH",
}


class TransportResult(BaseModel):
    """Raw outcome of one POST."""
    status_code: int
    body: str


class Transport(Protocol):
    def post(self, url: str, body: str) -> TransportResult: ...


def describe_transport_error(exc: BaseException) -> str:
    """Human readable reason for a failed connection, naming X.509 errors."""
    seen = set()
    cause: Optional[BaseException] = exc
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        if isinstance(cause, ssl.SSLCertVerificationError):
            code = getattr(cause, "verify_code", None)
            name = X509_ERRORS.get(code, getattr(cause, "verify_message", None) or str(cause))
            return f"Failed to connect to the Trustly API. SSL verification error #{code}: {name}"
        cause = cause.__cause__ or cause.__context__
    return str(exc) or "Failed to connect to the Trustly API"


class HttpClient:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(
            headers={"User-Agent": USER_AGENT, "Content-Type": "application/json; charset=utf-8"},
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            follow_redirects=False,
            verify=True,
            transport=transport,
        )

    def post(self, url: str, body: str) -> TransportResult:
        if httpx.URL(url).scheme != "https":
            raise ConnectionError(f"Refusing to send to a non-HTTPS endpoint: {url}")

        logger.debug("POST %s (%d bytes)", url, len(body))
        try:
            resp = self._client.post(url, content=body.encode("utf-8"))
        except httpx.TransportError as e:
            raise ConnectionError(describe_transport_error(e)) from e
        logger.debug("HTTP %s <- %s (%d bytes)", resp.status_code, url, len(resp.content))

        return TransportResult(status_code=resp.status_code, body=resp.text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
