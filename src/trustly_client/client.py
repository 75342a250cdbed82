"""
TrustlyClient — signs outbound calls and verifies what comes back.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union

from trustly_client import signing
from trustly_client.config import Settings
from trustly_client.errors import DataError, SignatureError
from trustly_client.models.envelope import Request, Response
from trustly_client.models.methods import Deposit, MethodBuilder, Refund
from trustly_client.serialization import generate_uuid
from trustly_client.transport.http import HttpClient, Transport

logger = logging.getLogger(__name__)


class TrustlyClient:
    """Synchronous Trustly API client.

    Both keys are loaded when the client is created; a missing or unreadable
    key file raises :class:`~trustly_client.errors.ConfigurationError` before
    anything touches the network. Calls are never retried.
    """

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        private_key: Union[str, Path],
        public_key: Union[str, Path],
        key_dir: Optional[Union[str, Path]] = None,
        transport: Optional[Transport] = None,
    ):
        self.url = url
        self._username = username
        self._password = password
        self._private_key = signing.load_private_key(private_key, key_dir)
        self._public_key = signing.load_public_key(public_key, key_dir)
        self._transport = transport or HttpClient()
        self.last_request: Optional[Request] = None

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[Transport] = None) -> "TrustlyClient":
        return cls(
            url=settings.url,
            username=settings.username,
            password=settings.password,
            private_key=settings.private_key,
            public_key=settings.public_key,
            key_dir=settings.key_dir,
            transport=transport or HttpClient(settings.timeout, settings.connect_timeout),
        )

    def call(self, request: Request) -> Response:
        """Send ``request`` and return the verified response that belongs to it."""
        if request.uuid is None:
            request.uuid = generate_uuid()

        self._add_credentials(request)
        self.last_request = request

        logger.debug("Calling %s uuid=%s on %s", request.method, request.uuid, self.url)
        result = self._transport.post(self.url, request.to_json())
        response = Response(request, result, self._public_key)

        if not response.verify():
            raise SignatureError("Incoming message signature is not valid", response.get_data())

        if response.uuid != request.uuid:
            raise DataError(
                "Incoming message is not related to request. UUID mismatch.",
                {"expected": request.uuid, "received": response.uuid},
            )

        return response

    def commit(self, method: MethodBuilder) -> Response:
        return self.call(method.to_request())

    def deposit(self, **fields: Any) -> Response:
        return self.commit(Deposit(**fields))

    def refund(self, **fields: Any) -> Response:
        return self.commit(Refund(**fields))

    def _add_credentials(self, request: Request) -> None:
        request.set_data("Username", self._username)
        request.set_data("Password", self._password)
        try:
            signature = signing.sign(request.method, request.uuid, request.get_data(), self._private_key)
        except SignatureError as e:
            raise DataError(f"Unable to add authorization parameters to outgoing request: {e}") from e
        request.set_param("Signature", signature)

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "TrustlyClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
