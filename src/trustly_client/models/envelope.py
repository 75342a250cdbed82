"""
JSON-RPC 1.1 envelopes exchanged with Trustly.

    Request               outbound call       {method, version, params: {UUID, Signature, Data: {..., Attributes}}}
    Response              its reply           {version, result | error: {uuid, method, signature, data}}
                                              (API errors nest the signed part in error.error)
    NotificationRequest   inbound push        {method, version, params: {uuid, signature, data}}
    NotificationResponse  our acknowledgement {version, result: {uuid, method, signature, data: {status}}}
"""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from cryptography.hazmat.primitives.asymmetric import rsa

from trustly_client import signing
from trustly_client.errors import ConnectionError, DataError, VersionError
from trustly_client.serialization import ensure_utf8, to_json, vacuum
from trustly_client.transport.http import TransportResult

JSONRPC_VERSION = "1.1"


def _lookup(section: Any, name: Optional[str]) -> Any:
    if name is None:
        return section
    if isinstance(section, dict):
        return section.get(name)
    return None


class Request:
    """An outbound call, built from a method name, data and attributes."""

    def __init__(
        self,
        method: Optional[str] = None,
        data: Any = None,
        attributes: Optional[dict[str, Any]] = None,
    ):
        payload: dict[str, Any] = {}
        if data is not None or attributes is not None:
            if attributes is not None and data is not None and not isinstance(data, dict):
                raise DataError("Data must be a mapping if attributes are provided")
            params: dict[str, Any] = {}
            if data is not None:
                params["Data"] = ensure_utf8(data)
            if attributes is not None:
                params.setdefault("Data", {})["Attributes"] = ensure_utf8(attributes)
            payload = vacuum({"params": params}) or {}

        self._payload = payload
        if method is not None:
            self.method = method
        self._payload.setdefault("params", {})
        self.set("version", JSONRPC_VERSION)

    def get(self, name: Optional[str] = None) -> Any:
        return _lookup(self._payload, name)

    def set(self, name: str, value: Any) -> None:
        self._payload[name] = ensure_utf8(value)

    @property
    def method(self) -> Optional[str]:
        return self.get("method")

    @method.setter
    def method(self, value: str) -> None:
        self.set("method", value)

    @property
    def version(self) -> Optional[str]:
        return self.get("version")

    @property
    def uuid(self) -> Optional[str]:
        return self._payload["params"].get("UUID")

    @uuid.setter
    def uuid(self, value: str) -> None:
        self.set_param("UUID", value)

    @property
    def signature(self) -> Optional[str]:
        return self.get_param("Signature")

    def get_param(self, name: str) -> Any:
        return self._payload["params"].get(name)

    def set_param(self, name: str, value: Any) -> None:
        self._payload["params"][name] = ensure_utf8(value)

    def get_data(self, name: Optional[str] = None) -> Any:
        return _lookup(self._payload["params"].get("Data"), name)

    def set_data(self, name: str, value: Any) -> Any:
        data = self._payload["params"].setdefault("Data", {})
        if not isinstance(data, dict):
            raise DataError("Data is not a mapping")
        data[name] = ensure_utf8(value)
        return value

    def get_attribute(self, name: str) -> Any:
        return _lookup(_lookup(self.get_data(), "Attributes"), name)

    def set_attribute(self, name: str, value: Any) -> Any:
        data = self._payload["params"].setdefault("Data", {})
        if not isinstance(data, dict):
            raise DataError("Data is not a mapping")
        data.setdefault("Attributes", {})[name] = ensure_utf8(value)
        return value

    def to_dict(self) -> dict[str, Any]:
        return self._payload

    def to_json(self, pretty: bool = False) -> str:
        return to_json(self._payload, pretty)

    def __repr__(self) -> str:
        return f"<Request method={self.method!r} uuid={self.uuid!r}>"


class Response:
    """The synchronous reply to a :class:`Request`.

    Parsing happens on construction. A body that is not JSON is reported as a
    connection problem when the HTTP status was not 200 (most likely an error
    page from something in front of the API), and as a data problem otherwise.
    """

    def __init__(self, request: Request, result: TransportResult, public_key: rsa.RSAPublicKey):
        self.request = request
        self.status_code = result.status_code
        self.body = result.body
        self._public_key = public_key

        try:
            payload = json.loads(result.body)
        except (TypeError, ValueError) as e:
            if result.status_code != 200:
                raise ConnectionError(f"HTTP {result.status_code}", {"status_code": result.status_code}) from e
            raise DataError(f"Failed to decode JSON response: {e}") from e
        if not isinstance(payload, dict):
            raise DataError("Response is not a JSON object")
        self._payload = payload

        has_result = payload.get("result") is not None
        has_error = payload.get("error") is not None
        if has_result == has_error:
            if has_result:
                raise DataError("Both 'result' and 'error' in response")
            raise DataError("No 'result' or 'error' in response")
        self._result = payload["result"] if has_result else payload["error"]
        self._signed = self._result
        nested = _lookup(self._result, "error")
        if has_error and _lookup(self._result, "signature") is None and isinstance(nested, dict):
            # API errors carry the signed part one level down: error.error.{uuid, signature, ...}
            self._signed = nested

        version = payload.get("version")
        if version != JSONRPC_VERSION:
            raise VersionError(
                f"JSON RPC Version {version} is not supported. Version {JSONRPC_VERSION} is required.",
                version,
            )

    @property
    def is_error(self) -> bool:
        return self._payload.get("error") is not None

    @property
    def is_success(self) -> bool:
        return self._payload.get("result") is not None

    @property
    def error_code(self) -> Any:
        return self.get_result("code") if self.is_error else None

    @property
    def error_message(self) -> Optional[str]:
        return self.get_result("message") if self.is_error else None

    @property
    def version(self) -> str:
        return self._payload["version"]

    @property
    def uuid(self) -> Optional[str]:
        return _lookup(self._signed, "uuid")

    @property
    def method(self) -> Optional[str]:
        return _lookup(self._signed, "method")

    @property
    def signature(self) -> Optional[str]:
        return _lookup(self._signed, "signature")

    def get_result(self, name: Optional[str] = None) -> Any:
        return _lookup(self._result, name)

    def get_data(self, name: Optional[str] = None) -> Any:
        return _lookup(_lookup(self._signed, "data"), name)

    def verify(self) -> bool:
        return signing.verify(self.method, self.uuid, self.get_data(), self.signature, self._public_key)

    def __repr__(self) -> str:
        kind = "error" if self.is_error else "result"
        return f"<Response {kind} method={self.method!r} uuid={self.uuid!r}>"


class NotificationRequest:
    """A server-initiated notification, parsed from the raw HTTP body."""

    def __init__(self, body: Union[str, bytes, None]):
        if not body:
            raise DataError("Empty notification body")
        self.body = ensure_utf8(body)
        try:
            payload = json.loads(self.body)
        except ValueError as e:
            raise DataError(f"Failed to parse JSON: {e}") from e
        if not isinstance(payload, dict):
            raise DataError("Notification is not a JSON object")
        self._payload = payload

        if self.version != JSONRPC_VERSION:
            raise VersionError(f"JSON RPC Version '{self.version}' is not supported", self.version)

    def get(self, name: Optional[str] = None) -> Any:
        return _lookup(self._payload, name)

    def get_params(self, name: Optional[str] = None) -> Any:
        return _lookup(self._payload.get("params"), name)

    def get_data(self, name: Optional[str] = None) -> Any:
        return _lookup(self.get_params("data"), name)

    @property
    def method(self) -> Optional[str]:
        return self.get("method")

    @property
    def version(self) -> Optional[str]:
        return self.get("version")

    @property
    def uuid(self) -> Optional[str]:
        return self.get_params("uuid")

    @property
    def signature(self) -> Optional[str]:
        return self.get_params("signature")

    def to_json(self, pretty: bool = False) -> str:
        return to_json(self._payload, pretty)

    def __repr__(self) -> str:
        return f"<NotificationRequest method={self.method!r} uuid={self.uuid!r}>"


class NotificationResponse:
    """Acknowledgement of a :class:`NotificationRequest`. Must be signed before sending."""

    def __init__(self, request: NotificationRequest, success: Optional[bool] = None):
        self._payload: dict[str, Any] = {}
        if request.uuid is not None:
            self.set_result("uuid", request.uuid)
        if request.method is not None:
            self.set_result("method", request.method)
        if success is not None:
            self.set_success(success)
        self.set("version", JSONRPC_VERSION)

    def set(self, name: str, value: Any) -> None:
        self._payload[name] = ensure_utf8(value)

    def set_success(self, success: bool) -> None:
        self.set_data("status", "OK" if success is True else "FAILED")

    def set_result(self, name: str, value: Any) -> None:
        self._payload.setdefault("result", {})[name] = ensure_utf8(value)

    def get_result(self, name: Optional[str] = None) -> Any:
        return _lookup(self._payload.get("result"), name)

    def set_data(self, name: str, value: Any) -> None:
        self._payload.setdefault("result", {}).setdefault("data", {})[name] = ensure_utf8(value)

    def get_data(self, name: Optional[str] = None) -> Any:
        return _lookup(self.get_result("data"), name)

    @property
    def method(self) -> Optional[str]:
        return self.get_result("method")

    @property
    def uuid(self) -> Optional[str]:
        return self.get_result("uuid")

    @property
    def signature(self) -> Optional[str]:
        return self.get_result("signature")

    @signature.setter
    def signature(self, value: str) -> None:
        self.set_result("signature", value)

    @property
    def status(self) -> Optional[str]:
        return self.get_data("status")

    def to_dict(self) -> dict[str, Any]:
        return self._payload

    def to_json(self, pretty: bool = False) -> str:
        return to_json(self._payload, pretty)
