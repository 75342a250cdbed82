import json

import pytest

from trustly_client.errors import ConnectionError, DataError, VersionError
from trustly_client.models.envelope import NotificationRequest, NotificationResponse, Request, Response
from trustly_client.transport.http import TransportResult


class TestRequest:
    def test_shape(self):
        request = Request("Deposit", {"MessageID": "m-1"}, {"Currency": "EUR"})
        request.uuid = "u-1"
        assert json.loads(request.to_json()) == {
            "method": "Deposit",
            "version": "1.1",
            "params": {"UUID": "u-1", "Data": {"MessageID": "m-1", "Attributes": {"Currency": "EUR"}}},
        }

    def test_empty_sections_are_omitted(self):
        request = Request("Balance", {}, {})
        assert request.to_dict() == {"method": "Balance", "params": {}, "version": "1.1"}
        assert request.get_data() is None

    def test_no_data(self):
        request = Request("Balance")
        assert request.to_dict() == {"method": "Balance", "params": {}, "version": "1.1"}

    def test_none_values_are_dropped(self):
        request = Request("Refund", {"OrderID": "1", "Amount": None})
        assert request.get_data() == {"OrderID": "1"}

    def test_attributes_require_mapping_data(self):
        with pytest.raises(DataError):
            Request("Deposit", "not a mapping", {"Currency": "EUR"})

    def test_attributes_without_data(self):
        request = Request("Deposit", None, {"Currency": "EUR"})
        assert request.get_data() == {"Attributes": {"Currency": "EUR"}}
        assert request.get_attribute("Currency") == "EUR"

    def test_accessors(self):
        request = Request()
        assert request.method is None
        assert request.uuid is None
        request.method = "Refund"
        request.set_data("OrderID", "123")
        request.set_attribute("Note", "x")
        request.set_param("Signature", "c2ln")
        assert request.method == "Refund"
        assert request.get_data("OrderID") == "123"
        assert request.get_data("Missing") is None
        assert request.get_attribute("Note") == "x"
        assert request.get_attribute("Missing") is None
        assert request.get_param("Signature") == request.signature == "c2ln"
        assert request.version == "1.1"

    def test_assigned_strings_are_utf8(self):
        request = Request("Deposit", {"Firstname": "Ähtäri".encode("iso-8859-1")})
        request.set_attribute("Lastname", "Päivi".encode("iso-8859-1"))
        assert request.get_data("Firstname") == "Ähtäri"
        assert request.get_attribute("Lastname") == "Päivi"


def _response(body, status_code=200, uuid="u-1"):
    request = Request("Deposit", {"MessageID": "m-1"})
    request.uuid = uuid
    return Response(request, TransportResult(status_code=status_code, body=body), None)


class TestResponse:
    def test_result(self):
        response = _response(json.dumps({
            "version": "1.1",
            "result": {"uuid": "u-1", "method": "Deposit", "signature": "c2ln", "data": {"orderid": "42"}},
        }))
        assert response.is_success and not response.is_error
        assert response.uuid == "u-1"
        assert response.method == "Deposit"
        assert response.signature == "c2ln"
        assert response.get_data("orderid") == "42"
        assert response.get_data("missing") is None
        assert response.error_code is None
        assert response.error_message is None
        assert response.version == "1.1"

    def test_error(self):
        response = _response(json.dumps({
            "version": "1.1",
            "error": {"code": 620, "message": "ERROR_UNKNOWN", "uuid": "u-1", "method": "Deposit"},
        }))
        assert response.is_error and not response.is_success
        assert response.error_code == 620
        assert response.error_message == "ERROR_UNKNOWN"
        assert response.get_result("code") == 620
        assert response.get_data() is None

    def test_unparsable_body_with_200_is_data_error(self):
        with pytest.raises(DataError):
            _response("{not json", status_code=200)

    @pytest.mark.parametrize("status", [500, 502, 404])
    def test_unparsable_body_with_other_status_is_connection_error(self, status):
        with pytest.raises(ConnectionError) as exc:
            _response("<html>Bad Gateway</html>", status_code=status)
        assert exc.value.details == {"status_code": status}

    def test_empty_body_with_error_status(self):
        with pytest.raises(ConnectionError):
            _response("", status_code=503)

    def test_parsable_error_status_is_not_a_connection_error(self):
        response = _response(json.dumps({"version": "1.1", "error": {"code": 616, "message": "ERROR_INVALID_CREDENTIALS"}}), 500)
        assert response.status_code == 500
        assert response.is_error

    def test_missing_result_and_error(self):
        with pytest.raises(DataError):
            _response(json.dumps({"version": "1.1"}))

    def test_both_result_and_error(self):
        with pytest.raises(DataError):
            _response(json.dumps({"version": "1.1", "result": {}, "error": {}}))

    def test_not_an_object(self):
        with pytest.raises(DataError):
            _response(json.dumps(["1.1"]))

    @pytest.mark.parametrize("version", ["1.0", "2.0", None, 1.1])
    def test_unsupported_version(self, version):
        with pytest.raises(VersionError) as exc:
            _response(json.dumps({"version": version, "result": {"uuid": "u-1"}}))
        assert exc.value.version == version

    def test_verify_without_key_is_false(self):
        response = _response(json.dumps({"version": "1.1", "result": {"uuid": "u-1", "signature": "c2ln"}}))
        assert response.verify() is False


class TestNotificationRequest:
    def test_parse(self):
        request = NotificationRequest(json.dumps({
            "method": "credit",
            "version": "1.1",
            "params": {"uuid": "u-9", "signature": "c2ln", "data": {"notificationid": "7", "amount": "1.00"}},
        }))
        assert request.method == "credit"
        assert request.uuid == "u-9"
        assert request.signature == "c2ln"
        assert request.version == "1.1"
        assert request.get_data("notificationid") == "7"
        assert request.get_params("uuid") == "u-9"
        assert request.get("method") == "credit"
        assert json.loads(request.to_json())["params"]["data"]["amount"] == "1.00"

    def test_bytes_body(self):
        body = json.dumps({"method": "debit", "version": "1.1", "params": {}}).encode("utf-8")
        request = NotificationRequest(body)
        assert request.method == "debit"
        assert request.get_data() is None
        assert request.get_data("amount") is None

    @pytest.mark.parametrize("body", ["", b"", None])
    def test_empty(self, body):
        with pytest.raises(DataError):
            NotificationRequest(body)

    @pytest.mark.parametrize("body", ["{oops", "[1, 2]", "\"text\""])
    def test_garbage(self, body):
        with pytest.raises(DataError):
            NotificationRequest(body)

    def test_version_is_distinct_from_garbage(self):
        with pytest.raises(VersionError) as exc:
            NotificationRequest(json.dumps({"method": "credit", "version": "2.0", "params": {}}))
        assert not isinstance(exc.value, DataError)
        assert exc.value.version == "2.0"


class TestNotificationResponse:
    def _request(self):
        return NotificationRequest(json.dumps({
            "method": "credit", "version": "1.1", "params": {"uuid": "u-9", "data": {}},
        }))

    def test_ok(self):
        response = NotificationResponse(self._request(), True)
        assert response.to_dict() == {
            "result": {"uuid": "u-9", "method": "credit", "data": {"status": "OK"}},
            "version": "1.1",
        }
        assert response.status == "OK"

    def test_failed(self):
        assert NotificationResponse(self._request(), False).status == "FAILED"

    def test_unset_status(self):
        response = NotificationResponse(self._request())
        assert response.get_data() is None

    def test_signature(self):
        response = NotificationResponse(self._request(), True)
        response.signature = "c2ln"
        assert json.loads(response.to_json())["result"]["signature"] == "c2ln"
        assert response.method == "credit"
        assert response.uuid == "u-9"
