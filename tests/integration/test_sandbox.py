"""
Integration tests against the Trustly test environment.

Requires ~/.trustly/config.json (or TRUSTLY_* variables) pointing at
https://test.trustly.com/api/1 with merchant credentials, and both PEM keys
in the key directory.

Run: TRUSTLY_INTEGRATION=1 pytest tests/integration/ -v
"""

import os
import uuid

import pytest

from trustly_client import TrustlyClient, load_settings

SKIP = not os.environ.get("TRUSTLY_INTEGRATION")

pytestmark = [pytest.mark.integration, pytest.mark.skipif(SKIP, reason="TRUSTLY_INTEGRATION not set")]


@pytest.fixture(scope="module")
def client():
    with TrustlyClient.from_settings(load_settings()) as c:
        yield c


class TestDeposit:
    def test_deposit_returns_checkout_url(self, client):
        response = client.deposit(
            notification_url="https://example.com/trustly/notify",
            end_user_id="integration-test",
            message_id=str(uuid.uuid4()),
            currency="EUR",
            firstname="Test",
            lastname="Person",
            email="test@example.com",
            locale="en_GB",
            country="FI",
            success_url="https://example.com/success",
            fail_url="https://example.com/fail",
            amount="1.00",
        )
        assert response.is_success, response.error_message
        assert response.get_data("url").startswith("https://")
        assert response.get_data("orderid")


class TestRefund:
    def test_unknown_order_is_a_signed_error(self, client):
        response = client.refund(order_id="1", amount="1.00", currency="EUR")
        assert response.is_error
        assert response.error_code
        assert response.uuid == client.last_request.uuid
