import pytest
from pydantic import ValidationError

from trustly_client.models.methods import Deposit, Refund

DEPOSIT_FIELDS = dict(
    notification_url="https://x/n",
    end_user_id=42,
    message_id="m-1",
    currency="EUR",
    amount="10.00",
    country="FI",
    locale="fi_FI",
    email="a@b.fi",
    firstname="A",
    lastname="B",
    ip="1.2.3.4",
    success_url="https://x/s",
    fail_url="https://x/f",
    hold_notifications=0,
)


def test_deposit_splits_data_and_attributes():
    request = Deposit(**DEPOSIT_FIELDS).to_request()
    assert request.method == "Deposit"
    data = request.get_data()
    assert {k for k in data if k != "Attributes"} == {"NotificationURL", "EndUserID", "MessageID"}
    assert data["EndUserID"] == 42
    assert data["Attributes"] == {
        "Currency": "EUR",
        "Amount": "10.00",
        "Country": "FI",
        "Locale": "fi_FI",
        "Email": "a@b.fi",
        "Firstname": "A",
        "Lastname": "B",
        "IP": "1.2.3.4",
        "SuccessURL": "https://x/s",
        "FailURL": "https://x/f",
        "HoldNotifications": 0,
    }


def test_deposit_optional_attributes_are_omitted():
    fields = {k: v for k, v in DEPOSIT_FIELDS.items() if k not in ("amount", "ip", "hold_notifications")}
    attributes = Deposit(**fields).to_request().get_data("Attributes")
    assert "Amount" not in attributes
    assert "IP" not in attributes
    assert "HoldNotifications" not in attributes


def test_deposit_accepts_wire_names():
    deposit = Deposit(
        NotificationURL="https://x/n", EndUserID="42", MessageID="m-1", Currency="EUR", Firstname="A",
        Lastname="B", Email="a@b.fi", Locale="fi_FI", Country="FI", SuccessURL="https://x/s", FailURL="https://x/f",
    )
    assert deposit.end_user_id == "42"


def test_unknown_field_is_rejected():
    with pytest.raises(ValidationError):
        Deposit(**DEPOSIT_FIELDS, shipping_address="somewhere")


def test_missing_required_field_is_rejected():
    fields = dict(DEPOSIT_FIELDS)
    del fields["message_id"]
    with pytest.raises(ValidationError):
        Deposit(**fields)


def test_refund_has_no_attributes():
    request = Refund(order_id="1436375433", amount="5.00", currency="EUR").to_request()
    assert request.method == "Refund"
    assert request.get_data() == {"OrderID": "1436375433", "Amount": "5.00", "Currency": "EUR"}
