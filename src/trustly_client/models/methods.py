"""
Typed builders for the API methods this client calls.

Each builder knows which of its fields go into ``Data`` and which into
``Data.Attributes``, and turns itself into a :class:`Request`. Unknown
fields are rejected when the builder is created.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional, Union

from pydantic import BaseModel, Field

from trustly_client.models.envelope import Request


class MethodBuilder(BaseModel):
    method: ClassVar[str]
    attribute_fields: ClassVar[frozenset[str]] = frozenset()

    model_config = {"populate_by_name": True, "extra": "forbid"}

    def to_request(self) -> Request:
        values: dict[str, Any] = self.model_dump(by_alias=True, exclude_none=True)
        data = {k: v for k, v in values.items() if k not in self.attribute_fields}
        attributes = {k: v for k, v in values.items() if k in self.attribute_fields}
        return Request(self.method, data, attributes or None)


class Deposit(MethodBuilder):
    """Start a deposit. The end-user is sent to Trustly to complete it."""
    method: ClassVar[str] = "Deposit"
    attribute_fields: ClassVar[frozenset[str]] = frozenset({
        "Currency", "Firstname", "Lastname", "Email", "Locale", "Country",
        "Amount", "IP", "SuccessURL", "FailURL", "HoldNotifications",
    })

    notification_url: str = Field(alias="NotificationURL")
    end_user_id: Union[str, int] = Field(alias="EndUserID")
    message_id: str = Field(alias="MessageID")

    currency: str = Field(alias="Currency")
    firstname: str = Field(alias="Firstname")
    lastname: str = Field(alias="Lastname")
    email: str = Field(alias="Email")
    locale: str = Field(alias="Locale")
    country: str = Field(alias="Country")
    amount: Optional[str] = Field(None, alias="Amount")
    ip: Optional[str] = Field(None, alias="IP")
    success_url: str = Field(alias="SuccessURL")
    fail_url: str = Field(alias="FailURL")
    hold_notifications: Optional[int] = Field(None, alias="HoldNotifications")


class Refund(MethodBuilder):
    """Refund (part of) a settled deposit."""
    method: ClassVar[str] = "Refund"

    order_id: str = Field(alias="OrderID")
    amount: str = Field(alias="Amount")
    currency: str = Field(alias="Currency")
