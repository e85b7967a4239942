"""
PalmPay DTOs (Pydantic v2) used at application boundaries.

Request models use snake_case attributes and dump to the gateway's camelCase
field names. Optional fields that are absent are omitted from the dump.
"""
from __future__ import annotations

from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from shared.codes.payment_codes import PALMPAY_SUCCESS_CODE


class GatewayRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_params(self) -> dict[str, Any]:
        """Flat camelCase mapping; None-valued optional fields are left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class CreateVirtualAccount(GatewayRequest):
    virtual_account_name: str = Field(min_length=1)
    identity_type: Literal["personal", "personal_nin", "company"]
    license_number: str = Field(min_length=1)
    customer_name: str = Field(min_length=1)
    email: Optional[str] = None
    account_reference: Optional[str] = None

    @field_validator("email", "account_reference")
    @classmethod
    def _omit_blank(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class UpdateVirtualAccountStatus(GatewayRequest):
    virtual_account_no: str = Field(min_length=1)
    status: Literal["Enabled", "Disabled"]


class DeleteVirtualAccount(GatewayRequest):
    virtual_account_no: str = Field(min_length=1)


class QueryVirtualAccount(GatewayRequest):
    virtual_account_no: str = Field(min_length=1)


class QuerySingleOrder(GatewayRequest):
    order_no: str = Field(min_length=1)


class BulkQueryOrders(GatewayRequest):
    start_time: int = Field(ge=0, description="Window start, epoch milliseconds")
    end_time: int = Field(ge=0, description="Window end, epoch milliseconds")
    account_no: Optional[str] = None
    page_index: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1)

    @field_validator("account_no")
    @classmethod
    def _omit_blank(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def _check_window(self) -> "BulkQueryOrders":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not precede start_time")
        return self


class PalmPayResponse(BaseModel):
    """Decoded gateway answer, returned verbatim (extra fields kept)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    resp_code: Optional[str] = None
    resp_msg: Optional[str] = None
    data: Any = None

    @property
    def succeeded(self) -> bool:
        return self.resp_code == PALMPAY_SUCCESS_CODE


class PalmPayNotification(BaseModel):
    """Typed view of a PalmPay payment notification. Unknown fields are kept.

    Settlement fields are mandatory; a signed notification without them, or
    with an unknown status, a foreign currency or a non-positive amount, is
    refused.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    order_no: str = Field(min_length=1)
    order_status: Literal[1, 2, 3, 4]
    created_time: int = Field(gt=0)
    update_time: int = Field(gt=0)
    currency: Literal["NGN"]
    order_amount: int = Field(gt=0, description="Minor units (kobo)")
    reference: Optional[str] = None
    payer_account_no: str = Field(min_length=1)
    payer_account_name: str = Field(min_length=1)
    payer_bank_name: str = Field(min_length=1)
    virtual_account_no: Optional[str] = None
    virtual_account_name: Optional[str] = None
    account_reference: Optional[str] = None
    session_id: Optional[str] = None
    sign: Optional[str] = None


class WebhookEvent(BaseModel):
    id: str
    type: str
    provider: str
    data: PalmPayNotification
    raw_body: Optional[bytes] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)
