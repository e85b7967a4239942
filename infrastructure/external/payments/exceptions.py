"""
Exceptions for the PalmPay adapter mapped to unified BusinessException variants.

Signature verification itself never raises: ``verify`` answers ``False``.
The classes below cover configuration faults and transport/gateway failures.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional
from domain.common.exceptions import BusinessException
from shared.codes.payment_codes import PaymentCode


class GatewayErrorCategory(str, Enum):
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    REJECTED = "rejected"


_CATEGORY_CODES = {
    GatewayErrorCategory.TIMEOUT: PaymentCode.TIMEOUT,
    GatewayErrorCategory.UNREACHABLE: PaymentCode.PROVIDER_RECOVERABLE,
    GatewayErrorCategory.REJECTED: PaymentCode.PROVIDER_ERROR,
}


class GatewayError(BusinessException):
    """Any failed gateway call: timeout, no response, or a non-2xx answer."""

    def __init__(
        self,
        message: str,
        *,
        category: GatewayErrorCategory,
        provider: str,
        status_code: Optional[int] = None,
        raw_response: Any = None,
        details: Optional[dict] = None,
    ):
        self.category = category
        self.status_code = status_code
        self.raw_response = raw_response
        full_details = {
            "provider": provider,
            "category": category.value,
            "status_code": status_code,
            "raw_response": raw_response,
        }
        if details:
            full_details.update(details)
        super().__init__(
            code=_CATEGORY_CODES[category],
            message=message,
            error_type="GatewayError",
            details=full_details,
        )


class KeyNotFoundError(BusinessException):
    def __init__(self, path: str):
        self.path = path
        super().__init__(
            code=PaymentCode.KEY_NOT_FOUND,
            message=f"Key file not found: {path}",
            error_type="KeyNotFound",
            details={"path": path},
        )


class SignatureEngineFault(BusinessException):
    """The RSA primitive could not run (malformed key, unsupported parameters)."""

    def __init__(self, message: str, *, details: Optional[dict] = None):
        super().__init__(
            code=PaymentCode.SIGNATURE_ENGINE_FAULT,
            message=message,
            error_type="SignatureEngineFault",
            details=details,
        )


class PaymentSignatureError(BusinessException):
    def __init__(self, message: str, *, provider: str, details: Optional[dict] = None):
        full_details = {"provider": provider}
        if details:
            full_details.update(details)
        super().__init__(
            code=PaymentCode.SIGNATURE_ERROR,
            message=message,
            error_type="PaymentSignatureError",
            details=full_details,
        )
