"""
Payment specific codes and provider status mapping.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    # Provider/Network errors (6xxxx)
    PROVIDER_ERROR = 60000
    PROVIDER_RECOVERABLE = 60001
    SIGNATURE_ERROR = 60002
    TIMEOUT = 60003

    # Local signing configuration (61xxx)
    KEY_NOT_FOUND = 61000
    SIGNATURE_ENGINE_FAULT = 61001


# PalmPay answers HTTP 200 for business failures; this respCode marks success
PALMPAY_SUCCESS_CODE = "00000000"


# Provider→internal status mapping (extend per needs)
PROVIDER_STATUS_TO_INTERNAL = {
    "palmpay": {
        # Per notification orderStatus
        "1": "succeeded",
        "2": "pending",
        "3": "failed",
        "4": "canceled",
    },
}
