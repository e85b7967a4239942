"""
Canonical signing strings for PalmPay.

Both modes sort field names ordinally and join ``key=value`` pairs with ``&``
without URL-encoding. They differ in what they drop:

- outbound (requests we sign): every falsy value, zeros and empty strings included;
- inbound (notifications we verify): only ``sign`` and UNDEFINED values.

The two filters are defined separately by the vendor protocol and must not
be merged.
"""
from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Mapping


class _Undefined:
    """A field that is known by name but carries no value at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()

SIGN_FIELD = "sign"


def _render_number(value: float) -> str:
    """JavaScript Number#toString for a float."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    exp = int(exponent)
    # JS keeps positional notation for 1e-7 < |x| < 1e21
    if -7 < exp < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"


def render_value(value: Any) -> str:
    """Render a value the way the gateway's JavaScript reference interpolates it."""
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _render_number(value)
    if isinstance(value, Mapping):
        return "[object Object]"
    if isinstance(value, (list, tuple)):
        # Array#join: null and undefined elements become empty strings
        return ",".join(
            "" if item is None or item is UNDEFINED else render_value(item) for item in value
        )
    return str(value)


def _is_falsy(value: Any) -> bool:
    if value is UNDEFINED or value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value


def _join(params: Mapping[str, Any], keys: list[str]) -> str:
    return "&".join(f"{key}={render_value(params[key])}" for key in keys)


def canonicalize_outbound(params: Mapping[str, Any]) -> str:
    keys = [key for key in sorted(params) if not _is_falsy(params[key])]
    return _join(params, keys)


def canonicalize_inbound(notification: Mapping[str, Any]) -> str:
    keys = [
        key
        for key in sorted(notification)
        if key != SIGN_FIELD and notification[key] is not UNDEFINED
    ]
    return _join(notification, keys)
