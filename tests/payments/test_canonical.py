import itertools
import math

import pytest

from infrastructure.external.payments.canonical import (
    UNDEFINED,
    canonicalize_inbound,
    canonicalize_outbound,
    render_value,
)


def test_outbound_drops_falsy_values():
    params = {"a": "", "b": 0, "c": "x", "requestTime": 1000}
    assert canonicalize_outbound(params) == "c=x&requestTime=1000"


def test_outbound_drops_none_false_nan_and_undefined():
    params = {"a": None, "b": False, "c": math.nan, "d": UNDEFINED, "e": 0.0, "f": "ok"}
    assert canonicalize_outbound(params) == "f=ok"


def test_inbound_keeps_zero_and_empty_but_drops_sign_and_undefined():
    notification = {"a": 0, "b": UNDEFINED, "sign": "AAA", "c": "x"}
    assert canonicalize_inbound(notification) == "a=0&c=x"


def test_inbound_keeps_empty_string_and_renders_null():
    notification = {"reference": "", "sessionId": None, "orderNo": "O1"}
    assert canonicalize_inbound(notification) == "orderNo=O1&reference=&sessionId=null"


def test_modes_differ_on_the_same_input():
    params = {"orderAmount": 0, "orderNo": "O1", "sign": "abc"}
    assert canonicalize_outbound(params) == "orderNo=O1&sign=abc"
    assert canonicalize_inbound(params) == "orderAmount=0&orderNo=O1"


def test_insertion_order_does_not_matter():
    items = [("version", "V2.0"), ("nonceStr", "n1"), ("requestTime", 1700000000000), ("b", "2"), ("B", "1")]
    expected = canonicalize_outbound(dict(items))
    for perm in itertools.permutations(items):
        assert canonicalize_outbound(dict(perm)) == expected
        assert canonicalize_inbound(dict(perm)) == canonicalize_inbound(dict(items))


def test_sort_is_ordinal_not_locale_aware():
    # Uppercase sorts before lowercase in code-point order
    assert canonicalize_outbound({"b": "1", "B": "2", "a": "3"}) == "B=2&a=3&b=1"


def test_values_are_not_url_encoded():
    assert canonicalize_outbound({"name": "Ada Obi&co=1", "mail": "a+b@x.io"}) == "mail=a+b@x.io&name=Ada Obi&co=1"


def test_scalar_rendering_matches_javascript():
    params = {"flag": True, "amount": 100.0, "rate": 1.5}
    assert canonicalize_outbound(params) == "amount=100&flag=true&rate=1.5"


def test_empty_mapping():
    assert canonicalize_outbound({}) == ""
    assert canonicalize_inbound({"sign": "x"}) == ""


@pytest.mark.parametrize(
    "value, expected",
    [
        (1e16, "10000000000000000"),
        (1e21, "1e+21"),
        (1.5e-5, "0.000015"),
        (1e-7, "1e-7"),
        (-2.5e-8, "-2.5e-8"),
        (0.1, "0.1"),
        (-0.0, "0"),
        (math.inf, "Infinity"),
    ],
)
def test_float_rendering_matches_javascript(value, expected):
    assert render_value(value) == expected


def test_containers_render_like_javascript_interpolation():
    assert render_value([1, "a", None, 2.0, True]) == "1,a,,2,true"
    assert render_value([[1, 2], 3]) == "1,2,3"
    assert render_value({"x": 1}) == "[object Object]"
    assert canonicalize_inbound({"tags": ["a", "b"], "meta": {}}) == "meta=[object Object]&tags=a,b"
