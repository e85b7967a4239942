from infrastructure.external.payments.exceptions import (
    GatewayError,
    GatewayErrorCategory,
    KeyNotFoundError,
    PaymentSignatureError,
    SignatureEngineFault,
)
from shared.codes.payment_codes import PaymentCode


def test_every_payment_code_is_raised_by_an_adapter_error():
    raised = {
        GatewayError("x", category=category, provider="palmpay").code
        for category in GatewayErrorCategory
    }
    raised |= {
        KeyNotFoundError("keys/private_key.pem").code,
        SignatureEngineFault("x").code,
        PaymentSignatureError("x", provider="palmpay").code,
    }
    assert raised == set(PaymentCode)
