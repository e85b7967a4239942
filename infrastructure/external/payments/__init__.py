"""
Factory for payment gateway clients and notification verifiers.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from application.ports.payment_gateway import VirtualAccountGateway
from infrastructure.external.payments.keys import KeyStore
from infrastructure.external.payments.webhook import WebhookVerifier


@lru_cache(maxsize=1)
def get_key_store() -> KeyStore:
    """Process-wide key store; loaded key material is cached on first use."""
    return KeyStore()


def get_payment_gateway(provider: Optional[str] = None) -> VirtualAccountGateway:
    name = (provider or "palmpay").lower()
    if name in {"palmpay", "palm"}:
        from .palmpay_client import PalmPayClient
        return PalmPayClient(key_store=get_key_store())
    raise ValueError(f"Unsupported payment provider: {name}")


def get_webhook_verifier(provider: Optional[str] = None) -> WebhookVerifier:
    name = (provider or "palmpay").lower()
    if name in {"palmpay", "palm"}:
        return WebhookVerifier()
    raise ValueError(f"Unsupported payment provider: {name}")
