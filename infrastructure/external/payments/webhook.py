"""
PalmPay notification verification.

PalmPay posts JSON notifications carrying a URL-encoded base64 ``sign`` field.
``verify`` is the accept/reject gate every handler must pass before trusting
any field; ``parse`` wraps it for handlers that want a typed event.
"""
from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Union
from urllib.parse import unquote

from pydantic import ValidationError

from application.dtos.payments import PalmPayNotification, WebhookEvent
from core.logging_config import get_logger
from domain.common.exceptions import DomainValidationException
from infrastructure.external.payments.canonical import SIGN_FIELD, canonicalize_inbound
from infrastructure.external.payments.exceptions import PaymentSignatureError
from infrastructure.external.payments.keys import KeyMaterial, KeyStore
from infrastructure.external.payments.signing import SignatureEngine
from shared.codes.payment_codes import PROVIDER_STATUS_TO_INTERNAL


logger = get_logger(__name__)


class WebhookVerifier:
    """Stateless; safe for concurrent and repeated calls. No replay tracking."""

    provider = "palmpay"

    def __init__(
        self,
        *,
        public_key: Optional[KeyMaterial] = None,
        signer: Optional[SignatureEngine] = None,
    ) -> None:
        self._public_key = public_key or KeyStore.gateway_public_key()
        self._signer = signer or SignatureEngine()

    def verify(self, notification: Mapping[str, Any]) -> bool:
        sign = notification.get(SIGN_FIELD)
        if not isinstance(sign, str) or not sign:
            logger.warning("palmpay_webhook_unsigned", order_no=notification.get("orderNo"))
            return False
        # decodeURIComponent semantics: '+' stays '+'
        signature = unquote(sign)
        ok = self._signer.verify(canonicalize_inbound(notification), signature, self._public_key)
        if not ok:
            logger.warning("palmpay_webhook_rejected", order_no=notification.get("orderNo"))
        return ok

    def parse(self, body: Union[bytes, str, Mapping[str, Any]]) -> WebhookEvent:
        """Verify and type a notification; raises PaymentSignatureError on rejection."""
        raw_body = body if isinstance(body, bytes) else None
        payload = self._load(body)
        if not self.verify(payload):
            raise PaymentSignatureError("Invalid signature", provider=self.provider)
        try:
            notification = PalmPayNotification.model_validate(payload)
        except ValidationError as exc:
            raise DomainValidationException(
                "Invalid PalmPay notification",
                details={"errors": exc.errors(include_url=False)},
            ) from exc
        status = PROVIDER_STATUS_TO_INTERNAL[self.provider][str(notification.order_status)]
        logger.info("palmpay_webhook_accepted", order_no=notification.order_no, status=status)
        return WebhookEvent(
            id=notification.order_no,
            type=status,
            provider=self.provider,
            data=notification,
            raw_body=raw_body,
        )

    @staticmethod
    def _load(body: Union[bytes, str, Mapping[str, Any]]) -> Mapping[str, Any]:
        if isinstance(body, Mapping):
            return body
        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise DomainValidationException("PalmPay notification is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise DomainValidationException("PalmPay notification must be a JSON object")
        return payload
