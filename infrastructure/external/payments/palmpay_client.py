"""
PalmPay virtual-account adapter.

Every operation follows the same path: typed request → flat parameters with a
fresh nonce/requestTime → SHA1withRSA signature over the MD5 of the canonical
string → POST with bearer app id, country code and ``Signature`` headers.
The gateway's decoded answer is returned verbatim; failures surface as
GatewayError. Nothing is retried here.
"""
from __future__ import annotations

import secrets
import time
from typing import Any, Optional

import httpx

from application.dtos.payments import (
    BulkQueryOrders,
    CreateVirtualAccount,
    DeleteVirtualAccount,
    GatewayRequest,
    PalmPayResponse,
    QuerySingleOrder,
    QueryVirtualAccount,
    UpdateVirtualAccountStatus,
)
from core.settings import PalmPaySettings, palmpay_settings
from infrastructure.external.payments.base import BasePaymentClient, DEFAULT_TIMEOUT_SECONDS
from infrastructure.external.payments.keys import KeyStore
from infrastructure.external.payments.signing import SignatureEngine


API_VERSION = "V2.0"

CREATE_VIRTUAL_ACCOUNT_PATH = "/api/v2/virtual/account/label/create"
UPDATE_VIRTUAL_ACCOUNT_PATH = "/api/v2/virtual/account/label/update"
DELETE_VIRTUAL_ACCOUNT_PATH = "/api/v2/virtual/account/label/delete"
QUERY_VIRTUAL_ACCOUNT_PATH = "/api/v2/virtual/account/label/queryOne"
QUERY_ORDER_PATH = "/api/v2/virtual/order/detail"
BULK_QUERY_ORDERS_PATH = "/api/v2/virtual/order/pageList"


def new_nonce() -> str:
    return secrets.token_hex(16)


def now_millis() -> int:
    return time.time_ns() // 1_000_000


class PalmPayClient(BasePaymentClient):
    provider = "palmpay"

    def __init__(
        self,
        *,
        settings: Optional[PalmPaySettings] = None,
        key_store: Optional[KeyStore] = None,
        signer: Optional[SignatureEngine] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        cfg = settings or palmpay_settings
        if not (cfg.app_id and cfg.country_code):
            raise RuntimeError("PALMPAY configuration incomplete")
        super().__init__(base_url=cfg.base_url, timeout=timeout, transport=transport)
        self._app_id = cfg.app_id
        self._country_code = cfg.country_code
        self._keys = key_store or KeyStore(cfg)
        self._signer = signer or SignatureEngine()

    def build_params(self, req: GatewayRequest) -> dict[str, Any]:
        """Request fields plus the per-call envelope. Never reused across calls."""
        params = req.to_params()
        params.update(
            requestTime=now_millis(),
            nonceStr=new_nonce(),
            version=API_VERSION,
        )
        return params

    def _headers(self, signature: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._app_id}",
            "countryCode": self._country_code,
            "Signature": signature,
            "Content-Type": "application/json;charset=UTF-8",
        }

    async def _call(self, path: str, req: GatewayRequest, **log_fields: Any) -> PalmPayResponse:
        params = self.build_params(req)
        signature = self._signer.sign(params, self._keys.load_private_key())
        self._log("palmpay_request", path=path, nonce=params["nonceStr"], **log_fields)
        # The body is the exact mapping that was signed
        data = await self._post_json(path, params, self._headers(signature))
        resp = PalmPayResponse.model_validate(data)
        self._log(
            "palmpay_response",
            path=path,
            resp_code=resp.resp_code,
            succeeded=resp.succeeded,
            **log_fields,
        )
        return resp

    async def create_virtual_account(self, req: CreateVirtualAccount) -> PalmPayResponse:
        return await self._call(
            CREATE_VIRTUAL_ACCOUNT_PATH,
            req,
            identity_type=req.identity_type,
            account_reference=req.account_reference,
        )

    async def update_virtual_account_status(self, req: UpdateVirtualAccountStatus) -> PalmPayResponse:
        return await self._call(
            UPDATE_VIRTUAL_ACCOUNT_PATH,
            req,
            virtual_account_no=req.virtual_account_no,
            status=req.status,
        )

    async def delete_virtual_account(self, req: DeleteVirtualAccount) -> PalmPayResponse:
        return await self._call(
            DELETE_VIRTUAL_ACCOUNT_PATH, req, virtual_account_no=req.virtual_account_no
        )

    async def query_virtual_account(self, req: QueryVirtualAccount) -> PalmPayResponse:
        return await self._call(
            QUERY_VIRTUAL_ACCOUNT_PATH, req, virtual_account_no=req.virtual_account_no
        )

    async def query_single_order(self, req: QuerySingleOrder) -> PalmPayResponse:
        return await self._call(QUERY_ORDER_PATH, req, order_no=req.order_no)

    async def bulk_query_orders(self, req: BulkQueryOrders) -> PalmPayResponse:
        """One page of orders in [start_time, end_time]; pages are not aggregated."""
        return await self._call(
            BULK_QUERY_ORDERS_PATH,
            req,
            account_no=req.account_no,
            start_time=req.start_time,
            end_time=req.end_time,
            page_index=req.page_index,
            page_size=req.page_size,
        )
