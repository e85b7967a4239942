#!/usr/bin/env python3
"""Export PalmPay virtual-account orders for a time window as JSON lines.

Pages are fetched one after another until the gateway returns a short page
or the reported totalCount is reached.
Only this caller retries, and only because order queries are read-only:
timeouts and unreachable-gateway errors are retried with exponential backoff,
rejections are not.

Usage:
    python scripts/export_palmpay_orders.py --start 1700000000000 --end 1700086400000 \
        [--account 6600000001] [--page-size 50] > orders.jsonl
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, AsyncIterator

from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from application.dtos.payments import BulkQueryOrders, PalmPayResponse
from application.ports.payment_gateway import VirtualAccountGateway
from core.logging_config import get_logger
from domain.common.exceptions import BusinessException
from infrastructure.external.payments import get_payment_gateway
from infrastructure.external.payments.exceptions import GatewayError, GatewayErrorCategory


logger = get_logger("scripts.export_palmpay_orders")

TRANSIENT = {GatewayErrorCategory.TIMEOUT, GatewayErrorCategory.UNREACHABLE}


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, GatewayError) and exc.category in TRANSIENT


async def fetch_page(
    gateway: VirtualAccountGateway,
    req: BulkQueryOrders,
    *,
    attempts: int = 3,
    wait: Any = None,
) -> PalmPayResponse:
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait or wait_exponential(multiplier=0.5, min=0.5, max=8.0),
        retry=retry_if_exception(_is_transient),
        reraise=True,
    ):
        with attempt:
            return await gateway.bulk_query_orders(req)
    raise AssertionError("unreachable")  # pragma: no cover


def _page_items(resp: PalmPayResponse) -> tuple[list[Any], int | None]:
    data = resp.data if isinstance(resp.data, dict) else {}
    items = data.get("list") or []
    total = data.get("totalCount")
    return (items if isinstance(items, list) else []), (total if isinstance(total, int) else None)


async def iter_orders(
    gateway: VirtualAccountGateway,
    *,
    start_time: int,
    end_time: int,
    account_no: str | None = None,
    page_size: int = 50,
) -> AsyncIterator[Any]:
    """Yield orders page by page; each page is requested only after the previous one."""
    page_index = 1
    while True:
        req = BulkQueryOrders(
            start_time=start_time,
            end_time=end_time,
            account_no=account_no,
            page_index=page_index,
            page_size=page_size,
        )
        resp = await fetch_page(gateway, req)
        if not resp.succeeded:
            raise GatewayError(
                f"palmpay pageList failed: {resp.resp_code} {resp.resp_msg}",
                category=GatewayErrorCategory.REJECTED,
                provider="palmpay",
                raw_response=resp.model_dump(by_alias=True),
            )
        items, total = _page_items(resp)
        logger.info("palmpay_orders_page", page_index=page_index, count=len(items))
        for item in items:
            yield item
        if len(items) < page_size or (total is not None and page_index * page_size >= total):
            return
        page_index += 1


async def run(args: argparse.Namespace) -> int:
    gateway = get_payment_gateway("palmpay")
    try:
        async for order in iter_orders(
            gateway,
            start_time=args.start,
            end_time=args.end,
            account_no=args.account,
            page_size=args.page_size,
        ):
            print(json.dumps(order, ensure_ascii=False))
    except BusinessException as exc:
        logger.error("palmpay_orders_export_failed", error=exc.message, details=exc.details)
        return 1
    finally:
        await gateway.aclose()
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--start", type=int, required=True, help="window start, epoch ms")
    parser.add_argument("--end", type=int, required=True, help="window end, epoch ms")
    parser.add_argument("--account", default=None, help="virtual account number filter")
    parser.add_argument("--page-size", type=int, default=50)
    return asyncio.run(run(parser.parse_args()))


if __name__ == "__main__":
    sys.exit(main())
