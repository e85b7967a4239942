"""
Virtual-account gateway port (application/ports) exposing a replaceable protocol.

Application code depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from application.dtos.payments import (
    BulkQueryOrders,
    CreateVirtualAccount,
    DeleteVirtualAccount,
    PalmPayResponse,
    QuerySingleOrder,
    QueryVirtualAccount,
    UpdateVirtualAccountStatus,
)


@runtime_checkable
class VirtualAccountGateway(Protocol):
    """Gateway protocol for virtual-account providers.

    Implementations are async and never retry; callers own retry policy.
    """

    provider: str

    async def create_virtual_account(self, req: CreateVirtualAccount) -> PalmPayResponse: ...

    async def update_virtual_account_status(self, req: UpdateVirtualAccountStatus) -> PalmPayResponse: ...

    async def delete_virtual_account(self, req: DeleteVirtualAccount) -> PalmPayResponse: ...

    async def query_virtual_account(self, req: QueryVirtualAccount) -> PalmPayResponse: ...

    async def query_single_order(self, req: QuerySingleOrder) -> PalmPayResponse: ...

    async def bulk_query_orders(self, req: BulkQueryOrders) -> PalmPayResponse: ...

    async def aclose(self) -> None: ...
