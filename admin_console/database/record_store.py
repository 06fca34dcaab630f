"""
Record Store Gateway: the typed request/response boundary to the backend.

Wraps the synchronous Supabase query builder. Each request runs in a worker
thread via asyncio.to_thread so that only the awaiting coroutine is suspended.
Embedded relations use PostgREST column syntax, e.g.
"*, crm_customers:customer_id(name, email, phone)".
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from admin_console.core.errors import GatewayError

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    async def _execute(self, query, action: str, table: str):
        try:
            return await asyncio.to_thread(query.execute)
        except Exception as e:
            # postgrest APIError carries .message/.code; anything else falls back to str()
            message = getattr(e, "message", None) or str(e) or None
            logger.error(f"{action} on {table} failed: {message}")
            raise GatewayError(message, getattr(e, "code", None)) from e

    async def select_ordered(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = "created_at",
        desc: bool = True,
    ) -> List[Dict[str, Any]]:
        """Full read of a record family, optionally restricted by equality filters."""
        query = self.supabase.table(table).select(columns)
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        if order_by:
            query = query.order(order_by, desc=desc)
        result = await self._execute(query, "select", table)
        return result.data or []

    async def select_by_id(self, table: str, record_id: str, columns: str = "*") -> Optional[Dict[str, Any]]:
        query = self.supabase.table(table)\
            .select(columns)\
            .eq("id", record_id)\
            .limit(1)
        result = await self._execute(query, "select", table)
        return result.data[0] if result.data else None

    async def count(self, table: str, filters: Optional[Dict[str, Any]] = None) -> int:
        """Head-only exact count; no rows are transferred."""
        query = self.supabase.table(table).select("*", count="exact", head=True)
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        result = await self._execute(query, "count", table)
        return result.count or 0

    async def update_by_id(self, table: str, record_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Partial update scoped by primary key. Returns the updated row when the backend echoes it."""
        query = self.supabase.table(table)\
            .update(fields)\
            .eq("id", record_id)
        result = await self._execute(query, "update", table)
        return result.data[0] if result.data else None

    async def insert_returning(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it with server-assigned columns."""
        query = self.supabase.table(table).insert(row)
        result = await self._execute(query, "insert", table)
        if not result.data:
            raise GatewayError(f"Insert into {table} returned no rows")
        return result.data[0]
