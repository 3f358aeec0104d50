# fiesta/store.py
"""
Record store over Supabase tables.

The workflow only needs create / update / query, so that is all this exposes.
Every call is one PostgREST round trip; there are no transactions.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from .errors import StoreError

log = logging.getLogger("uvicorn.error")

Where = Mapping[str, Any]


class RecordStore(Protocol):
    def create(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]: ...

    def update(self, table: str, where: Where, patch: Dict[str, Any]) -> List[Dict[str, Any]]: ...

    def query(
        self,
        table: str,
        where: Optional[Where] = None,
        columns: str = "*",
        order: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None,
        either: Optional[Where] = None,
    ) -> List[Dict[str, Any]]: ...


def _apply_where(q, where: Optional[Where]):
    for col, value in (where or {}).items():
        if isinstance(value, (list, tuple, set)):
            q = q.in_(col, list(value))
        else:
            q = q.eq(col, value)
    return q


class SupabaseStore:
    def __init__(self, client: Client):
        self.client = client

    def _run(self, table: str, action: str, builder) -> List[Dict[str, Any]]:
        try:
            resp = builder.execute()
        except APIError as e:
            log.error(f"{table} {action} error: {e.message} (code={e.code})")
            raise StoreError(f"{table} {action} error: {e.message}", code=e.code)
        except httpx.HTTPError as e:
            log.error(f"{table} {action} transport error: {e}")
            raise StoreError(f"{table} {action} failed: {e}")
        return resp.data or []

    def create(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._run(table, "insert", self.client.table(table).insert(record))
        if not rows:
            raise StoreError(f"{table} insert returned no row")
        return rows[0]

    def update(self, table: str, where: Where, patch: Dict[str, Any]) -> List[Dict[str, Any]]:
        if not where:
            raise ValueError("refusing to update without a filter")
        q = _apply_where(self.client.table(table).update(patch), where)
        return self._run(table, "update", q)

    def query(
        self,
        table: str,
        where: Optional[Where] = None,
        columns: str = "*",
        order: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None,
        either: Optional[Where] = None,
    ) -> List[Dict[str, Any]]:
        q = _apply_where(self.client.table(table).select(columns), where)
        if either:
            q = q.or_(",".join(f"{col}.eq.{value}" for col, value in either.items()))
        if order:
            q = q.order(order, desc=desc)
        if limit is not None:
            q = q.limit(limit)
        return self._run(table, "select", q)


def first(rows: Sequence[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return rows[0] if rows else None
