"""Chainable query builder over the Fixture Store.

Chaining only records state. ``await builder.execute()`` runs the pipeline:

    latency -> snapshot -> filters (AND) -> write | order -> count -> window
    -> projection/embedding -> single()

The store is read and written without any suspension point, so concurrent
queries never interleave their mutations.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from inkpress.db import fixtures
from inkpress.db.filters import Filter, equals, member_of
from inkpress.db.responses import ErrorCode, QueryResponse
from inkpress.db.store import FixtureStore, Row

logger = logging.getLogger("mock.query")

WRITE_MODES = ("insert", "update", "delete")


@dataclass(frozen=True)
class OrderSpec:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class PageWindow:
    offset: int
    limit: int

    @classmethod
    def from_range(cls, start: int, end: int) -> "PageWindow":
        # A negative start is clamped; the window still ends at ``end``.
        offset = max(0, start)
        return cls(offset=offset, limit=max(0, end - offset + 1))


@dataclass(frozen=True)
class Projection:
    """Parsed ``select()`` argument: plain columns plus embedded relations."""

    wildcard: bool
    columns: Tuple[str, ...]
    embeds: Tuple[Tuple[str, "Projection"], ...]

    @classmethod
    def parse(cls, spec: Any) -> "Projection":
        if not isinstance(spec, str) or not spec.strip():
            return cls(True, (), ())
        wildcard = False
        columns: List[str] = []
        embeds: List[Tuple[str, Projection]] = []
        for token in _split_top_level(spec):
            if token == "*":
                wildcard = True
            elif "(" in token and token.endswith(")"):
                head, inner = token[:-1].split("(", 1)
                # "profiles!posts_author_id_fkey(...)" and "author:profiles(...)"
                relation = head.split("!", 1)[0].split(":")[-1].strip()
                embeds.append((relation, cls.parse(inner)))
            else:
                columns.append(token)
        if not columns and not embeds:
            wildcard = True
        return cls(wildcard, tuple(columns), tuple(embeds))


def _split_top_level(spec: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for ch in spec:
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        current.append(ch)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def _sort_key(value: Any) -> Tuple[int, Any]:
    # Nulls sort last ascending and first descending, as in Postgres.
    if value is None:
        return (3, 0)
    if isinstance(value, (bool, int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, repr(value))


class QueryBuilder:
    """Per-request accumulator of read or write intent against one table.

    Usage::

        resp = await (
            client.table("posts")
            .select("*, profiles(username)")
            .eq("status", "published")
            .order("created_at", desc=True)
            .range(0, 9)
            .execute()
        )
        if resp.error:
            ...
    """

    def __init__(self, table: str, store: FixtureStore, *, latency: float = 0.0) -> None:
        self.table = table
        self._store = store
        self._latency = max(0.0, float(latency))
        self._projection = Projection(True, (), ())
        self._filters: List[Filter] = []
        self._orders: List[OrderSpec] = []
        self._window: Optional[PageWindow] = None
        self._single = False
        self._count_requested = False
        self._mode: Optional[str] = None
        self._payload: Any = None
        self._read_touched = False
        self._violation: Optional[str] = None

    # ---- state guards -------------------------------------------------------
    def _violate(self, message: str) -> None:
        if self._violation is None:
            logger.debug("invalid query on %s: %s", self.table, message)
            self._violation = message

    def _read_modifier(self, name: str) -> None:
        if self._mode is not None:
            self._violate(f"{name}() cannot follow {self._mode}()")
        self._read_touched = True

    def _write_modifier(self, mode: str, payload: Any = None) -> None:
        if self._mode is not None:
            self._violate(f"{mode}() cannot follow {self._mode}()")
            return
        if self._read_touched:
            self._violate(f"{mode}() cannot be combined with read modifiers")
            return
        self._mode = mode
        self._payload = payload

    # ---- read modifiers -----------------------------------------------------
    def select(self, columns: str = "*", *, count: Optional[str] = None) -> "QueryBuilder":
        self._read_modifier("select")
        self._projection = Projection.parse(columns)
        if count:
            self._count_requested = True
        return self

    def order(self, column: str, *, desc: bool = False, ascending: Optional[bool] = None) -> "QueryBuilder":
        self._read_modifier("order")
        asc = (not desc) if ascending is None else bool(ascending)
        self._orders.append(OrderSpec(column, asc))
        return self

    def range(self, start: int, end: int) -> "QueryBuilder":
        self._read_modifier("range")
        try:
            self._window = PageWindow.from_range(int(start), int(end))
        except (TypeError, ValueError):
            self._violate(f"range() bounds must be integers, got {start!r}, {end!r}")
        return self

    def limit(self, size: int) -> "QueryBuilder":
        self._read_modifier("limit")
        try:
            offset = self._window.offset if self._window else 0
            self._window = PageWindow(offset=offset, limit=max(0, int(size)))
        except (TypeError, ValueError):
            self._violate(f"limit() must be an integer, got {size!r}")
        return self

    def single(self) -> "QueryBuilder":
        self._read_modifier("single")
        self._single = True
        return self

    def count(self) -> "QueryBuilder":
        # Always computed; the flag only mirrors the client surface.
        self._read_modifier("count")
        self._count_requested = True
        return self

    # ---- filters ------------------------------------------------------------
    def eq(self, column: str, value: Any) -> "QueryBuilder":
        self._filters.append(equals(column, value))
        return self

    def in_(self, column: str, values: Iterable[Any]) -> "QueryBuilder":
        self._filters.append(member_of(column, values))
        return self

    # ---- write modifiers ----------------------------------------------------
    def insert(self, rows: Dict[str, Any] | List[Dict[str, Any]]) -> "QueryBuilder":
        self._write_modifier("insert", rows)
        return self

    def update(self, patch: Dict[str, Any]) -> "QueryBuilder":
        self._write_modifier("update", patch)
        return self

    def delete(self) -> "QueryBuilder":
        self._write_modifier("delete")
        return self

    # ---- resolution ---------------------------------------------------------
    def _matches(self, row: Row) -> bool:
        return all(f.matches(row) for f in self._filters)

    async def execute(self) -> QueryResponse:
        await asyncio.sleep(self._latency)
        if self._violation is not None:
            return QueryResponse.failure(ErrorCode.INVALID_QUERY_STATE, self._violation)
        if self._mode is not None:
            return self._run_write()
        return self._run_read()

    def _run_read(self) -> QueryResponse:
        if not self._store.has_table(self.table):
            logger.warning("query against unknown table %s returns no rows", self.table)
        rows = [row for row in self._store.snapshot(self.table) if self._matches(row)]
        if self._orders:
            # Each order() is a full re-sort of the filtered rows, so only the
            # last one declared decides the result; ties keep table order.
            spec = self._orders[-1]
            rows = sorted(rows, key=lambda r: _sort_key(r.get(spec.column)), reverse=not spec.ascending)
        count = len(rows)
        if self._window is not None:
            start = self._window.offset
            rows = rows[start:start + self._window.limit]
        rows = [self._project(row, self.table, self._projection) for row in rows]
        data: Any = rows
        if self._single:
            data = rows[0] if rows else None
        return QueryResponse(data=data, error=None, count=count)

    def _project(self, row: Row, table: str, projection: Projection) -> Row:
        if projection.wildcard:
            out = dict(row)
        else:
            out = {}
        for column in projection.columns:
            out[column] = row.get(column)
        for relation, inner in projection.embeds:
            fk = fixtures.RELATIONS.get((table, relation), f"{relation.rstrip('s')}_id")
            related = self._store.find_first(relation, "id", row.get(fk))
            out[relation] = self._project(related, relation, inner) if related is not None else None
        return out

    def _run_write(self) -> QueryResponse:
        mode = self._mode
        if mode == "insert":
            payload = self._payload
            rows = [payload] if isinstance(payload, dict) else payload
            if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
                return QueryResponse.failure(ErrorCode.INVALID_QUERY_STATE, "insert() expects a row or a list of rows")
            affected = self._store.insert(self.table, rows)
        else:
            if not self._filters:
                return QueryResponse.failure(ErrorCode.INVALID_QUERY_STATE, f"{mode}() requires a filter")
            if mode == "update":
                if not isinstance(self._payload, dict):
                    return QueryResponse.failure(ErrorCode.INVALID_QUERY_STATE, "update() expects a mapping")
                affected = self._store.update(self.table, self._matches, self._payload)
            else:
                affected = self._store.delete(self.table, self._matches)
        logger.debug("%s on %s affected %d rows", mode, self.table, len(affected))
        return QueryResponse(data=affected, error=None, count=len(affected))
