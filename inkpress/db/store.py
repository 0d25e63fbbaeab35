"""Fixture Store: the canonical in-memory tables behind the emulator.

Rows never leave the store by reference; every read and every write result
is a deep copy.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional
from uuid import uuid4

from inkpress.common.utils import now_iso
from inkpress.db import fixtures

logger = logging.getLogger("mock.store")

Row = Dict[str, Any]
Predicate = Callable[[Row], bool]


class FixtureStore:
    """Named tables of rows plus the auth-only user set.

    ``tables`` defaults to the built-in fixtures. A ``users`` entry in
    ``tables`` is moved to the user set, it is never queryable.
    """

    def __init__(
        self,
        tables: Optional[Dict[str, Iterable[Row]]] = None,
        users: Optional[Iterable[Row]] = None,
    ) -> None:
        source = dict(tables if tables is not None else fixtures.TABLES)
        auth_rows = source.pop("users", None)
        if users is None:
            users = auth_rows if auth_rows is not None else (fixtures.USERS if tables is None else [])
        self._tables: Dict[str, List[Row]] = {
            name: [copy.deepcopy(dict(r)) for r in rows] for name, rows in source.items()
        }
        self._users: List[Row] = [copy.deepcopy(dict(u)) for u in users]

    # ---- tables -------------------------------------------------------------
    def has_table(self, name: str) -> bool:
        return name in self._tables

    def table_names(self) -> List[str]:
        return list(self._tables)

    def snapshot(self, name: str) -> List[Row]:
        """Copy of every row in ``name``; unknown tables are empty."""
        return copy.deepcopy(self._tables.get(name, []))

    def find_first(self, name: str, column: str, value: Any) -> Optional[Row]:
        if value is None:
            return None
        for row in self._tables.get(name, []):
            if column in row and row[column] == value:
                return copy.deepcopy(row)
        return None

    def insert(self, name: str, rows: List[Row]) -> List[Row]:
        table = self._tables.get(name)
        if table is None:
            logger.warning("insert into unknown table %s ignored", name)
            return []
        defaults = fixtures.TABLE_DEFAULTS.get(name, {})
        inserted: List[Row] = []
        for payload in rows:
            record = {**copy.deepcopy(defaults), **copy.deepcopy(payload)}
            if record.get("id") is None:
                record["id"] = str(uuid4())
            if name in fixtures.TIMESTAMPED_TABLES:
                stamp = now_iso()
                record.setdefault("created_at", stamp)
                record.setdefault("updated_at", record["created_at"])
            table.append(record)
            inserted.append(copy.deepcopy(record))
        return inserted

    def update(self, name: str, predicate: Predicate, patch: Row) -> List[Row]:
        updated: List[Row] = []
        stamp = now_iso()
        for row in self._tables.get(name, []):
            if not predicate(row):
                continue
            row.update(copy.deepcopy(patch))
            if "updated_at" in row and "updated_at" not in patch:
                row["updated_at"] = stamp
            updated.append(copy.deepcopy(row))
        return updated

    def delete(self, name: str, predicate: Predicate) -> List[Row]:
        table = self._tables.get(name)
        if table is None:
            return []
        kept: List[Row] = []
        removed: List[Row] = []
        for row in table:
            (removed if predicate(row) else kept).append(row)
        table[:] = kept
        return copy.deepcopy(removed)

    # ---- auth users ---------------------------------------------------------
    def find_user(self, email: str) -> Optional[Row]:
        for user in self._users:
            if user.get("email") == email:
                return copy.deepcopy(user)
        return None

    def add_user(self, user: Row) -> Row:
        self._users.append(copy.deepcopy(user))
        return copy.deepcopy(user)
