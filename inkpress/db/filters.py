"""Typed row predicates: ``Equals`` and ``MemberOf``.

Arguments are normalised when the filter is built. A malformed value never
raises; the filter simply matches nothing. A column missing from a row never
matches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple, Union


def _safe_eq(left: Any, right: Any) -> bool:
    try:
        return bool(left == right)
    except Exception:  # noqa: BLE001 - exotic __eq__ implementations
        return False


@dataclass(frozen=True)
class Equals:
    column: str
    value: Any

    kind = "eq"

    def matches(self, row: Dict[str, Any]) -> bool:
        if not self.column or self.column not in row:
            return False
        return _safe_eq(row[self.column], self.value)


@dataclass(frozen=True)
class MemberOf:
    column: str
    values: Tuple[Any, ...]

    kind = "in"

    def matches(self, row: Dict[str, Any]) -> bool:
        if not self.column or self.column not in row:
            return False
        cell = row[self.column]
        return any(_safe_eq(cell, v) for v in self.values)


Filter = Union[Equals, MemberOf]


def _column(name: Any) -> str:
    # Non-string identifiers become the empty column, which matches nothing.
    return name if isinstance(name, str) else ""


def equals(column: Any, value: Any) -> Equals:
    return Equals(_column(column), value)


def member_of(column: Any, values: Iterable[Any] | Any) -> MemberOf:
    if isinstance(values, (str, bytes, dict)):
        normalised: Tuple[Any, ...] = ()
    else:
        try:
            normalised = tuple(values)
        except TypeError:
            normalised = ()
    return MemberOf(_column(column), normalised)
