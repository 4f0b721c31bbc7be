"""Query descriptor: SQL text with ``?`` placeholders plus positional bindings.

``?`` inside quoted literals, double-quoted identifiers or comments is not a
placeholder. ``\\?`` escapes a literal question mark (PostgreSQL only, e.g. the
jsonb ``?`` operator); SQLite has no such operator and rejects the escape.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Tuple

from .config import PG_CLIENTS


class BindingCountError(ValueError):
    pass


def _scan(sql: str) -> Tuple[List[str], int]:
    """(pieces, escaped) where N placeholders give N+1 pieces."""
    pieces: List[str] = []
    buf: List[str] = []
    escaped = 0
    # None | "'" | '"' | "--" | "/*"
    opaque: Optional[str] = None
    i, n = 0, len(sql)
    while i < n:
        ch = sql[i]
        nxt = sql[i + 1] if i + 1 < n else ""
        if opaque == "--":
            buf.append(ch)
            if ch == "\n":
                opaque = None
        elif opaque == "/*":
            buf.append(ch)
            if ch == "*" and nxt == "/":
                buf.append(nxt)
                i += 1
                opaque = None
        elif opaque:
            buf.append(ch)
            if ch == opaque:
                opaque = None
        elif ch in ("'", '"'):
            opaque = ch
            buf.append(ch)
        elif ch in ("-", "/") and ch + nxt in ("--", "/*"):
            opaque = ch + nxt
            buf.append(ch + nxt)
            i += 1
        elif ch == "\\" and nxt == "?":
            buf.append("?")
            escaped += 1
            i += 1
        elif ch == "?":
            pieces.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
        i += 1
    pieces.append("".join(buf))
    return pieces, escaped


def split_placeholders(sql: str) -> List[str]:
    """Split ``sql`` on its positional placeholders; N placeholders give N+1 pieces."""
    return _scan(sql)[0]


def sql_literal(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, dt.datetime):
        return "'" + value.isoformat(sep=" ") + "'"
    if isinstance(value, dt.date):
        return "'" + value.isoformat() + "'"
    if isinstance(value, (bytes, bytearray)):
        return "X'" + bytes(value).hex() + "'"
    return "'" + str(value).replace("'", "''") + "'"


@dataclass(frozen=True)
class RawQuery:
    sql: str
    bindings: Tuple[Any, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, sql: str, bindings: Optional[Sequence[Any]] = None) -> "RawQuery":
        return cls(sql=sql, bindings=tuple(bindings or ()))

    @property
    def placeholder_count(self) -> int:
        return len(split_placeholders(self.sql)) - 1

    @property
    def command(self) -> str:
        words = self.sql.split(None, 1)
        return words[0].upper().rstrip(";") if words else ""

    def to_native(self, client: str) -> Tuple[str, Optional[Tuple[Any, ...]]]:
        """(sql, params) in the paramstyle the driver for ``client`` expects."""
        pieces, escaped = _scan(self.sql)
        if client in PG_CLIENTS:
            # psycopg2 %-formats the whole statement once params are given
            if not self.bindings:
                return "%s".join(pieces), None
            return "%s".join(p.replace("%", "%%") for p in pieces), self.bindings
        if escaped:
            # a bare ? would turn back into a placeholder
            raise ValueError(f"escaped '?' is not supported by client '{client}'")
        return "?".join(pieces), self.bindings

    def to_string(self) -> str:
        """Statement with bindings inlined as SQL literals, for logs only."""
        pieces = split_placeholders(self.sql)
        if len(pieces) - 1 != len(self.bindings):
            raise BindingCountError(
                f"Expected {len(pieces) - 1} bindings, saw {len(self.bindings)}"
            )
        out = [pieces[0]]
        for value, piece in zip(self.bindings, pieces[1:]):
            out.append(sql_literal(value))
            out.append(piece)
        return "".join(out)

    def __str__(self) -> str:
        try:
            return self.to_string()
        except BindingCountError:
            return self.sql
