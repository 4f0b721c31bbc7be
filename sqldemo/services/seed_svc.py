from __future__ import annotations

# sqldemo/services/seed_svc.py
import csv
import logging
import os
from typing import Dict, Iterator, List

from ..db import Database

logger = logging.getLogger(__name__)

_BASE = os.path.dirname(os.path.dirname(__file__))
SCHEMA_DIR = os.path.join(_BASE, "schema")
SEEDS_DIR = os.path.join(_BASE, "seeds")

# 子表在前，删除时不触发外键错误
TABLES = ["author_book", "orders", "pets", "books", "authors", "products", "customers", "people"]


def _schema_file(db: Database) -> str:
    name = "sqlite.sql" if db.cfg.is_sqlite else "pg.sql"
    return os.path.join(SCHEMA_DIR, name)


def _read_seed(name: str, seeds_dir: str | None = None) -> Iterator[Dict[str, str]]:
    path = os.path.join(seeds_dir or SEEDS_DIR, f"{name}.csv")
    with open(path, "r", encoding="utf-8", newline="") as f:
        yield from csv.DictReader(f)


def ensure_schema(db: Database) -> None:
    with open(_schema_file(db), "r", encoding="utf-8") as f:
        db.exec_script(f.read())


def reset_data(db: Database) -> None:
    if db.cfg.is_postgres:
        db.raw("TRUNCATE {} RESTART IDENTITY CASCADE".format(", ".join(TABLES)))
        return
    for t in TABLES:
        db.raw(f"DELETE FROM {t}")
    db.raw("DELETE FROM sqlite_sequence")


def _insert_linked(db: Database, sql: str, bindings: List, what: str) -> int:
    n = db.raw(sql, bindings).row_count
    if n == 0:
        logger.warning("seed skipped, parent row not found: %s %s", what, bindings)
    return n


def seed_data(db: Database, seeds_dir: str | None = None) -> Dict[str, int]:
    """Load seeds/*.csv; foreign keys resolve through natural keys."""
    counts = {t: 0 for t in TABLES}

    for r in _read_seed("people", seeds_dir):
        db.raw("INSERT INTO people(name) VALUES(?)", [r["name"]])
        counts["people"] += 1

    for r in _read_seed("pets", seeds_dir):
        counts["pets"] += _insert_linked(
            db,
            "INSERT INTO pets(name, type, owner_id) SELECT ?, ?, id FROM people WHERE name=?",
            [r["name"], r["type"], r["owner_name"]],
            "pet",
        )

    for r in _read_seed("customers", seeds_dir):
        db.raw("INSERT INTO customers(name) VALUES(?)", [r["name"]])
        counts["customers"] += 1

    for r in _read_seed("products", seeds_dir):
        db.raw("INSERT INTO products(name, price) VALUES(?,?)", [r["name"], float(r["price"])])
        counts["products"] += 1

    for r in _read_seed("orders", seeds_dir):
        counts["orders"] += _insert_linked(
            db,
            """
            INSERT INTO orders(customer_id, product_id)
            SELECT c.id, p.id FROM customers c, products p
            WHERE c.name=? AND p.name=?
            """,
            [r["customer_name"], r["product_name"]],
            "order",
        )

    for r in _read_seed("authors", seeds_dir):
        db.raw("INSERT INTO authors(first_name, last_name) VALUES(?,?)", [r["first_name"], r["last_name"]])
        counts["authors"] += 1

    for r in _read_seed("books", seeds_dir):
        year = r.get("published_year")
        db.raw("INSERT INTO books(title, published_year) VALUES(?,?)", [r["title"], int(year) if year else None])
        counts["books"] += 1

    for r in _read_seed("author_book", seeds_dir):
        counts["author_book"] += _insert_linked(
            db,
            """
            INSERT INTO author_book(author_id, book_id)
            SELECT a.id, b.id FROM authors a, books b
            WHERE a.first_name=? AND a.last_name=? AND b.title=?
            """,
            [r["first_name"], r["last_name"], r["title"]],
            "author_book",
        )

    return counts


def is_seeded(db: Database) -> bool:
    return db.raw("SELECT COUNT(1) AS c FROM people").first()["c"] > 0


def init_db(db: Database, reset: bool = False) -> Dict[str, int]:
    """Create tables and load seeds. Existing data is kept unless ``reset``."""
    ensure_schema(db)
    if reset:
        reset_data(db)
    elif is_seeded(db):
        logger.info("seed data already present, skipping")
        return {}
    return seed_data(db)
