from __future__ import annotations

from typing import Any, Dict, List

from ..db import Database


def get_people(db: Database) -> List[Dict[str, Any]]:
    return db.raw("SELECT * FROM people").rows


def create_person(db: Database, name: str) -> Dict[str, Any]:
    return db.raw("INSERT INTO people(name) VALUES(?) RETURNING *", [name]).first()
