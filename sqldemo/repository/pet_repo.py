from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..db import Database


def get_pets(db: Database) -> List[Dict[str, Any]]:
    result = db.raw("SELECT * FROM pets")
    return result.rows


def get_pets_by_owner_name_and_type(db: Database, owner_name: str, pet_type: str) -> List[Dict[str, Any]]:
    query = """
    SELECT pets.name, pets.id
    FROM pets
      JOIN people ON pets.owner_id = people.id
    WHERE people.name=? AND pets.type=?
    """
    return db.raw(query, [owner_name, pet_type]).rows


def create_pet(db: Database, name: str, pet_type: str, owner_id: int | None) -> Dict[str, Any]:
    query = "INSERT INTO pets(name, type, owner_id) VALUES(?,?,?) RETURNING *"
    return db.raw(query, [name, pet_type, owner_id]).first()


def update_pet_name(db: Database, pet_id: int, name: str) -> List[Dict[str, Any]]:
    return db.raw("UPDATE pets SET name=? WHERE id=? RETURNING *", [name, pet_id]).rows


def delete_pet(db: Database, pet_id: int) -> Optional[Dict[str, Any]]:
    return db.raw("DELETE FROM pets WHERE id=? RETURNING *", [pet_id]).first()
