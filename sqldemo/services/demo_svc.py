from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..db import Database
from ..repository import book_repo, customer_repo, people_repo, pet_repo

Rows = List[Dict[str, Any]]


def run_demo(db: Database) -> List[Tuple[str, Rows]]:
    """
    The demo sequence: one round trip per step, strictly in order.
    Any failure propagates and stops the sequence.
    """
    pets = pet_repo.get_pets(db)
    people = people_repo.get_people(db)
    anns_dogs = pet_repo.get_pets_by_owner_name_and_type(db, "Ann Duong", "dog")
    baldwin_books = book_repo.get_books_by_author(db, "James", "Baldwin")
    anns_products = customer_repo.get_products_bought_by_customer(db, "Ann")

    return [
        ("all pets", pets),
        ("all people", people),
        ("anns dogs", anns_dogs),
        ("James Baldwin books", baldwin_books),
        ("anns products", anns_products),
    ]
