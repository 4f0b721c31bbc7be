from __future__ import annotations

from typing import Any, Dict, List

from ..db import Database


def get_books_by_author(db: Database, first_name: str, last_name: str) -> List[Dict[str, Any]]:
    query = """
    SELECT books.title, books.published_year, authors.first_name, authors.last_name
    FROM authors
      JOIN author_book ON author_book.author_id = authors.id
      JOIN books ON author_book.book_id = books.id
    WHERE authors.first_name=? AND authors.last_name=?
    ORDER BY books.published_year, books.title;
    """
    return db.raw(query, [first_name, last_name]).rows
