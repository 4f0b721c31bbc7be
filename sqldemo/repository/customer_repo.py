from __future__ import annotations

from typing import Any, Dict, List

from ..db import Database


def get_products_bought_by_customer(db: Database, name: str) -> List[Dict[str, Any]]:
    """每个商品的购买次数（按商品名+价格分组）"""
    query = """
    SELECT COUNT(*) AS count, products.name, products.price
    FROM customers
      JOIN orders ON orders.customer_id = customers.id
      JOIN products ON orders.product_id = products.id
    WHERE customers.name=?
    GROUP BY products.name, products.price
    ORDER BY products.name;
    """
    return db.raw(query, [name]).rows
