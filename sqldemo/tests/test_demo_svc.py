from unittest.mock import patch

import pytest

from sqldemo.services import demo_svc


def test_run_demo_labels_and_order(db):
    results = demo_svc.run_demo(db)
    assert [label for label, _ in results] == [
        "all pets",
        "all people",
        "anns dogs",
        "James Baldwin books",
        "anns products",
    ]
    by_label = dict(results)
    assert len(by_label["all pets"]) == 7
    assert len(by_label["all people"]) == 4
    assert {r["name"] for r in by_label["anns dogs"]} == {"Cleo", "Rex"}
    assert len(by_label["James Baldwin books"]) == 3
    assert {r["name"] for r in by_label["anns products"]} == {"Cat Tree", "Chew Toy", "Dog Leash"}


@patch("sqldemo.services.demo_svc.customer_repo.get_products_bought_by_customer")
@patch("sqldemo.services.demo_svc.book_repo.get_books_by_author")
def test_failure_stops_the_sequence(mock_books, mock_products, db):
    mock_books.side_effect = RuntimeError("connection reset")
    with pytest.raises(RuntimeError, match="connection reset"):
        demo_svc.run_demo(db)
    mock_books.assert_called_once_with(db, "James", "Baldwin")
    mock_products.assert_not_called()
