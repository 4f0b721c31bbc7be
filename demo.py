#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Raw SQL demo (SQLite / PostgreSQL)

Commands:
  init                   Create the demo tables and seed them from sqldemo/seeds
  run                    Run every demo query in order and print the results (default)
  pets                   All pets
  people                 All people
  pets-by-owner          Pets of one owner and type
  books-by-author        Books written by one author
  products-by-customer   Products one customer bought, with counts
  add-pet                Insert a pet, print the returned row
  rename-pet             Rename a pet, print the returned row
  remove-pet             Delete a pet, print the returned row

Notes:
- The environment comes from --env or APP_ENV (default: development).
- The connection is always released before exit.
"""

import argparse
import logging
import os
import sys

import pandas as pd

from sqldemo.config import ConfigError, get_connection_config
from sqldemo.db import Database
from sqldemo.repository import book_repo, customer_repo, people_repo, pet_repo
from sqldemo.services import demo_svc, seed_svc


# ---------------- Output helpers ----------------

def print_rows(label: str, rows) -> None:
    pd.set_option("display.max_rows", 200)
    pd.set_option("display.width", 160)

    print(f"\n=== {label} ===")
    if rows:
        print(pd.DataFrame(rows))
    else:
        print("(empty)")


def export_rows(out_dir: str, label: str, rows) -> str:
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, label.lower().replace(" ", "_") + ".csv")
    pd.DataFrame(rows).to_csv(path, index=False, encoding="utf-8-sig")
    return path


# ---------------- Commands ----------------

def cmd_init(db: Database, args):
    counts = seed_svc.init_db(db, reset=args.reset)
    if counts:
        print("DB initialized and seeded:", ", ".join(f"{k}={v}" for k, v in counts.items()))
    else:
        print("DB schema ready; seed data already present (use --reset to reload).")


def cmd_run(db: Database, args):
    results = demo_svc.run_demo(db)
    for label, rows in results:
        print_rows(label, rows)
    export_dir = getattr(args, "export", None)
    if export_dir:
        for label, rows in results:
            export_rows(export_dir, label, rows)
        print(f"\nCSV exported to {export_dir}")


def cmd_pets(db: Database, args):
    print_rows("all pets", pet_repo.get_pets(db))


def cmd_people(db: Database, args):
    print_rows("all people", people_repo.get_people(db))


def cmd_pets_by_owner(db: Database, args):
    rows = pet_repo.get_pets_by_owner_name_and_type(db, args.owner, args.type)
    print_rows(f"{args.owner} {args.type}s", rows)


def cmd_books_by_author(db: Database, args):
    rows = book_repo.get_books_by_author(db, args.first, args.last)
    print_rows(f"{args.first} {args.last} books", rows)


def cmd_products_by_customer(db: Database, args):
    rows = customer_repo.get_products_bought_by_customer(db, args.name)
    print_rows(f"{args.name} products", rows)


def cmd_add_pet(db: Database, args):
    row = pet_repo.create_pet(db, args.name, args.type, args.owner_id)
    print_rows("created pet", [row] if row else [])


def cmd_rename_pet(db: Database, args):
    print_rows("updated pet", pet_repo.update_pet_name(db, args.id, args.name))


def cmd_remove_pet(db: Database, args):
    row = pet_repo.delete_pet(db, args.id)
    print_rows("deleted pet", [row] if row else [])


# ---------------- Entry ----------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Raw SQL demo (SQLite / PostgreSQL)")
    parser.add_argument("--config", default=None, help="YAML environments file (default: config.yaml)")
    parser.add_argument("--env", default=None, help="environment name (default: $APP_ENV or development)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every SQL statement")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create tables and seed data")
    p_init.add_argument("--reset", action="store_true", help="delete existing rows before seeding")
    p_init.set_defaults(func=cmd_init)

    p_run = sub.add_parser("run", help="run the demo query sequence")
    p_run.add_argument("--export", required=False, help="directory for CSV exports")
    p_run.set_defaults(func=cmd_run)

    sub.add_parser("pets", help="all pets").set_defaults(func=cmd_pets)
    sub.add_parser("people", help="all people").set_defaults(func=cmd_people)

    p_owner = sub.add_parser("pets-by-owner", help="pets by owner name and type")
    p_owner.add_argument("--owner", required=True)
    p_owner.add_argument("--type", required=True)
    p_owner.set_defaults(func=cmd_pets_by_owner)

    p_books = sub.add_parser("books-by-author", help="books by author name")
    p_books.add_argument("--first", required=True)
    p_books.add_argument("--last", required=True)
    p_books.set_defaults(func=cmd_books_by_author)

    p_prod = sub.add_parser("products-by-customer", help="products bought by a customer")
    p_prod.add_argument("--name", required=True)
    p_prod.set_defaults(func=cmd_products_by_customer)

    p_add = sub.add_parser("add-pet", help="insert a pet")
    p_add.add_argument("--name", required=True)
    p_add.add_argument("--type", required=True)
    p_add.add_argument("--owner-id", dest="owner_id", type=int, required=False)
    p_add.set_defaults(func=cmd_add_pet)

    p_ren = sub.add_parser("rename-pet", help="rename a pet")
    p_ren.add_argument("--id", required=True, type=int)
    p_ren.add_argument("--name", required=True)
    p_ren.set_defaults(func=cmd_rename_pet)

    p_rm = sub.add_parser("remove-pet", help="delete a pet")
    p_rm.add_argument("--id", required=True, type=int)
    p_rm.set_defaults(func=cmd_remove_pet)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = get_connection_config(args.env, args.config)
    except ConfigError as e:
        raise SystemExit(f"config error: {e}")

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or cfg.debug) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    func = getattr(args, "func", cmd_run)
    db = Database(cfg)
    try:
        func(db, args)
    finally:
        db.destroy()
    return 0


if __name__ == "__main__":
    sys.exit(main())
