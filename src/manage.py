"""Storefront database management CLI.

Creates and drops the schema for the configured database, and loads a small
product catalogue for local runs and load tests.

Usage:
    python src/manage.py setup-db             # Create all tables
    python src/manage.py drop-db              # Drop all tables
    python src/manage.py seed --products 20   # Insert demo products
"""

import argparse
import random
import sys
from decimal import Decimal

from sqlalchemy import insert

from shared.config import load_settings
from shared.db import create_engine_from_settings, drop_db, products, setup_db, utcnow

_ADJECTIVES = ["Classic", "Compact", "Deluxe", "Everyday", "Rugged", "Vintage"]
_NOUNS = ["Backpack", "Desk Lamp", "Kettle", "Notebook", "Headphones", "Water Bottle"]


def _engine():
    settings = load_settings()
    return settings, create_engine_from_settings(settings.database)


def setup_database():
    settings, engine = _engine()
    print(f"Creating schema on {engine.url.render_as_string(hide_password=True)} ({settings.env})...")
    setup_db(engine)
    print("Done.")


def drop_database():
    settings, engine = _engine()
    print(f"Dropping schema on {engine.url.render_as_string(hide_password=True)} ({settings.env})...")
    drop_db(engine)
    print("Done.")


def demo_products(count: int, stock: int, seed: int | None = None) -> list[dict]:
    rng = random.Random(seed)
    return [
        {
            "name": f"{rng.choice(_ADJECTIVES)} {rng.choice(_NOUNS)} #{index + 1}",
            "description": "Demo product",
            "price": Decimal(rng.randint(199, 19999)) / 100,
            "stock": stock,
            "created_at": utcnow(),
        }
        for index in range(count)
    ]


def seed_products(count: int, stock: int):
    _, engine = _engine()
    with engine.begin() as connection:
        connection.execute(insert(products), demo_products(count, stock))
    print(f"Inserted {count} products with {stock} units each.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Insert demo products")
    seed_parser.add_argument("--products", type=int, default=20, help="Number of products (default: 20)")
    seed_parser.add_argument("--stock", type=int, default=100, help="Stock per product (default: 100)")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed_products(args.products, args.stock)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
