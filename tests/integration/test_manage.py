"""Tests for the database management CLI."""

import sys
from decimal import Decimal

import pytest


@pytest.fixture()
def cli_database(tmp_path, monkeypatch):
    database_uri = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("STOREFRONT_DATABASE__DATABASE_URI", database_uri)
    monkeypatch.setenv("STOREFRONT_CONFIG_FILE", str(tmp_path / "missing.toml"))
    return database_uri


def _run(monkeypatch, *args):
    import manage

    monkeypatch.setattr(sys, "argv", ["manage.py", *args])
    manage.main()


class TestDemoProducts:
    def test_same_seed_gives_same_catalogue(self):
        from manage import demo_products

        first = [{k: v for k, v in p.items() if k != "created_at"} for p in demo_products(5, 10, seed=7)]
        second = [{k: v for k, v in p.items() if k != "created_at"} for p in demo_products(5, 10, seed=7)]

        assert first == second

    def test_products_are_priced_and_stocked(self):
        from manage import demo_products

        for product in demo_products(20, 3, seed=1):
            assert product["stock"] == 3
            assert Decimal("1.99") <= product["price"] <= Decimal("199.99")


class TestCommands:
    def test_setup_seed_and_drop(self, cli_database, monkeypatch, capsys):
        from sqlalchemy import create_engine, func, inspect, select

        from shared.db import products

        _run(monkeypatch, "setup-db")
        _run(monkeypatch, "seed", "--products", "4", "--stock", "25")

        engine = create_engine(cli_database)
        with engine.connect() as connection:
            assert connection.execute(select(func.count()).select_from(products)).scalar_one() == 4
            assert set(connection.execute(select(products.c.stock)).scalars()) == {25}

        _run(monkeypatch, "drop-db")

        assert "products" not in inspect(engine).get_table_names()
        engine.dispose()
        assert "Inserted 4 products with 25 units each." in capsys.readouterr().out

    def test_command_is_required(self, monkeypatch):
        with pytest.raises(SystemExit):
            _run(monkeypatch)
