import os
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import func, insert, select


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the configuration overlay the storefront loads when a module
    builds its settings from the environment (``app`` does so on import).
    """
    os.environ["STOREFRONT_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


# ---------------------------------------------------------------------------
# Database fixtures: one SQLite file per test
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings(tmp_path):
    from shared.config import DatabaseSettings, LoggingSettings, Settings

    return Settings(
        env="test",
        database=DatabaseSettings(
            database_uri=f"sqlite:///{tmp_path / 'storefront.db'}",
            lock_timeout_ms=5000,
        ),
        logging=LoggingSettings(level="WARNING"),
    )


@pytest.fixture()
def engine(settings):
    from shared.db import create_engine_from_settings, drop_db, setup_db

    engine = create_engine_from_settings(settings.database)
    setup_db(engine)

    yield engine

    drop_db(engine)
    engine.dispose()


@pytest.fixture()
def services(engine, settings):
    from ordering.services import build_services

    return build_services(engine, lock_timeout_ms=settings.database.lock_timeout_ms)


@pytest.fixture()
def coordinator(services):
    return services.coordinator


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------
@pytest.fixture()
def add_product(engine):
    """Insert a product row directly and return its id."""
    from shared.db import products

    def _add(name="Widget", price="10.00", stock=10, description=None):
        with engine.begin() as connection:
            result = connection.execute(
                insert(products).values(
                    name=name,
                    description=description,
                    price=Decimal(price),
                    stock=stock,
                )
            )
            return result.inserted_primary_key[0]

    return _add


@pytest.fixture()
def stock_of(engine):
    from shared.db import products

    def _stock(product_id):
        with engine.connect() as connection:
            return connection.execute(select(products.c.stock).where(products.c.id == product_id)).scalar_one()

    return _stock


@pytest.fixture()
def row_count(engine):
    """Count rows of a table by name, optionally filtered by column values."""
    from shared.db import metadata

    def _count(table_name, **filters):
        table = metadata.tables[table_name]
        query = select(func.count()).select_from(table)
        for column, value in filters.items():
            query = query.where(table.c[column] == value)
        with engine.connect() as connection:
            return connection.execute(query).scalar_one()

    return _count


@pytest.fixture()
def add_to_cart(engine):
    """Insert a cart row directly, bypassing the stock check."""
    from shared.db import cart_items

    def _add(user_id, product_id, quantity=1):
        with engine.begin() as connection:
            connection.execute(insert(cart_items).values(user_id=user_id, product_id=product_id, quantity=quantity))

    return _add
