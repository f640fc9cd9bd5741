"""Database schema and engine setup.

All contexts share one relational store. Tables are declared with SQLAlchemy
Core; each context's store module queries them through an explicit
``Transaction`` handle (see ``shared.transaction``).
"""

from datetime import UTC, datetime

import structlog
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Engine,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    create_engine,
    event,
)

from shared.config import DatabaseSettings

logger = structlog.get_logger(__name__)

metadata = MetaData()

MONEY = Numeric(12, 2, asdecimal=True)


def utcnow() -> datetime:
    return datetime.now(UTC)


class UtcDateTime(TypeDecorator):
    """Timezone-aware UTC timestamps on every backend.

    SQLite stores no offset, so values read back naive are marked as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value


products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("price", MONEY, nullable=False),
    Column("stock", Integer, nullable=False, default=0),
    Column("created_at", UtcDateTime, nullable=False, default=utcnow),
    CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("total_amount", MONEY, nullable=False),
    Column("status", String(20), nullable=False),
    Column("created_at", UtcDateTime, nullable=False, default=utcnow),
)

order_items = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", MONEY, nullable=False),
    UniqueConstraint("order_id", "product_id", name="uq_order_items_order_product"),
    CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
)

cart_items = Table(
    "cart_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("created_at", UtcDateTime, nullable=False, default=utcnow),
    UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
    CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),
)


def _configure_sqlite(engine: Engine) -> None:
    """Make SQLite transactions take the write lock up front.

    pysqlite defers BEGIN until the first write, which lets two placements
    both hold read locks and then deadlock on upgrade. Emitting our own
    ``BEGIN IMMEDIATE`` serializes writers on the busy timeout instead.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection):
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_from_settings(settings: DatabaseSettings) -> Engine:
    uri = settings.database_uri
    if uri.startswith("sqlite"):
        engine = create_engine(
            uri,
            echo=settings.echo,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.lock_timeout_ms / 1000,
            },
        )
        _configure_sqlite(engine)
    else:
        engine = create_engine(uri, echo=settings.echo, pool_pre_ping=True)

    logger.debug("Engine created", dialect=engine.dialect.name)
    return engine


def setup_db(engine: Engine) -> None:
    """Setup database schema"""
    metadata.create_all(engine)
    logger.info("Database schema ready", tables=sorted(metadata.tables))


def drop_db(engine: Engine) -> None:
    """Drop database schema"""
    metadata.drop_all(engine)
    logger.info("Database schema dropped")
