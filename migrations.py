"""
Additive schema migrations.

``run_migrations`` brings an existing database up to the current models
without touching data: missing tables are created, and columns that a
model gained since the table was created are added with ``ALTER TABLE
... ADD COLUMN``. Nothing is ever dropped or altered in place.

Run it by hand with::

    python migrations.py

which applies the migrations and prints each table's columns.
"""

import logging
from typing import Dict, List

from sqlalchemy import inspect, literal, text
from sqlalchemy.engine import Engine
from sqlalchemy.schema import Column
from sqlmodel import SQLModel

import models  # noqa: F401  (registers the tables on SQLModel.metadata)

logger = logging.getLogger(__name__)


def _column_ddl(engine: Engine, column: Column) -> str:
    dialect = engine.dialect
    quote = dialect.identifier_preparer.quote
    ddl = f"{quote(column.name)} {column.type.compile(dialect=dialect)}"

    default = column.default
    if column.nullable or default is None or not default.is_scalar:
        # Existing rows get NULL; the ORM fills the value on new rows.
        return ddl

    value = literal(default.arg).compile(
        dialect=dialect, compile_kwargs={"literal_binds": True}
    )
    return f"{ddl} NOT NULL DEFAULT {value}"


def run_migrations(engine: Engine) -> List[str]:
    """Create missing tables and add missing columns. Returns the columns added."""
    SQLModel.metadata.create_all(engine)

    inspector = inspect(engine)
    added: List[str] = []

    with engine.begin() as conn:
        for table in SQLModel.metadata.sorted_tables:
            existing = {col["name"] for col in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in existing:
                    continue
                ddl = _column_ddl(engine, column)
                table_name = engine.dialect.identifier_preparer.quote(table.name)
                conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {ddl}"))
                added.append(f"{table.name}.{column.name}")
                logger.info("Added column %s.%s", table.name, column.name)

    if not added:
        logger.info("Schema is up to date")
    return added


def describe_schema(engine: Engine) -> Dict[str, List[str]]:
    """Column name and type for every model table, in declaration order."""
    inspector = inspect(engine)
    return {
        table.name: [f"{col['name']}: {col['type']}" for col in inspector.get_columns(table.name)]
        for table in SQLModel.metadata.sorted_tables
    }


def main() -> None:
    from config import settings
    from db import engine
    from logging_config import setup_logging

    setup_logging(settings.log_level, settings.log_file)
    logger.info("Running migrations against %s", engine.url.render_as_string(hide_password=True))
    run_migrations(engine)

    for table_name, columns in describe_schema(engine).items():
        print(f"\n{table_name}")
        for column in columns:
            print(f"   - {column}")


if __name__ == "__main__":
    main()
