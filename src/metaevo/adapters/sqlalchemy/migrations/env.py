"""Alembic environment: migrates the tables declared in ``mappings.metadata``.

``upgrade_head`` hands over an open connection through
``config.attributes["connection"]``; otherwise a throwaway engine is built for
``sqlalchemy.url`` or the configured database.
"""

from __future__ import annotations

from typing import Any

from alembic import context
from sqlalchemy import create_engine, pool

from metaevo.adapters.sqlalchemy.mappings import metadata
from metaevo.config import get_database_config


def _migrate(**options: Any) -> None:
    # batch mode so ALTERs work on SQLite
    context.configure(target_metadata=metadata, render_as_batch=True, compare_type=True, **options)
    with context.begin_transaction():
        context.run_migrations()


def main() -> None:
    url = context.config.get_main_option("sqlalchemy.url")
    if context.is_offline_mode():
        _migrate(url=url or get_database_config().resolve_uri(), literal_binds=True)
        return

    connection = context.config.attributes.get("connection")
    if connection is not None:
        _migrate(connection=connection)
        return

    engine = create_engine(url or get_database_config().resolve_uri(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _migrate(connection=connection)
    finally:
        engine.dispose()


main()
