"""Alembic environment for the assessment tables.

The URL comes from ``DatabaseSettings.sync_url`` (Alembic runs over
psycopg2).  The database may be shared with other services, so revisions are
tracked in ``dora_alembic_version`` and autogenerate only looks at the
tables this package owns.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from dora_db.config import APPLICATION_NAME, TABLES, load_db_settings
from dora_db.models import Base

VERSION_TABLE = "dora_alembic_version"

config = context.config
settings = load_db_settings()
config.set_main_option("sqlalchemy.url", settings.sync_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def include_name(name, type_, parent_names) -> bool:
    if type_ == "table":
        return name in TABLES
    return True


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        version_table=VERSION_TABLE,
        include_name=include_name,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL without connecting."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        connect_args={"application_name": f"{APPLICATION_NAME}-migrations"},
    )
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
