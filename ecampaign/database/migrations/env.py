# ecampaign/database/migrations/env.py
# Alembic environment for `flask db ...`; the URL always comes from app.config
# so migrations and the running service target the same database.

import logging
from logging.config import fileConfig

from alembic import context

from ecampaign import app, db
from ecampaign.database import models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
logger = logging.getLogger('alembic.env')

target_metadata = db.metadata


def _database_url():
    return app.config['SQLALCHEMY_DATABASE_URI']


def run_migrations_offline():
    """Emit SQL to stdout instead of connecting."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    def skip_empty_revisions(context_, revision, directives):
        # autogenerate with nothing to do should not leave an empty file behind
        if getattr(config.cmd_opts, 'autogenerate', False) and directives[0].upgrade_ops.is_empty():
            directives[:] = []
            logger.info("No schema changes detected.")

    with app.app_context():
        with db.engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
                render_as_batch=connection.dialect.name == 'sqlite',
                process_revision_directives=skip_empty_revisions,
            )
            with context.begin_transaction():
                context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
