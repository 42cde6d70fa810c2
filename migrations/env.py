# migrations/env.py
from alembic import context
from sqlalchemy import engine_from_config, pool

# (1) carregar .env antes de ler as settings
from dotenv import load_dotenv
load_dotenv()

from planning.db.base import Base  # noqa: E402
from planning.db.session import SQLALCHEMY_DATABASE_URL  # noqa: E402

config = context.config

# (2) URL vem das settings (já normalizada) quando o bootstrap não definiu outra
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", SQLALCHEMY_DATABASE_URL.replace("%", "%%"))

target_metadata = Base.metadata

def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    connectable = engine_from_config(config.get_section(config.config_ini_section), prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
