import os

from sqlalchemy import create_engine, text as sql_text
from sqlalchemy.engine import Engine, make_url

from .types import ARTICLE_TABLE

_DB_URL_ALIASES = (
    "POSTGRES_CONNECTION_STRING",
    "POSTGRES_CONNECTION_STRING_DEV",
    "DATABASE_URL",
    "DATABASE_PRIVATE_URL",
    "POSTGRES_URL",
    "POSTGRESQL_URL",
)

SCHEMA_STATEMENTS = (
    f"""
    CREATE TABLE IF NOT EXISTS {ARTICLE_TABLE} (
      id text PRIMARY KEY,
      slug text NOT NULL,
      headline text NOT NULL,
      summary text NOT NULL DEFAULT '',
      body text NOT NULL DEFAULT '',
      author text NOT NULL DEFAULT '',
      resource text NOT NULL,
      media text NOT NULL DEFAULT '',
      link text NOT NULL,
      date timestamp(3)
    )
    """,
    f'CREATE INDEX IF NOT EXISTS "Article_resource_idx" ON {ARTICLE_TABLE} (resource)',
)


def _resolve_database_url() -> str:
    for key in _DB_URL_ALIASES:
        value = os.getenv(key)
        if value:
            return value
    raise RuntimeError(
        "Database URL is not set (checked: " + ", ".join(_DB_URL_ALIASES) + ")"
    )


def database_url_configured() -> bool:
    return any(os.getenv(k) for k in _DB_URL_ALIASES)


def get_engine() -> Engine:
    db_url = _resolve_database_url()

    url = make_url(db_url)
    # SQLAlchemy defaults bare postgresql:// to psycopg2; we ship psycopg 3
    if url.drivername in ("postgresql", "postgres"):
        url = url.set(drivername="postgresql+psycopg")

    query = dict(url.query)
    sslmode = query.get("sslmode")
    explicit_sslmode = os.getenv("DB_SSLMODE", "").strip()
    require_ssl = os.getenv("REQUIRE_DB_SSL", "0").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }
    if not sslmode and explicit_sslmode:
        query["sslmode"] = explicit_sslmode
    elif not sslmode and require_ssl and url.drivername.startswith("postgresql"):
        query["sslmode"] = "require"
    if query != dict(url.query):
        url = url.set(query=query)

    return create_engine(url, pool_pre_ping=True, future=True)


def create_schema(engine: Engine) -> None:
    with engine.begin() as conn:
        for stmt in SCHEMA_STATEMENTS:
            conn.exec_driver_sql(stmt)


def check_db_connectivity(engine: Engine) -> None:
    with engine.begin() as conn:
        conn.execute(sql_text("SELECT 1"))
