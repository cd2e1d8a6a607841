import os
import sys

import pytest
from sqlalchemy import create_engine, event

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from npr_scraper.config import ScraperSettings  # noqa: E402
from npr_scraper.db import create_schema  # noqa: E402


@pytest.fixture()
def sqlite_engine(tmp_path):
    eng = create_engine(f"sqlite+pysqlite:///{tmp_path / 'articles.db'}", future=True)

    # pysqlite defers BEGIN; take over so SAVEPOINT behaves like Postgres
    @event.listens_for(eng, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    create_schema(eng)
    return eng


@pytest.fixture()
def settings():
    return ScraperSettings(listing_url="https://news/list", dry_run=False)
