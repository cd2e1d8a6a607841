"""Persistence for scraped articles.

A run replaces every row for its source tag. The delete and all inserts share
one transaction, so a crashed run leaves the previous rows in place. Each
insert runs inside a SAVEPOINT so a failing article can be retried without
poisoning the outer transaction.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine

from .logging_setup import LOGGER_NAME
from .scraper_observability import StepTimer, log_event
from .types import ARTICLE_COLUMNS, ARTICLE_TABLE, ArticleRecord

logger = logging.getLogger(LOGGER_NAME)

_INSERT_SQL = sql_text(
    f"INSERT INTO {ARTICLE_TABLE} ({', '.join(ARTICLE_COLUMNS)}) "
    f"VALUES ({', '.join(':' + c for c in ARTICLE_COLUMNS)})"
)
_DELETE_SQL = sql_text(f"DELETE FROM {ARTICLE_TABLE} WHERE resource = :resource")
_COUNT_SQL = sql_text(f"SELECT COUNT(*) FROM {ARTICLE_TABLE} WHERE resource = :resource")


class ArticleStore:
    def __init__(self, engine: Engine, *, dry_run: bool = False) -> None:
        self.engine = engine
        self.dry_run = dry_run
        self.rows_deleted = 0
        self.rows_inserted = 0
        self._conn: Optional[Connection] = None
        self._tx = None

    def __enter__(self) -> "ArticleStore":
        logger.info("Connecting to the database...")
        self._conn = self.engine.connect()
        self._tx = self._conn.begin()
        logger.info("Connected to the database successfully.")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._tx is not None and self._tx.is_active:
                if exc_type is None and not self.dry_run:
                    self._tx.commit()
                else:
                    self._tx.rollback()
        finally:
            if self._conn is not None:
                self._conn.close()
            self._conn = None
            self._tx = None
            logger.info("Database connection closed.")

    @property
    def conn(self) -> Connection:
        if self._conn is None:
            raise RuntimeError("ArticleStore is not open")
        return self._conn

    def clear_source(self, resource: str) -> int:
        if self.dry_run:
            log_event("WRITE", table=ARTICLE_TABLE, op="delete", resource=resource, mode="dry-run")
            return 0
        result = self.conn.execute(_DELETE_SQL, {"resource": resource})
        self.rows_deleted = result.rowcount or 0
        logger.info(
            "Cleared %s existing articles with resource %r", self.rows_deleted, resource
        )
        return self.rows_deleted

    def insert(self, record: ArticleRecord) -> None:
        if self.dry_run:
            log_event("WRITE", table=ARTICLE_TABLE, id=record.id, rows_inserted=1, mode="dry-run")
            self.rows_inserted += 1
            return
        timer = StepTimer()
        with self.conn.begin_nested():
            self.conn.execute(_INSERT_SQL, record.to_row())
        self.rows_inserted += 1
        log_event(
            "WRITE",
            table=ARTICLE_TABLE,
            id=record.id,
            rows_inserted=1,
            duration_ms=timer.elapsed_ms(),
        )


def replace_all(
    engine: Engine, resource: str, records: Iterable[ArticleRecord]
) -> int:
    with ArticleStore(engine) as store:
        store.clear_source(resource)
        for record in records:
            store.insert(record)
        return store.rows_inserted


def count_for_source(engine: Engine, resource: str) -> int:
    with engine.connect() as conn:
        return int(conn.execute(_COUNT_SQL, {"resource": resource}).scalar_one())
