import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from npr_scraper.store import ArticleStore, count_for_source, replace_all
from npr_scraper.types import ArticleRecord


def _record(i, resource="NPR"):
    return ArticleRecord(
        id=f"id-{resource}-{i}",
        slug=f"slug-{i}",
        headline=f"Headline {i}",
        link=f"https://news/{i}",
        date="2024-01-01T12:00:00.000",
        resource=resource,
        summary="s",
        body="b",
        author="a",
        media="",
    )


def test_replace_all_swaps_rows_for_source_only(sqlite_engine):
    replace_all(sqlite_engine, "NPR", [_record(1), _record(2), _record(3)])
    replace_all(sqlite_engine, "BBC", [_record(1, "BBC")])

    assert replace_all(sqlite_engine, "NPR", [_record(4)]) == 1
    assert count_for_source(sqlite_engine, "NPR") == 1
    assert count_for_source(sqlite_engine, "BBC") == 1


def test_rows_are_written_with_all_columns(sqlite_engine):
    replace_all(sqlite_engine, "NPR", [_record(1)])
    with sqlite_engine.connect() as conn:
        row = conn.execute(text('SELECT * FROM "Article"')).mappings().one()
    assert row["id"] == "id-NPR-1"
    assert row["slug"] == "slug-1"
    assert row["link"] == "https://news/1"
    assert row["media"] == ""


def test_crash_mid_run_keeps_previous_rows(sqlite_engine):
    replace_all(sqlite_engine, "NPR", [_record(1), _record(2)])

    with pytest.raises(RuntimeError):
        with ArticleStore(sqlite_engine) as store:
            store.clear_source("NPR")
            store.insert(_record(3))
            raise RuntimeError("browser died")

    assert count_for_source(sqlite_engine, "NPR") == 2


def test_failed_insert_does_not_poison_run(sqlite_engine):
    with ArticleStore(sqlite_engine) as store:
        store.clear_source("NPR")
        store.insert(_record(1))
        with pytest.raises(IntegrityError):
            store.insert(_record(1))
        store.insert(_record(2))

    assert count_for_source(sqlite_engine, "NPR") == 2


def test_dry_run_writes_nothing(sqlite_engine):
    replace_all(sqlite_engine, "NPR", [_record(1)])
    with ArticleStore(sqlite_engine, dry_run=True) as store:
        assert store.clear_source("NPR") == 0
        store.insert(_record(2))
        assert store.rows_inserted == 1

    assert count_for_source(sqlite_engine, "NPR") == 1


def test_store_requires_open_connection(sqlite_engine):
    store = ArticleStore(sqlite_engine)
    with pytest.raises(RuntimeError):
        store.insert(_record(1))
