import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from .config import ScraperSettings
from .db import create_schema, database_url_configured, get_engine
from .logging_setup import LOGGER_NAME, setup_logging

logger = logging.getLogger(LOGGER_NAME)

DEFAULT_OUTPUT = "npr-news-articles.json"


def cmd_init(engine):
    create_schema(engine)
    logger.info('Schema applied ("Article")')


def cmd_scrape(engine, settings: ScraperSettings, url: str | None, output: str | None):
    from .scrape import scrape_listing, write_output

    result = scrape_listing(engine, url=url, settings=settings)
    if output:
        write_output(result, output)
    return result


def cmd_doctor(engine):
    from .doctor import run_doctor

    return run_doctor(engine)


def parse_args(argv=None):
    ap = argparse.ArgumentParser(prog="npr-scraper")
    ap.add_argument("command", choices=["init", "scrape", "doctor"])
    ap.add_argument(
        "--url",
        type=str,
        default=None,
        help="Listing page to scrape (default: NPR_LISTING_URL or the NPR news section)",
    )
    ap.add_argument(
        "--output",
        type=str,
        default=os.getenv("SCRAPER_OUTPUT_PATH", DEFAULT_OUTPUT),
        help="JSON side file for the run; pass an empty string to skip",
    )
    ap.add_argument(
        "--dry-run",
        action="store_true",
        help="Scrape but roll back all database writes",
    )
    return ap.parse_args(argv)


def main(argv=None):
    load_dotenv()
    setup_logging()
    args = parse_args(argv)

    if args.command == "doctor":
        engine = get_engine() if database_url_configured() else None
        report = cmd_doctor(engine)
        if not report.ok:
            sys.exit(1)
        return

    engine = get_engine()
    if args.command == "init":
        cmd_init(engine)
    elif args.command == "scrape":
        settings = ScraperSettings.from_env()
        if args.dry_run:
            settings.dry_run = True
        cmd_scrape(engine, settings, url=args.url, output=args.output or None)


if __name__ == "__main__":
    main()
