from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from .config import env_flag
from .db import check_db_connectivity, database_url_configured
from .logging_setup import LOGGER_NAME
from .store import count_for_source
from .types import RESOURCE

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class DoctorReport:
    ok: bool
    failures: list[str]
    warnings: list[str]

    def to_dict(self) -> dict:
        return {"ok": self.ok, "failures": self.failures, "warnings": self.warnings}


def _check_env() -> tuple[list[str], list[str]]:
    failures: list[str] = []
    warnings: list[str] = []
    if not database_url_configured():
        failures.append(
            "Missing database URL env (POSTGRES_CONNECTION_STRING or supported aliases)"
        )

    executable = os.getenv("CHROMIUM_EXECUTABLE_PATH")
    if executable and not os.path.exists(executable):
        failures.append(f"CHROMIUM_EXECUTABLE_PATH does not exist: {executable}")
    if os.getenv("AWS_EXECUTION_ENV") and not executable:
        warnings.append(
            "AWS_EXECUTION_ENV set without CHROMIUM_EXECUTABLE_PATH; "
            "relying on Playwright's bundled Chromium"
        )
    if env_flag("SCRAPER_DRY_RUN"):
        warnings.append("SCRAPER_DRY_RUN is on; runs will not write articles")

    return failures, warnings


def _check_playwright() -> list[str]:
    warnings: list[str] = []
    try:
        import playwright  # noqa: F401
    except Exception:
        warnings.append("Playwright package not installed")
    return warnings


def _check_article_table(engine: Engine) -> tuple[list[str], list[str]]:
    failures: list[str] = []
    warnings: list[str] = []
    if not inspect(engine).has_table("Article"):
        failures.append('Missing required table: "Article" (run `init`)')
        return failures, warnings

    if count_for_source(engine, RESOURCE) == 0:
        warnings.append(f"No {RESOURCE} articles stored yet")
    return failures, warnings


def run_doctor(engine: Optional[Engine]) -> DoctorReport:
    failures, warnings = _check_env()
    if engine is None:
        report = DoctorReport(ok=False, failures=failures, warnings=warnings)
        _log_report(report)
        return report

    try:
        check_db_connectivity(engine)
    except Exception as exc:
        failures.append(f"DB connectivity failed: {type(exc).__name__}: {exc}")
        report = DoctorReport(ok=False, failures=failures, warnings=warnings)
        _log_report(report)
        return report

    table_failures, table_warnings = _check_article_table(engine)
    failures.extend(table_failures)
    warnings.extend(table_warnings)
    warnings.extend(_check_playwright())

    report = DoctorReport(ok=not failures, failures=failures, warnings=warnings)
    _log_report(report)
    return report


def _log_report(report: DoctorReport) -> None:
    if report.ok:
        logger.info("Doctor OK")
    else:
        logger.error("Doctor FAIL")

    for item in report.failures:
        logger.error("DOCTOR_FAIL %s", item)
    for item in report.warnings:
        logger.warning("DOCTOR_WARN %s", item)
