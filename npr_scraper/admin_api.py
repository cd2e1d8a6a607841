import logging

from fastapi import FastAPI, HTTPException

from .db import get_engine
from .logging_setup import LOGGER_NAME
from .types import ListingLoadError

logger = logging.getLogger(LOGGER_NAME)

app = FastAPI(title="NPR Scraper Admin API", version="1.0")


@app.get("/health")
def health():
    return {"ok": True, "version": "1.0"}


@app.post("/schema/apply")
def apply_schema():
    from .db import create_schema

    engine = get_engine()
    create_schema(engine)
    return {"ok": True}


@app.post("/scrape")
def scrape(url: str | None = None):
    from .scrape import scrape_listing

    engine = get_engine()
    try:
        result = scrape_listing(engine, url=url)
    except ListingLoadError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {"ok": True, "result": result.to_dict()}


@app.get("/doctor")
def doctor():
    from .doctor import run_doctor

    engine = get_engine()
    report = run_doctor(engine)
    return report.to_dict()
