"""FastAPI application entrypoint for the Medical Bill Auditor."""

import logging
import os
import sys

import uvicorn
from fastapi import FastAPI

from app.api.routes import router

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level_name: str | None = None) -> None:
    """Send application logs to stdout at ``LOG_LEVEL`` (INFO when unset or unknown)."""
    level_name = (level_name or os.getenv("LOG_LEVEL", "INFO")).strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout)


def create_app() -> FastAPI:
    """Build the API with the bill analysis routes mounted."""
    api = FastAPI(
        title="Medical Bill Auditor",
        description=(
            "Upload an image or PDF of a medical bill to get its line items, "
            "an audit for duplicate, upcoded or unbundled charges, and a draft "
            "appeal letter when problems are found."
        ),
        version="0.1.0",
    )
    api.include_router(router)
    return api


configure_logging()
app = create_app()


def main() -> None:
    """Serve the API with uvicorn on ``HOST``:``PORT``."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info("Medical Bill Auditor listening on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
