"""Persistence of completed analyses in Supabase."""

import logging
import os
from typing import Any, Protocol

from supabase import Client, create_client

from app.errors import PersistenceFailed

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "bill_analyses"

_PLACEHOLDERS = ("YOUR_SUPABASE_URL_HERE", "YOUR_SUPABASE_KEY_HERE", "YOUR_SUPABASE_ANON_KEY_HERE")


class AnalysisStore(Protocol):
    def insert(self, record: dict[str, Any]) -> None: ...


class SupabaseAnalysisStore:
    """Inserts one row per analysis into a Supabase table."""

    def __init__(self, client: Client, table: str = DEFAULT_TABLE) -> None:
        self.client = client
        self.table = table

    def insert(self, record: dict[str, Any]) -> None:
        """Insert a flat analysis record.

        Raises:
            PersistenceFailed: If the Supabase client reports an error.
        """
        try:
            self.client.table(self.table).insert([record]).execute()
        except Exception as exc:
            message = getattr(exc, "message", None) or str(exc)
            logger.error("Supabase insert into %s failed: %s", self.table, message)
            raise PersistenceFailed(
                f"Failed to save analysis to the database: {message}"
            ) from exc
        logger.info("Saved analysis to %s", self.table)


class NullAnalysisStore:
    """Accepts inserts and discards them; used when no database is configured."""

    def insert(self, record: dict[str, Any]) -> None:
        logger.debug(
            "Persistence is inert — discarding analysis for provider=%s",
            record.get("provider_name"),
        )


def _is_configured(value: str | None) -> bool:
    return bool(value and value.strip()) and not any(p in value for p in _PLACEHOLDERS)


def get_analysis_store() -> AnalysisStore:
    """Return a Supabase-backed store, or a null store when credentials are missing."""
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")

    if not (_is_configured(supabase_url) and _is_configured(supabase_key)):
        logger.warning(
            "Supabase credentials are not configured or are placeholders. "
            "Using a null store; analyses will not be persisted."
        )
        return NullAnalysisStore()

    supabase_url = supabase_url.strip()
    if not supabase_url.startswith(("http://", "https://")):
        supabase_url = f"https://{supabase_url}"

    client = create_client(supabase_url, supabase_key.strip())
    return SupabaseAnalysisStore(client, os.getenv("SUPABASE_TABLE", DEFAULT_TABLE))
