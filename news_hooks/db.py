"""Supabase client construction."""
import logging
from typing import Optional

from supabase import Client, create_client

logger = logging.getLogger(__name__)


def make_supabase_client(url: Optional[str], key: Optional[str]) -> Optional[Client]:
    """Return a client, or None when credentials are not configured (local mode)."""
    if not url or not key:
        logger.info("[DB] SUPABASE_URL / SUPABASE_KEY not set, using local JSON store.")
        return None
    return create_client(url, key)
