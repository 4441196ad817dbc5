# recipebook/events.py
"""
Usage analytics for Family Recipes.

Responsibilities:
- Provide a single log_event(...) function that appends one JSONL record per
  event to the event log (RECIPES_EVENT_LOG, default events.log).
- Never raise exceptions (analytics are strictly non-blocking).

- Provide small helper functions for the events the app emits:
  - log_recipe_created(...)
  - log_recipe_viewed(...)
  - log_rating_submitted(...)
  - log_comment_added(...)
  - log_search_performed(...)
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from recipebook.config import LoggingConfig

logger = logging.getLogger(__name__)

# JSONL file with one event per line
EVENT_LOG_FILE = LoggingConfig.get_event_log_path()


def _write_to_file(record: Dict[str, Any]) -> None:
    """
    Append a single JSON record to the event log as JSONL.
    Never raise exceptions.
    """
    try:
        path = Path(EVENT_LOG_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(record, ensure_ascii=False)
        with path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
    except Exception as exc:
        # Last-resort: log at debug level, never raise.
        logger.debug("Failed to write event to %s: %s", EVENT_LOG_FILE, exc)


def log_event(
    event: str,
    user_id: Optional[str],
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Core event logger.

    Builds a record with keys ts, event, user_id and payload and appends it
    to the event log. Never raises.
    """
    record = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "user_id": user_id,
        "payload": payload or {},
    }
    _write_to_file(record)


# ---------------------------------------------------------------------------
# Helper functions for common event types
# ---------------------------------------------------------------------------

def log_recipe_created(
    user_id: Optional[str],
    recipe_id: str,
    privacy_level: str,
    has_image: bool,
) -> None:
    """
    Log a recipe_created event.

    payload:
    {
        "recipe_id": "recipe_...",
        "privacy_level": "public",
        "has_image": true
    }
    """
    payload = {
        "recipe_id": recipe_id,
        "privacy_level": privacy_level,
        "has_image": has_image,
    }
    log_event("recipe_created", user_id, payload)


def log_recipe_viewed(user_id: Optional[str], recipe_id: str, title: str) -> None:
    """Log a recipe_viewed event when a detail view opens."""
    log_event("recipe_viewed", user_id, {"recipe_id": recipe_id, "title": title})


def log_rating_submitted(
    user_id: Optional[str],
    recipe_id: str,
    rating: int,
    is_update: bool,
) -> None:
    """
    Log a rating_submitted event.

    payload:
    {
        "recipe_id": "recipe_...",
        "rating": 4,
        "is_update": false
    }
    """
    payload = {
        "recipe_id": recipe_id,
        "rating": rating,
        "is_update": is_update,
    }
    log_event("rating_submitted", user_id, payload)


def log_comment_added(user_id: Optional[str], recipe_id: str, length: int) -> None:
    log_event("comment_added", user_id, {"recipe_id": recipe_id, "length": length})


def log_search_performed(
    user_id: Optional[str],
    query: str,
    category: str,
    result_count: int,
) -> None:
    """
    Log a search_performed event.

    payload:
    {
        "query": "...",
        "category": "italian",
        "result_count": 3
    }
    """
    payload = {
        "query": query,
        "category": category,
        "result_count": result_count,
    }
    log_event("search_performed", user_id, payload)
