"""
Configuration management for Family Recipes.

This module centralizes environment variable loading from the .env file at the
project root. Import it early (streamlit_app/app.py does) so .env is loaded
before any other code reads the environment.

In hosted deployments .env will not exist; load_dotenv() is then a no-op and
the platform's environment variables are used instead.

Environment Variables:
- RECIPES_BACKEND: Optional, one of "memory", "rest", "sql". Derived when unset.
- RECIPES_API_URL: Required for the rest backend (hosted BaaS project URL)
- RECIPES_API_KEY: Optional API key sent to the hosted backend
- RECIPES_PROJECT_ID: Required for the rest backend
- RECIPES_API_TIMEOUT: Optional, request timeout in seconds (default: 15)
- DATABASE_URL: Required for the sql backend
- RECIPES_PAGE_SIZE: Optional, feed page size (default: 100)
- LOG_LEVEL: Optional, logging level name (default: INFO)
- RECIPES_EVENT_LOG: Optional, analytics JSONL file (default: events.log)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BACKEND_MEMORY = "memory"
BACKEND_REST = "rest"
BACKEND_SQL = "sql"
VALID_BACKENDS = {BACKEND_MEMORY, BACKEND_REST, BACKEND_SQL}

DEFAULT_PAGE_SIZE = 100
DEFAULT_API_TIMEOUT = 15.0


def load_env_file() -> None:
    """
    Load environment variables from .env at the project root.

    Safe to call multiple times. Existing environment variables take
    precedence over values in the file.
    """
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


load_env_file()


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-integer %s=%r", name, raw)
        return default


class DatabaseConfig:
    """Configuration for the SQL-backed store."""

    @staticmethod
    def get_database_url() -> Optional[str]:
        return os.getenv("DATABASE_URL")


class BackendConfig:
    """Configuration for the hosted backend collaborators."""

    @staticmethod
    def get_api_url() -> Optional[str]:
        """
        Hosted backend base URL with any trailing slash removed.

        Returns:
            URL string or None if not set
        """
        url = os.getenv("RECIPES_API_URL")
        return url.rstrip("/") if url else None

    @staticmethod
    def get_api_key() -> Optional[str]:
        return os.getenv("RECIPES_API_KEY")

    @staticmethod
    def get_project_id() -> Optional[str]:
        return os.getenv("RECIPES_PROJECT_ID")

    @staticmethod
    def get_timeout() -> float:
        raw = os.getenv("RECIPES_API_TIMEOUT")
        try:
            return float(raw) if raw else DEFAULT_API_TIMEOUT
        except ValueError:
            return DEFAULT_API_TIMEOUT

    @staticmethod
    def get_backend_mode() -> str:
        """
        Select which backend implementation to use.

        An explicit RECIPES_BACKEND wins. Otherwise DATABASE_URL selects "sql",
        RECIPES_API_URL selects "rest", and everything else runs in memory.

        Raises:
            RuntimeError: If RECIPES_BACKEND names an unknown backend
        """
        explicit = (os.getenv("RECIPES_BACKEND") or "").strip().lower()
        if explicit:
            if explicit not in VALID_BACKENDS:
                raise RuntimeError(
                    f"Unknown RECIPES_BACKEND {explicit!r}; expected one of {sorted(VALID_BACKENDS)}"
                )
            return explicit
        if DatabaseConfig.get_database_url():
            return BACKEND_SQL
        if BackendConfig.get_api_url():
            return BACKEND_REST
        return BACKEND_MEMORY


class FeedConfig:
    """Configuration for the recipe feed."""

    @staticmethod
    def get_page_size() -> int:
        size = _get_int("RECIPES_PAGE_SIZE", DEFAULT_PAGE_SIZE)
        return size if size > 0 else DEFAULT_PAGE_SIZE


class LoggingConfig:
    """Configuration for logging and analytics output."""

    @staticmethod
    def get_log_level() -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @staticmethod
    def get_event_log_path() -> Path:
        return Path(os.getenv("RECIPES_EVENT_LOG", "events.log"))


def validate_required_config() -> None:
    """
    Validate that the selected backend has everything it needs.

    Raises:
        RuntimeError: If any required configuration is missing
    """
    mode = BackendConfig.get_backend_mode()
    missing = []

    if mode == BACKEND_REST:
        if not BackendConfig.get_api_url():
            missing.append("RECIPES_API_URL (required for the rest backend)")
        if not BackendConfig.get_project_id():
            missing.append("RECIPES_PROJECT_ID (required for the rest backend)")
    elif mode == BACKEND_SQL:
        if not DatabaseConfig.get_database_url():
            missing.append("DATABASE_URL (required for the sql backend)")

    if missing:
        raise RuntimeError(
            "Missing required environment variables:\n"
            + "\n".join(f"  - {var}" for var in missing)
            + "\n\nPlease create a .env file at the project root with these variables."
        )


def configure_logging() -> None:
    """Configure root logging once; later calls leave existing handlers alone."""
    level = getattr(logging, LoggingConfig.get_log_level(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
