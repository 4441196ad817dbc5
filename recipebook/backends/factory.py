"""
Backend selection.

Builds the three collaborator clients for the backend mode chosen in
config.BackendConfig.get_backend_mode():

- memory: everything in-process (demo mode, nothing persisted)
- rest:   hosted backend-as-a-service over HTTP
- sql:    records in DATABASE_URL; sign-in and images stay in-process
"""

import logging
from dataclasses import dataclass
from typing import Optional

from recipebook.config import (
    BACKEND_MEMORY,
    BACKEND_REST,
    BACKEND_SQL,
    BackendConfig,
    DatabaseConfig,
    validate_required_config,
)

from .base import ObjectStorageClient, RecipeStoreClient, SessionProvider
from .memory import InMemoryObjectStorage, InMemoryRecipeStore, InMemorySessionProvider

logger = logging.getLogger(__name__)


@dataclass
class Backend:
    """The three collaborators the app talks to, plus the mode they came from."""
    session: SessionProvider
    store: RecipeStoreClient
    storage: ObjectStorageClient
    mode: str = BACKEND_MEMORY

    def for_new_session(self) -> "Backend":
        """
        Backend for one more signed-in user of the same app.

        The memory and sql modes share this backend's store and storage and
        only get their own session provider. The rest mode keeps the access
        token on the HTTP client, so it gets a fully separate backend.
        """
        if self.mode == BACKEND_REST:
            return build_backend(BACKEND_REST)
        return Backend(
            session=InMemorySessionProvider(),
            store=self.store,
            storage=self.storage,
            mode=self.mode,
        )


def build_memory_backend() -> Backend:
    return Backend(
        session=InMemorySessionProvider(),
        store=InMemoryRecipeStore(),
        storage=InMemoryObjectStorage(),
        mode=BACKEND_MEMORY,
    )


def build_backend(mode: Optional[str] = None) -> Backend:
    """
    Build the backend for the configured (or given) mode.

    Args:
        mode: Override for RECIPES_BACKEND; None reads configuration

    Returns:
        Backend with session, store and storage clients

    Raises:
        RuntimeError: If required configuration for the mode is missing
    """
    if mode is None:
        validate_required_config()
        mode = BackendConfig.get_backend_mode()

    if mode == BACKEND_REST:
        from .rest import RestClient, RestObjectStorage, RestRecipeStore, RestSessionProvider

        client = RestClient(
            base_url=BackendConfig.get_api_url() or "",
            project_id=BackendConfig.get_project_id() or "",
            api_key=BackendConfig.get_api_key(),
            timeout=BackendConfig.get_timeout(),
        )
        logger.info("Using hosted backend at %s", client.base_url)
        return Backend(
            session=RestSessionProvider(client),
            store=RestRecipeStore(client),
            storage=RestObjectStorage(client),
            mode=BACKEND_REST,
        )

    if mode == BACKEND_SQL:
        from .sql import SqlRecipeStore

        logger.info("Using SQL record store")
        return Backend(
            session=InMemorySessionProvider(),
            store=SqlRecipeStore(DatabaseConfig.get_database_url() or ""),
            storage=InMemoryObjectStorage(),
            mode=BACKEND_SQL,
        )

    if mode != BACKEND_MEMORY:
        raise RuntimeError(f"Unknown backend mode: {mode!r}")

    logger.info("Using in-memory backend (demo mode, nothing is persisted)")
    return build_memory_backend()
