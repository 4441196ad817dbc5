"""
Abstract collaborator clients for the hosted backend.

Authentication, record storage and file storage all live in an external
backend-as-a-service. The recipe book only talks to it through the three
interfaces below, so the feed, forms and detail views work unchanged against
the in-memory, REST or SQL implementations.

All implementations must:
- Raise AuthError / StoreError / StorageError (never library exceptions)
- Return plain camelCase record dicts from the store
- Notify auth listeners on every login/logout
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from recipebook.models import AuthState, EntityKind, UserIdentity

AuthListener = Callable[[AuthState], None]
Unsubscribe = Callable[[], None]


class BackendError(Exception):
    """Base class for failures reported by a backend collaborator."""


class AuthError(BackendError):
    """Raised when authentication fails or no user is signed in."""


class StoreError(BackendError):
    """Raised when a record operation cannot complete."""


class StorageError(BackendError):
    """Raised when a file upload cannot complete."""


@dataclass(frozen=True)
class UploadResult:
    """Result of a completed upload."""
    public_url: str
    key: str


class SessionProvider(ABC):
    """
    Source of the current user's identity.

    Listeners receive an AuthState immediately on subscription and again on
    every change.
    """

    def __init__(self) -> None:
        self._listeners: List[AuthListener] = []

    def on_auth_state_changed(self, listener: AuthListener) -> Unsubscribe:
        """
        Register a listener and deliver the current state to it.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)
        listener(self.current_state())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        state = self.current_state()
        for listener in list(self._listeners):
            listener(state)

    @abstractmethod
    def current_state(self) -> AuthState:
        """Return the current auth state without contacting the backend."""

    @abstractmethod
    def login(self, email: str, password: Optional[str] = None) -> UserIdentity:
        """
        Authenticate and notify listeners.

        Raises:
            AuthError: If the credentials are rejected or the backend is unreachable
        """

    @abstractmethod
    def logout(self) -> None:
        """Forget the current user and notify listeners."""

    @abstractmethod
    def me(self) -> UserIdentity:
        """
        Return the signed-in user.

        Raises:
            AuthError: If nobody is signed in
        """


class RecipeStoreClient(ABC):
    """Generic CRUD over the recipes, ratings and comments collections."""

    @abstractmethod
    def list(
        self,
        kind: EntityKind,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        List records of one kind.

        Args:
            kind: Collection to read
            where: Field equality filter, e.g. {"recipeId": "recipe_1"}
            order_by: Single-field sort, e.g. {"createdAt": "desc"}
            limit: Maximum number of records to return

        Returns:
            Matching records as camelCase dicts, in store order

        Raises:
            StoreError: On any backend failure
        """

    @abstractmethod
    def create(self, kind: EntityKind, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record (which carries its own id) and return it."""

    @abstractmethod
    def update(self, kind: EntityKind, record_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        """Merge `partial` into an existing record and return the result."""


class ObjectStorageClient(ABC):
    """Binary object storage for recipe images."""

    @abstractmethod
    def upload(self, data: bytes, key: str, upsert: bool = False) -> UploadResult:
        """
        Store `data` under `key`.

        Args:
            data: File contents
            key: Destination path, e.g. "recipes/1700000000000-soup.jpg"
            upsert: Overwrite an existing object instead of failing

        Raises:
            StorageError: If the upload cannot complete
        """


def query_records(
    records: List[Dict[str, Any]],
    where: Optional[Dict[str, Any]] = None,
    order_by: Optional[Dict[str, str]] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Apply store list semantics to records already in memory.

    Used by the stores that cannot push filters down to the backend.
    """
    if where:
        records = [
            r for r in records
            if all(r.get(field) == value for field, value in where.items())
        ]
    else:
        records = list(records)

    if order_by:
        # Apply sort keys last-to-first so the first key dominates
        for field, direction in reversed(list(order_by.items())):
            records.sort(
                key=lambda r: (r.get(field) is not None, r.get(field)),
                reverse=str(direction).lower() == "desc",
            )

    if limit is not None:
        records = records[:limit]

    return records
