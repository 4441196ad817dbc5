"""
In-process backend used for local demo mode and tests.

Records live in plain dicts for the lifetime of the process. Nothing is
persisted; restarting the app starts from an empty store.
"""

import copy
import hashlib
import logging
from typing import Any, Dict, List, Optional

from recipebook.models import AuthState, EntityKind, UserIdentity

from .base import (
    AuthError,
    ObjectStorageClient,
    RecipeStoreClient,
    SessionProvider,
    StorageError,
    StoreError,
    UploadResult,
    query_records,
)

logger = logging.getLogger(__name__)


def _user_id_for(email: str) -> str:
    digest = hashlib.md5(email.strip().lower().encode()).hexdigest()[:12]
    return f"user_{digest}"


class InMemorySessionProvider(SessionProvider):
    """
    Password-less session provider.

    Any non-empty email signs in; the user id is derived from the email so the
    same address always maps to the same owner.
    """

    def __init__(self) -> None:
        super().__init__()
        self._user: Optional[UserIdentity] = None

    def current_state(self) -> AuthState:
        return AuthState(user=self._user, is_loading=False)

    def login(self, email: str, password: Optional[str] = None) -> UserIdentity:
        email = (email or "").strip()
        if not email:
            raise AuthError("An email address is required to sign in")
        self._user = UserIdentity(id=_user_id_for(email), email=email)
        logger.info("Signed in %s", email)
        self._notify()
        return self._user

    def logout(self) -> None:
        self._user = None
        self._notify()

    def me(self) -> UserIdentity:
        if self._user is None:
            raise AuthError("Not signed in")
        return self._user


class InMemoryRecipeStore(RecipeStoreClient):
    """Dict-backed record store with equality filters and single-field sort."""

    def __init__(self) -> None:
        self._records: Dict[EntityKind, Dict[str, Dict[str, Any]]] = {
            kind: {} for kind in EntityKind
        }

    def _collection(self, kind: EntityKind) -> Dict[str, Dict[str, Any]]:
        try:
            return self._records[EntityKind(kind)]
        except ValueError as e:
            raise StoreError(f"Unknown collection: {kind}") from e

    def list(
        self,
        kind: EntityKind,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        records = query_records(list(self._collection(kind).values()), where, order_by, limit)
        return copy.deepcopy(records)

    def create(self, kind: EntityKind, record: Dict[str, Any]) -> Dict[str, Any]:
        collection = self._collection(kind)
        record_id = record.get("id")
        if not record_id:
            raise StoreError("Records must carry an id")
        if record_id in collection:
            raise StoreError(f"Duplicate id in {kind}: {record_id}")
        collection[record_id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    def update(self, kind: EntityKind, record_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        collection = self._collection(kind)
        if record_id not in collection:
            raise StoreError(f"No {kind} record with id {record_id}")
        collection[record_id].update(copy.deepcopy(partial))
        return copy.deepcopy(collection[record_id])


class InMemoryObjectStorage(ObjectStorageClient):
    """Keeps uploaded bytes in memory and hands out memory:// URLs."""

    def __init__(self, bucket: str = "recipe-images") -> None:
        self.bucket = bucket
        self.objects: Dict[str, bytes] = {}

    def upload(self, data: bytes, key: str, upsert: bool = False) -> UploadResult:
        if not key:
            raise StorageError("Upload key must not be empty")
        if key in self.objects and not upsert:
            raise StorageError(f"Object already exists: {key}")
        self.objects[key] = bytes(data)
        return UploadResult(public_url=f"memory://{self.bucket}/{key}", key=key)
