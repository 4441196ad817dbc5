"""
HTTP client for a hosted backend-as-a-service project.

All three collaborators share one RestClient, which owns the requests.Session,
the project base URL and the bearer token obtained at login. Routes:

- POST  {api}/auth/{project}/login            -> {"accessToken", "user"}
- GET   {api}/auth/{project}/me               -> {"user"}
- POST  {api}/auth/{project}/logout
- GET   {api}/db/{project}/{kind}             ?where=&orderBy=&limit=
- POST  {api}/db/{project}/{kind}             body: record
- PATCH {api}/db/{project}/{kind}/{id}        body: partial record
- POST  {api}/storage/{project}/upload        multipart file + path + upsert

Every requests exception is translated into the BackendError hierarchy so
callers never see library exceptions.
"""

import json
import logging
import posixpath
from typing import Any, Dict, List, Optional, Type

import requests

from recipebook.models import AuthState, EntityKind, UserIdentity

from .base import (
    AuthError,
    BackendError,
    ObjectStorageClient,
    RecipeStoreClient,
    SessionProvider,
    StorageError,
    StoreError,
    UploadResult,
)

logger = logging.getLogger(__name__)


class RestClient:
    """Shared transport for the hosted backend."""

    def __init__(
        self,
        base_url: str,
        project_id: str,
        api_key: Optional[str] = None,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url:
            raise RuntimeError("RECIPES_API_URL is not set")
        if not project_id:
            raise RuntimeError("RECIPES_PROJECT_ID is not set")
        self.base_url = base_url.rstrip("/")
        self.project_id = project_id
        self.api_key = api_key
        self.timeout = timeout
        self.http = session or requests.Session()
        self.access_token: Optional[str] = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def url(self, area: str, *parts: str) -> str:
        return "/".join([self.base_url, "api", area, self.project_id, *parts])

    def request(
        self,
        method: str,
        url: str,
        error_cls: Type[BackendError],
        **kwargs: Any,
    ) -> Any:
        """
        Perform one HTTP call and decode the JSON body.

        Returns:
            Decoded JSON, or None for an empty body

        Raises:
            error_cls: For timeouts, connection errors, non-2xx responses and bad JSON
        """
        try:
            response = self.http.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise error_cls(f"{method} {url} timed out") from e
        except requests.exceptions.ConnectionError as e:
            raise error_cls(f"Could not connect to {self.base_url}") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            body = e.response.text if e.response is not None else ""
            raise error_cls(f"{method} {url} returned {status}: {body}") from e
        except requests.exceptions.RequestException as e:
            raise error_cls(f"{method} {url} failed: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise error_cls(f"{method} {url} returned invalid JSON") from e


def _unwrap(data: Any, key: str) -> Any:
    if isinstance(data, dict) and key in data:
        return data[key]
    return data


class RestSessionProvider(SessionProvider):
    """Email/password login against the hosted auth service."""

    def __init__(self, client: RestClient) -> None:
        super().__init__()
        self.client = client
        self._user: Optional[UserIdentity] = None

    def current_state(self) -> AuthState:
        return AuthState(user=self._user, is_loading=False)

    def login(self, email: str, password: Optional[str] = None) -> UserIdentity:
        data = self.client.request(
            "POST",
            self.client.url("auth", "login"),
            AuthError,
            json={"email": email, "password": password or ""},
        )
        if not isinstance(data, dict) or not data.get("accessToken"):
            raise AuthError("Login response did not include an access token")

        self.client.access_token = data["accessToken"]
        try:
            self._user = UserIdentity.model_validate(data.get("user") or {})
        except ValueError as e:
            self.client.access_token = None
            raise AuthError("Login response did not include a valid user") from e

        logger.info("Signed in %s", self._user.email)
        self._notify()
        return self._user

    def logout(self) -> None:
        if self.client.access_token:
            try:
                self.client.request("POST", self.client.url("auth", "logout"), AuthError)
            except AuthError as e:
                logger.warning("Remote logout failed, clearing local session anyway: %s", e)
        self.client.access_token = None
        self._user = None
        self._notify()

    def me(self) -> UserIdentity:
        if not self.client.access_token:
            raise AuthError("Not signed in")
        data = self.client.request("GET", self.client.url("auth", "me"), AuthError)
        try:
            return UserIdentity.model_validate(_unwrap(data, "user"))
        except ValueError as e:
            raise AuthError("Backend returned an invalid user") from e


class RestRecipeStore(RecipeStoreClient):
    """Record CRUD over the hosted document database."""

    def __init__(self, client: RestClient) -> None:
        self.client = client

    def list(
        self,
        kind: EntityKind,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {}
        if where:
            params["where"] = json.dumps(where)
        if order_by:
            params["orderBy"] = json.dumps(order_by)
        if limit is not None:
            params["limit"] = limit

        data = self.client.request(
            "GET",
            self.client.url("db", EntityKind(kind).value),
            StoreError,
            params=params,
        )
        records = _unwrap(data, "data")
        if records is None:
            return []
        if not isinstance(records, list):
            raise StoreError(f"Expected a list of {kind}, got {type(records).__name__}")
        return records

    def create(self, kind: EntityKind, record: Dict[str, Any]) -> Dict[str, Any]:
        data = self.client.request(
            "POST",
            self.client.url("db", EntityKind(kind).value),
            StoreError,
            json=record,
        )
        return _unwrap(data, "data") or record

    def update(self, kind: EntityKind, record_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        data = self.client.request(
            "PATCH",
            self.client.url("db", EntityKind(kind).value, record_id),
            StoreError,
            json=partial,
        )
        return _unwrap(data, "data") or {"id": record_id, **partial}


class RestObjectStorage(ObjectStorageClient):
    """Multipart uploads to the hosted file storage."""

    def __init__(self, client: RestClient) -> None:
        self.client = client

    def upload(self, data: bytes, key: str, upsert: bool = False) -> UploadResult:
        if not key:
            raise StorageError("Upload key must not be empty")
        response = self.client.request(
            "POST",
            self.client.url("storage", "upload"),
            StorageError,
            files={"file": (posixpath.basename(key), data)},
            data={"path": key, "upsert": "true" if upsert else "false"},
        )
        public_url = response.get("publicUrl") if isinstance(response, dict) else None
        if not public_url:
            raise StorageError(f"Upload of {key} did not return a public URL")
        return UploadResult(public_url=public_url, key=key)
