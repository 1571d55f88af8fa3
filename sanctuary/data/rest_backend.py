from __future__ import annotations

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from sanctuary.constants import DEFAULT_ROLE
from sanctuary.data.backend import AuthError, Backend, BackendError, Identity
from sanctuary.data.realtime import PollingSubscription

logger = logging.getLogger(__name__)

EPOCH_ISO = "1970-01-01T00:00:00+00:00"


def _build_session():
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=10, pool_maxsize=10)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _filter_value(value):
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


def filter_params(filters):
    return {column: _filter_value(value) for column, value in (filters or {}).items()}


def _error_detail(response):
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason, None
    if isinstance(payload, dict):
        message = (
            payload.get("message")
            or payload.get("msg")
            or payload.get("error_description")
            or payload.get("error")
            or str(payload)
        )
        code = payload.get("code") or payload.get("error_code")
        return str(message), (str(code) if code is not None else None)
    return str(payload), None


class RestBackend(Backend):
    """Backend speaking the PostgREST/Supabase HTTP dialect."""

    name = "http"

    def __init__(self, base_url: str, api_key: str, timeout: float = 10, session=None):
        self.base_url = str(base_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.access_token: str | None = None
        self._session = session or _build_session()

    def _headers(self, extra=None):
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def request(self, method: str, path: str, params: dict | None = None, json: Any = None, headers=None) -> Any:
        if not self.base_url:
            raise BackendError("Backend URL not configured")
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(headers),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise BackendError(f"Failed to fetch {method} {path}: {exc}", code="network") from exc
        if not response.ok:
            message, code = _error_detail(response)
            raise BackendError(message, status=response.status_code, code=code)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # --- table operations ---

    def select(self, table, filters=None, order=None, ascending=True, limit=None):
        params = {"select": "*", **filter_params(filters)}
        if order:
            params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
        if limit:
            params["limit"] = int(limit)
        return self.request("GET", f"/rest/v1/{table}", params=params) or []

    def insert(self, table, rows):
        return self.request(
            "POST",
            f"/rest/v1/{table}",
            json=list(rows),
            headers={"Prefer": "return=representation"},
        ) or []

    def update(self, table, values, filters):
        if not filters:
            raise BackendError("UPDATE requires a WHERE clause", status=400, code="21000")
        return self.request(
            "PATCH",
            f"/rest/v1/{table}",
            params=filter_params(filters),
            json=dict(values),
            headers={"Prefer": "return=representation"},
        ) or []

    def delete(self, table, filters):
        if not filters:
            raise BackendError("DELETE requires a WHERE clause", status=400, code="21000")
        self.request("DELETE", f"/rest/v1/{table}", params=filter_params(filters))

    def upsert(self, table, rows, on_conflict):
        return self.request(
            "POST",
            f"/rest/v1/{table}",
            params={"on_conflict": ",".join(on_conflict)},
            json=list(rows),
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        ) or []

    def rpc(self, name, params=None):
        return self.request("POST", f"/rest/v1/rpc/{name}", json=dict(params or {}))

    # --- auth ---

    def _session_identity(self, payload):
        user = payload.get("user") or payload
        token = payload.get("access_token")
        identity = Identity.from_user(user, access_token=token)
        if not identity.id:
            raise AuthError("Auth response did not include a user")
        self.access_token = token
        return identity

    def sign_in(self, email, password):
        try:
            payload = self.request(
                "POST",
                "/auth/v1/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        except BackendError as exc:
            raise AuthError(exc.message, status=exc.status, code=exc.code) from exc
        return self._session_identity(payload or {})

    def sign_up(self, email, password, role=DEFAULT_ROLE):
        try:
            payload = self.request(
                "POST",
                "/auth/v1/signup",
                json={"email": email, "password": password, "data": {"role": role}},
            )
        except BackendError as exc:
            raise AuthError(exc.message, status=exc.status, code=exc.code) from exc
        payload = payload or {}
        if not payload.get("access_token"):
            raise AuthError("Check your email to confirm the account, then sign in.")
        return self._session_identity(payload)

    def sign_out(self, identity=None):
        if not self.access_token:
            return
        try:
            self.request("POST", "/auth/v1/logout")
        except BackendError:
            logger.warning("Remote sign out failed; dropping local session anyway", exc_info=True)
        finally:
            self.access_token = None

    # --- realtime ---

    def subscribe(self, table, callback, since=None):
        def fetch_since(cursor):
            params = {"select": "*", "created_at": f"gt.{cursor}", "order": "created_at.asc"}
            return self.request("GET", f"/rest/v1/{table}", params=params) or []

        return PollingSubscription(table, callback, fetch_since, cursor=since or EPOCH_ISO)

    def close(self):
        self._session.close()
