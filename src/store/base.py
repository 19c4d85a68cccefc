"""REST client for the hosted league store (PostgREST with token auth)."""

import logging
from typing import Any, Optional, Sequence

import requests


logger = logging.getLogger(__name__)

# Default request timeout in seconds
DEFAULT_TIMEOUT = 30


class StoreError(Exception):
    """Base exception for store errors."""

    pass


class RequestError(StoreError):
    """Raised when a store request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(RequestError):
    """Raised when the store rejects the credentials or token."""

    pass


class RateLimitError(RequestError):
    """Raised when the store rate limits the client."""

    pass


def eq(value: Any) -> str:
    """PostgREST equality filter value."""
    return f"eq.{value}"


class RestClient:
    """
    Thin client over the store's REST and auth endpoints.

    Every request carries the project API key. Requests are authorized with
    the signed-in user's access token when there is one, and with the API
    key otherwise, so row-level policies apply to the right role.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Project URL, e.g. ``https://xyz.supabase.co``.
            api_key: Public (anon) project key.
            access_token: Bearer token of an already signed-in user.
            timeout: Per-request timeout in seconds.
            session: Session to reuse; a new one is created if omitted.
        """
        if not base_url:
            raise ValueError("base_url is required")
        if not api_key:
            raise ValueError("api_key is required")

        self.base_url = base_url.rstrip("/")
        self.rest_url = f"{self.base_url}/rest/v1/"
        self.auth_url = f"{self.base_url}/auth/v1/"
        self.api_key = api_key
        self.access_token = access_token
        self.timeout = timeout

        # Session for connection reuse
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    @property
    def is_authenticated(self) -> bool:
        """Check if requests are sent with a user token."""
        return self.access_token is not None

    def _auth_headers(self) -> dict[str, str]:
        token = self.access_token or self.api_key
        return {"Authorization": f"Bearer {token}"}

    def sign_in(self, email: str, password: str) -> str:
        """
        Sign in with email and password and keep the access token.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            The access token.

        Raises:
            AuthError: If the credentials are rejected.
        """
        data = self._send(
            "POST",
            f"{self.auth_url}token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise AuthError("Sign-in response did not include an access token")
        self.access_token = token
        logger.info("Signed in as %s", email)
        return token

    def sign_out(self) -> None:
        """Forget the user token; later requests use the API key."""
        self.access_token = None

    def _send(
        self,
        method: str,
        url: str,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        Send a request and decode the JSON body.

        Raises:
            RequestError: If the request fails.
            AuthError: On 401/403 responses.
            RateLimitError: On 429 responses.
        """
        request_headers = self._auth_headers()
        if headers:
            request_headers.update(headers)

        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=request_headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout:
            raise RequestError(f"Request timed out: {method} {url}")
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code
            detail = _error_detail(e.response)
            if status == 429:
                raise RateLimitError(f"Rate limited: {method} {url}", status)
            if status in (401, 403):
                raise AuthError(f"Not authorized ({status}): {detail}", status)
            raise RequestError(f"HTTP error {status} on {method} {url}: {detail}", status)
        except requests.exceptions.RequestException as e:
            raise RequestError(f"Request failed: {method} {url} - {e}")

        if response.status_code == 204 or not response.content:
            return []
        try:
            return response.json()
        except ValueError:
            raise RequestError(f"Invalid JSON in response: {method} {url}", response.status_code)

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict[str, str]] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """
        Read rows from a table.

        Args:
            table: Table name.
            columns: PostgREST select expression, including embedded joins.
            filters: Column to filter-expression mapping, e.g. ``{"id": "eq.7"}``.
            order: Ordering expression, e.g. ``"pick_number.asc"``.
            limit: Maximum number of rows.

        Returns:
            List of rows.
        """
        params: dict[str, Any] = {"select": columns}
        params.update(filters or {})
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit
        return self._send("GET", self.rest_url + table, params=params)

    def count(self, table: str, filters: Optional[dict[str, str]] = None) -> int:
        """Count rows matching ``filters`` without fetching them."""
        params: dict[str, Any] = {"select": "*"}
        params.update(filters or {})
        request_headers = self._auth_headers()
        request_headers["Prefer"] = "count=exact"
        try:
            response = self._session.head(
                self.rest_url + table,
                params=params,
                headers=request_headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise RequestError(f"HTTP error {e.response.status_code} counting {table}", e.response.status_code)
        except requests.exceptions.RequestException as e:
            raise RequestError(f"Request failed counting {table} - {e}")

        content_range = response.headers.get("Content-Range", "")
        total = content_range.rsplit("/", 1)[-1]
        if not total.isdigit():
            raise RequestError(f"Missing row count for {table}")
        return int(total)

    def insert(self, table: str, rows: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """Insert rows and return them as stored."""
        return self._send(
            "POST",
            self.rest_url + table,
            json=list(rows),
            headers={"Prefer": "return=representation"},
        )

    def upsert(
        self,
        table: str,
        rows: Sequence[dict[str, Any]],
        on_conflict: str,
    ) -> list[dict[str, Any]]:
        """
        Insert rows, merging into existing rows that share the conflict key.

        Args:
            table: Table name.
            rows: Rows to write.
            on_conflict: Comma-separated unique key columns, e.g. ``"game_id,player_id"``.
        """
        return self._send(
            "POST",
            self.rest_url + table,
            params={"on_conflict": on_conflict},
            json=list(rows),
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )

    def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: dict[str, str],
    ) -> list[dict[str, Any]]:
        """Patch rows matching ``filters``."""
        if not filters:
            raise ValueError("update requires at least one filter")
        return self._send(
            "PATCH",
            self.rest_url + table,
            params=filters,
            json=values,
            headers={"Prefer": "return=representation"},
        )

    def delete(self, table: str, filters: dict[str, str]) -> list[dict[str, Any]]:
        """Delete rows matching ``filters``."""
        if not filters:
            raise ValueError("delete requires at least one filter")
        return self._send("DELETE", self.rest_url + table, params=filters)


def _error_detail(response: requests.Response) -> str:
    """Pull the message out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error_description") or body.get("error") or body)
    return str(body)
