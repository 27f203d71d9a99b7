"""
Kviz API client

Fetches result and quiz records from the Kviz REST API and posts finished
attempts. Tokens are obtained elsewhere; this client only forwards them.
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from .config import config
from .errors import AuthenticationError, KvizApiError, NotFoundError
from .quiz.schema import Attempt, Quiz
from .records import decode_attempts, decode_quiz, encode_attempt

logger = logging.getLogger(__name__)


class KvizClient:
    """
    Async client for the Kviz results and quiz endpoints.

    Settings are read from:
    1. Constructor arguments
    2. ``config.api`` (KVIZ_API_URL, KVIZ_API_TOKEN, KVIZ_API_TIMEOUT)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. http://localhost:5000/api/v1/
            token: Bearer token for the Authorization header
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._base_url = base_url or config.api.base_url
        if not self._base_url.endswith("/"):
            self._base_url += "/"
        self._token = token or config.api.token
        self._timeout = timeout or config.api.timeout_seconds
        self._transport = transport
        self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy initialization of HTTP client."""
        if self._client is None:
            if not self._token:
                raise AuthenticationError(
                    "No Kviz API token provided. Set KVIZ_API_TOKEN or pass token to constructor."
                )
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Content-Type": "application/json",
                },
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        client = self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in (401, 403):
                raise AuthenticationError(f"Kviz API rejected credentials: {e}", status)
            if status == 404:
                raise NotFoundError(f"Kviz API resource not found: {e}", status)
            raise KvizApiError(f"Kviz API error: {e}", status)
        except httpx.HTTPError as e:
            raise KvizApiError(f"Kviz API request failed: {e}")

    async def _get_list(self, path: str) -> list[Any]:
        response = await self._request("GET", path)
        try:
            data = response.json()
        except ValueError as e:
            raise KvizApiError(f"Kviz API returned invalid JSON for {path}: {e}")
        if not isinstance(data, list):
            raise KvizApiError(f"Kviz API returned {type(data).__name__} for {path}, expected a list")
        return data

    async def fetch_results(self) -> list[Attempt]:
        """Every stored attempt, decoded; undecodable records are skipped."""
        records = await self._get_list("results/all")
        attempts = decode_attempts(records)
        logger.debug("Fetched %d results (%d usable)", len(records), len(attempts))
        return attempts

    async def fetch_user_results(self, username: str) -> list[Attempt]:
        """Stored attempts of one user."""
        records = await self._get_list(f"results/user/{quote(username, safe='')}")
        return decode_attempts(records)

    async def fetch_quizzes(self) -> list[Quiz]:
        """The quiz catalogue with answer keys decoded."""
        records = await self._get_list("quiz/all")
        quizzes = [decode_quiz(r) for r in records]
        return [q for q in quizzes if q is not None]

    async def add_result(self, attempt: Attempt) -> bool:
        """Store a finished attempt. Returns True when the API accepted it."""
        response = await self._request("POST", "results/add", json=encode_attempt(attempt))
        return response.status_code == 200

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "KvizClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
