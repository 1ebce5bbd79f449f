"""Async client for the remote user directory.

The user directory is a GraphQL endpoint exposing ``users_v1`` records.
keysync only needs each user's ``org_username`` and ``public_gpg_key``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from pydantic import ValidationError

from keysync.errors import RemoteFetchError
from keysync.models.user import User

logger = logging.getLogger(__name__)

USERS_QUERY = """
query Users {
  users_v1 {
    org_username
    public_gpg_key
  }
}
"""

# Anything callable that yields the desired users can feed a cycle
FetchUsers = Callable[[], Awaitable[list[User]]]


class UserDirectoryClient:
    """Fetches user records from a GraphQL user directory.

    Attributes:
        url: GraphQL endpoint URL.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: GraphQL endpoint URL.
            token: Optional bearer token sent in the Authorization header.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport override (used by tests).
        """
        self.url = url
        self.timeout = timeout
        self._token = token
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def fetch_users(self) -> list[User]:
        """Query the user directory for all users.

        Returns:
            Users in the order the directory returned them.

        Raises:
            RemoteFetchError: If the request fails or the response is invalid.
        """
        logger.debug("Querying user directory at %s", self.url)

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers=self._headers(),
        ) as client:
            try:
                response = await client.post(self.url, json={"query": USERS_QUERY})
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                msg = f"User directory returned HTTP {e.response.status_code}"
                raise RemoteFetchError(msg) from e
            except httpx.RequestError as e:
                raise RemoteFetchError(f"Error while getting users: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteFetchError(f"Invalid JSON from user directory: {e}") from e

        return parse_users_response(payload)


def parse_users_response(payload: Any) -> list[User]:
    """Extract users from a GraphQL response body.

    Args:
        payload: Decoded JSON response.

    Returns:
        Validated User records.

    Raises:
        RemoteFetchError: If the response carries errors or has no users list.
    """
    if not isinstance(payload, dict):
        raise RemoteFetchError("Unexpected response from user directory")

    errors = payload.get("errors")
    if errors:
        messages = "; ".join(
            str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in errors
        )
        raise RemoteFetchError(f"User directory query failed: {messages}")

    data = payload.get("data")
    records = data.get("users_v1") if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise RemoteFetchError("User directory response has no users_v1 list")

    try:
        users = [User.model_validate(record) for record in records]
    except ValidationError as e:
        raise RemoteFetchError(f"Invalid user record: {e}") from e

    logger.debug("Fetched %d user(s)", len(users))
    return users
