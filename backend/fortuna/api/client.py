"""Minimal async wrapper around the Fortuna goals REST API."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote

import httpx

# Supplies the bearer token for every request. May return an empty string;
# the API decides what an anonymous caller is allowed to do.
TokenProvider = Callable[[], str]


class FortunaError(Exception):
    """Base exception for Fortuna API client errors."""


class FortunaRequestError(FortunaError):
    """Raised on transport failures and non-success HTTP statuses."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.body = message

    @property
    def payload_message(self) -> str | None:
        """Return the `message` field of a JSON error body, if there is one."""
        try:
            data = json.loads(self.body)
        except ValueError:
            return None

        if not isinstance(data, dict):
            return None
        message = data.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
        return None


class FortunaResponseError(FortunaError):
    """Raised when a success response body cannot be parsed."""


def static_token(token: str | None) -> TokenProvider:
    """Wrap a fixed token (e.g. one taken from an incoming request) as a provider."""
    value = token or ""
    return lambda: value


class FortunaClient:
    """Thin client for the goal endpoints under `/api`."""

    def __init__(
        self,
        *,
        base_url: str,
        token_provider: TokenProvider,
        timeout_seconds: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def get_goal(self, goal_id: str) -> Any:
        """`GET /api/goals/{id}`; the body is an array holding the goal."""
        response = await self._request("GET", self._goal_path("/api/goals", goal_id))
        return self._parse_json(response)

    async def delete_goal(self, goal_id: str) -> None:
        await self._request("DELETE", self._goal_path("/api/goals", goal_id))

    async def finalize_goal(self, goal_id: str) -> None:
        await self._request("POST", self._goal_path("/api/goals/finalize", goal_id))

    async def reopen_goal(self, goal_id: str) -> None:
        await self._request("POST", self._goal_path("/api/goals/reopen", goal_id))

    async def define_goal(self, draft: Mapping[str, Any]) -> Any:
        """Ask the plan generator to enrich a draft goal."""
        response = await self._request("POST", "/api/gemini/define", json_body=dict(draft))
        return self._parse_json(response)

    async def create_goal(self, payload: Mapping[str, Any]) -> Any:
        response = await self._request("POST", "/api/goals", json_body=dict(payload))
        return self._parse_json(response)

    def _headers(self) -> dict[str, str]:
        token = self.token_provider() or ""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    def _goal_path(self, prefix: str, goal_id: str) -> str:
        if not isinstance(goal_id, str) or not goal_id.strip():
            raise ValueError("goal_id must be a non-empty string")
        return f"{prefix}/{quote(goal_id.strip(), safe='')}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self.transport,
            ) as client:
                response = await client.request(
                    method,
                    url,
                    headers=self._headers(),
                    json=json_body,
                )
        except httpx.RequestError as exc:
            raise FortunaRequestError(503, f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise FortunaRequestError(response.status_code, response.text)

        return response

    def _parse_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise FortunaResponseError("Invalid JSON from Fortuna API") from exc
