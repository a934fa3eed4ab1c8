"""Transports carrying reflection procedure calls to the Orbit service.

A transport turns a named procedure (``reflection.create``, ...) and its
payload into a remote call and returns the decoded JSON result. Failures are
raised as :mod:`orbit.client.errors` exceptions; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from orbit.client.errors import NotFoundError, OrbitClientError, TransportError, ValidationError
from orbit.config import ClientSettings

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def call(self, procedure: str, payload: dict[str, Any] | None = None) -> Any: ...

    async def close(self) -> None: ...


@dataclass(frozen=True, slots=True)
class _Route:
    method: str
    path: str  # "{id}" is filled from the payload's "id"
    as_query: bool = False
    as_body: bool = False


_ROUTES: dict[str, _Route] = {
    "reflection.getAll": _Route("GET", "/api/reflections"),
    "reflection.getById": _Route("GET", "/api/reflections/{id}"),
    "reflection.getByDateRange": _Route("GET", "/api/reflections/range", as_query=True),
    "reflection.getMoodTrends": _Route("GET", "/api/reflections/mood-trends", as_query=True),
    "reflection.create": _Route("POST", "/api/reflections", as_body=True),
    "reflection.update": _Route("PATCH", "/api/reflections/{id}", as_body=True),
    "reflection.delete": _Route("DELETE", "/api/reflections/{id}"),
}


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _error_for(procedure: str, response: httpx.Response) -> OrbitClientError:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = response.text or None

    status = response.status_code
    message = f"{procedure} failed with HTTP {status}"
    if isinstance(detail, str):
        message = f"{message}: {detail}"

    if status in (400, 422):
        return ValidationError(message, status_code=status, detail=detail)
    if status == 404:
        return NotFoundError(message, status_code=status, detail=detail)
    return TransportError(message, status_code=status, detail=detail)


class HttpTransport:
    """Maps reflection procedures onto the service's HTTP routes via httpx."""

    def __init__(
        self,
        base_url: str = "",
        token: str = "",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> HttpTransport:
        return cls(
            base_url=settings.api_url,
            token=settings.api_token,
            timeout=settings.request_timeout,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def call(self, procedure: str, payload: dict[str, Any] | None = None) -> Any:
        route = _ROUTES.get(procedure)
        if route is None:
            raise ValueError(f"Unknown procedure: {procedure!r}")

        args = dict(payload or {})
        path = route.path
        if "{id}" in path:
            if "id" not in args:
                raise ValueError(f"{procedure} requires an id")
            path = path.replace("{id}", quote(str(args.pop("id")), safe=""))

        kwargs: dict[str, Any] = {}
        if route.as_query:
            kwargs["params"] = {k: _encode(v) for k, v in args.items()}
        if route.as_body:
            kwargs["json"] = {k: _encode(v) for k, v in args.items()}

        try:
            response = await self._client.request(
                route.method,
                f"{self._base_url}{path}",
                headers=self._headers(),
                **kwargs,
            )
        except httpx.HTTPError as exc:
            logger.warning("%s could not reach the Orbit service: %s", procedure, exc)
            raise TransportError(f"{procedure} failed: {exc}") from exc

        if not response.is_success:
            raise _error_for(procedure, response)

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"{procedure} returned a non-JSON response",
                status_code=response.status_code,
            ) from exc

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
