"""Errors raised by reflection client transports."""

from __future__ import annotations


class OrbitClientError(Exception):
    """Base class for failures surfaced by the reflection client."""

    def __init__(self, message: str, *, status_code: int | None = None, detail=None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ValidationError(OrbitClientError):
    """Input was missing or malformed (including an inverted date range)."""


class NotFoundError(OrbitClientError):
    """The reflection id does not resolve for this owner."""


class TransportError(OrbitClientError):
    """The remote call could not complete: network failure, auth rejection, server error."""
