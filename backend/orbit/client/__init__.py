from __future__ import annotations

from orbit.client.cache import QueryCache
from orbit.client.errors import NotFoundError, OrbitClientError, TransportError, ValidationError
from orbit.client.reflections import ReflectionClient
from orbit.client.transport import HttpTransport, Transport

__all__ = [
    "HttpTransport",
    "NotFoundError",
    "OrbitClientError",
    "QueryCache",
    "ReflectionClient",
    "Transport",
    "TransportError",
    "ValidationError",
]
