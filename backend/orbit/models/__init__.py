from __future__ import annotations

from orbit.models.reflection import Reflection  # noqa: F401
