"""Stable hashing of JSON-like values for cache keys."""

import json
from typing import Any

from pydantic import BaseModel


def json_default(value: Any) -> Any:
    """``json.dumps`` fallback: models as their JSON dump, sets sorted."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    return str(value)


def stable_hash(value: Any) -> str:
    """Serialize ``value`` so equal structures produce equal keys.

    Object keys are sorted at every depth; arrays keep their order. Primitives
    hash to their JSON text (``stable_hash("test") == '"test"'``).
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=json_default)
