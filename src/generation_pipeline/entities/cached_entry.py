"""Cached entry domain entity."""

import json
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class CachedEntry:
    """Domain entity for a cached generation result.

    Attributes:
        payload: The validated structured content
        cached_at: Unix timestamp of when the entry was written
        ttl_seconds: Time-to-live the entry was written with
        is_fallback: Whether the payload came from the fallback generator
    """

    payload: dict[str, Any]
    cached_at: float
    ttl_seconds: int
    is_fallback: bool = False

    def to_json(self) -> str:
        return json.dumps(asdict(self), separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: str | bytes) -> "CachedEntry":
        data = json.loads(raw)
        return cls(
            payload=data["payload"],
            cached_at=float(data["cached_at"]),
            ttl_seconds=int(data["ttl_seconds"]),
            is_fallback=bool(data.get("is_fallback", False)),
        )
