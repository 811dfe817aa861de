"""Cache key fingerprints for generation requests.

A key is ``"{version}:{content type}:{tier}:{short field hint}:{digest}"``.
The digest covers every non-empty field, so the readable hint may be lossy.
Bumping ``SCHEMA_VERSION`` makes every earlier key unreachable; the old
entries are left to expire through their TTL.
"""

import hashlib
import re
from typing import Any

from generation_pipeline.config import settings
from generation_pipeline.entities import ContentType, GenerationRequest

SCHEMA_VERSION = "v4"

# Long-form fields are hashed, never embedded in the key.
FREE_TEXT_FIELDS = frozenset(
    {"description", "job_description", "resume_text", "additional_notes", "role_description"}
)
FREE_TEXT_PREFIX_CHARS = 2000
SHORT_FIELD_MAX_CHARS = 64

_WHITESPACE = re.compile(r"\s+")
_KEY_UNSAFE = re.compile(r"[^a-z0-9_.,=|+-]")
# Joins list items; whitespace normalization removes it from scalar values.
_ITEM_SEPARATOR = "\x1f"


def _normalize_text(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip().lower()


def _normalize_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(item for item in (_normalize_value(v) for v in value) if item)
        return _ITEM_SEPARATOR.join(items)
    return _normalize_text(str(value))


def _key_safe(value: str) -> str:
    hint = value.replace(_ITEM_SEPARATOR, "+").replace(" ", "_")
    return _KEY_UNSAFE.sub("_", hint)[:SHORT_FIELD_MAX_CHARS]


def build_key(request: GenerationRequest) -> str:
    """Build the deterministic, versioned cache key for a request.

    Semantically identical requests (same fields after normalization) map to
    the same key. The premium flag is part of the key. Short fields also
    appear in a readable hint, but only the digest decides identity.
    """
    hints = []
    digest = hashlib.sha256()

    for name in sorted(request.fields):
        value = _normalize_value(request.fields[name])
        if not value:
            continue
        if name in FREE_TEXT_FIELDS:
            value = value[:FREE_TEXT_PREFIX_CHARS]
        else:
            hints.append(f"{name}={_key_safe(value)}")
        encoded = value.encode("utf-8")
        digest.update(f"{name}:{len(encoded)}:".encode("utf-8") + encoded)

    tier = "premium" if request.premium else "free"
    return ":".join(
        [
            SCHEMA_VERSION,
            request.content_type.value,
            tier,
            "|".join(hints),
            digest.hexdigest()[:16],
        ]
    )


def namespace_for(content_type: ContentType, prefix: str | None = None) -> str:
    """Return the fixed cache namespace for a content-type family."""
    return f"{prefix or settings.cache_namespace_prefix}:{content_type.value}"
