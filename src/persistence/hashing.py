"""Hashing helpers for content-addressed cache keys."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Mapping


def sha256_bytes(data: bytes) -> str:
    """Return hex sha256 of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def sha256_text(text: str) -> str:
    return sha256_bytes(text.encode("utf-8"))


def stable_json_dumps(payload: object) -> str:
    """Dump JSON with stable ordering for hashing."""
    return json.dumps(
        payload,
        ensure_ascii=True,
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )


def hash_payload(payload: object) -> str:
    """Return sha256 hash of a JSON-serializable payload."""
    return sha256_bytes(stable_json_dumps(payload).encode("utf-8"))


def diagram_cache_key(
    source: str,
    render_config: Mapping[str, Any] | None = None,
    *,
    length: int = 16,
) -> str:
    """Key a diagram by its source text and the options it is rendered with."""
    if not render_config:
        return sha256_text(source)[:length]
    payload = {"source": source, "render": dict(render_config)}
    return hash_payload(payload)[:length]


__all__ = [
    "diagram_cache_key",
    "hash_payload",
    "sha256_bytes",
    "sha256_text",
    "stable_json_dumps",
]
