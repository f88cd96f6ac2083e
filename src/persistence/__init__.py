"""Content hashing for on-disk caches."""

from persistence.hashing import diagram_cache_key, sha256_bytes, sha256_text

__all__ = ["diagram_cache_key", "sha256_bytes", "sha256_text"]
