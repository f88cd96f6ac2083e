from persistence.hashing import (
    diagram_cache_key,
    hash_payload,
    sha256_bytes,
    sha256_text,
)


def test_hash_payload_stable_order() -> None:
    payload_a = {"b": 1, "a": 2}
    payload_b = {"a": 2, "b": 1}
    assert hash_payload(payload_a) == hash_payload(payload_b)


def test_sha256_text_matches_utf8_bytes() -> None:
    assert sha256_text("example") == sha256_bytes(b"example")


def test_diagram_cache_keys_are_deterministic() -> None:
    key = diagram_cache_key("graph TD\nA-->B", {"width": 1200, "scale": 2})

    assert len(key) == 16
    assert key == diagram_cache_key("graph TD\nA-->B", {"scale": 2, "width": 1200})
    assert key != diagram_cache_key("graph TD\nA-->C", {"width": 1200, "scale": 2})
    assert key != diagram_cache_key("graph TD\nA-->B", {"width": 500, "scale": 2})
    assert diagram_cache_key("graph TD") == sha256_text("graph TD")[:16]
