"""Service-layer helpers for input/output handling."""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


@contextmanager
def temp_output(target: Path) -> Iterator[Path]:
    """Yield a temporary path beside ``target``; it is removed unless moved away."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(
        prefix=f".{target.stem}.", suffix=target.suffix or ".tmp", dir=target.parent
    )
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass


def atomic_write_bytes(target: Path, data: bytes) -> None:
    """Write ``data`` to ``target`` so readers never observe a partial file."""
    with temp_output(target) as tmp_path:
        tmp_path.write_bytes(data)
        os.replace(tmp_path, target)


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig")


__all__ = ["atomic_write_bytes", "read_text", "temp_output"]
