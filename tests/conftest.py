# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from core.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    # 避免本地 .env 或上一个用例的缓存影响结果
    monkeypatch.delenv("MERMAID_CLI", raising=False)
    monkeypatch.delenv("KEEP_DIAGRAM_CACHE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_png(tmp_path: Path) -> Callable[..., Path]:
    def _make(name: str = "image.png", size: tuple[int, int] = (100, 50)) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color=(33, 150, 243)).save(path, format="PNG")
        return path

    return _make


class FakeRasterizer:
    """Records calls; renders a PNG unless told to fail."""

    def __init__(self, *, fail: bool = False, size: tuple[int, int] = (800, 400)) -> None:
        self.fail = fail
        self.size = size
        self.calls: list[str] = []

    def rasterize(self, source: str, cache_dir: Path) -> Path | None:
        self.calls.append(source)
        if self.fail:
            return None
        cache_dir.mkdir(parents=True, exist_ok=True)
        path = cache_dir / f"fake-{len(self.calls)}.png"
        Image.new("RGB", self.size, color="white").save(path, format="PNG")
        return path


@pytest.fixture
def fake_rasterizer() -> FakeRasterizer:
    return FakeRasterizer()


@pytest.fixture
def failing_rasterizer() -> FakeRasterizer:
    return FakeRasterizer(fail=True)
