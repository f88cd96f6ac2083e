from __future__ import annotations

from pathlib import Path

import pytest

from diagrams.imaging import DEFAULT_SIZE, fit_within, pixels_to_emu, read_image_size


def test_read_image_size(make_png) -> None:
    path = make_png("diagram.png", (640, 480))

    assert read_image_size(path) == (640, 480)


def test_read_image_size_unreadable(tmp_path: Path) -> None:
    bogus = tmp_path / "not-an-image.png"
    bogus.write_bytes(b"definitely not a png")

    assert read_image_size(bogus) is None
    assert read_image_size(tmp_path / "missing.png") is None


def test_small_images_are_unchanged() -> None:
    assert fit_within(200, 100, 550, 600) == (200, 100)


@pytest.mark.parametrize(
    ("size", "box"),
    [
        ((1200, 600), (550, 600)),
        ((600, 2400), (550, 600)),
        ((3000, 2900), (500, 650)),
        ((1000, 1000), (550, 600)),
    ],
)
def test_fit_within_keeps_aspect_ratio(size, box) -> None:
    width, height = fit_within(*size, *box)

    assert width <= box[0]
    assert height <= box[1]
    assert abs(width / height - size[0] / size[1]) < 0.01


def test_width_clamp_then_height_clamp() -> None:
    assert fit_within(1100, 2400, 550, 600) == (275, 600)


def test_non_positive_size_uses_default() -> None:
    assert fit_within(0, 0, 1000, 1000) == DEFAULT_SIZE


def test_pixels_to_emu() -> None:
    assert pixels_to_emu(2) == 19050
