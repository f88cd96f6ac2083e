from __future__ import annotations

import json
import subprocess
from pathlib import Path

from diagrams import rasterizer as rasterizer_module
from diagrams.rasterizer import (
    CONFIG_FILE_NAME,
    DisabledRasterizer,
    MermaidCliRasterizer,
    render_width,
)
from diagrams.resolve import resolve_diagrams
from schemas.internal.blocks import CodeBlock, ImageBlock, Paragraph

SOURCE = "flowchart TD\n  A --> B"


class _FakeRun:
    def __init__(self, *, returncode: int = 0, write_output: bool = True, exc: Exception | None = None):
        self.returncode = returncode
        self.write_output = write_output
        self.exc = exc
        self.commands: list[list[str]] = []

    def __call__(self, cmd, **kwargs):
        self.commands.append(list(cmd))
        if self.exc is not None:
            raise self.exc
        if self.write_output:
            output = Path(cmd[cmd.index("-o") + 1])
            output.write_bytes(b"\x89PNG fake")
        return subprocess.CompletedProcess(cmd, self.returncode, stdout="", stderr="boom")


def test_render_width() -> None:
    assert render_width("block-beta\n  columns 1") == 500
    assert render_width(SOURCE) == 1200
    assert render_width("") == 1200


def test_rasterize_invokes_cli_once_and_caches(tmp_path: Path, monkeypatch) -> None:
    fake = _FakeRun()
    monkeypatch.setattr(rasterizer_module.subprocess, "run", fake)
    rasterizer = MermaidCliRasterizer("mmdc", scale=2, background="white")

    first = rasterizer.rasterize(SOURCE, tmp_path)
    second = rasterizer.rasterize(SOURCE, tmp_path)

    assert first is not None
    assert first == second
    assert len(fake.commands) == 1
    cmd = fake.commands[0]
    assert cmd[0] == "mmdc"
    assert cmd[cmd.index("-w") + 1] == "1200"
    assert cmd[cmd.index("-s") + 1] == "2"
    assert cmd[cmd.index("-b") + 1] == "white"
    config = json.loads((tmp_path / CONFIG_FILE_NAME).read_text(encoding="utf-8"))
    assert config["flowchart"]["htmlLabels"] is False


def test_cache_path_depends_on_source_and_options(tmp_path: Path) -> None:
    rasterizer = MermaidCliRasterizer()

    path = rasterizer.cache_path(SOURCE, tmp_path)

    assert path.name.startswith("mermaid-")
    assert path.suffix == ".png"
    assert path == rasterizer.cache_path(SOURCE, tmp_path)
    assert path != rasterizer.cache_path(SOURCE + "\n  B --> C", tmp_path)
    assert path != MermaidCliRasterizer(scale=3).cache_path(SOURCE, tmp_path)


def test_cli_command_may_carry_arguments(tmp_path: Path, monkeypatch) -> None:
    fake = _FakeRun()
    monkeypatch.setattr(rasterizer_module.subprocess, "run", fake)

    MermaidCliRasterizer("npx -y @mermaid-js/mermaid-cli").rasterize(SOURCE, tmp_path)

    assert fake.commands[0][:3] == ["npx", "-y", "@mermaid-js/mermaid-cli"]


def test_nonzero_exit_returns_none_and_discards_output(tmp_path: Path, monkeypatch) -> None:
    fake = _FakeRun(returncode=1)
    monkeypatch.setattr(rasterizer_module.subprocess, "run", fake)
    rasterizer = MermaidCliRasterizer()

    assert rasterizer.rasterize(SOURCE, tmp_path) is None
    assert not rasterizer.cache_path(SOURCE, tmp_path).exists()


def test_missing_cli_returns_none(tmp_path: Path, monkeypatch) -> None:
    fake = _FakeRun(exc=FileNotFoundError("mmdc"))
    monkeypatch.setattr(rasterizer_module.subprocess, "run", fake)

    assert MermaidCliRasterizer().rasterize(SOURCE, tmp_path) is None


def test_timeout_returns_none(tmp_path: Path, monkeypatch) -> None:
    fake = _FakeRun(exc=subprocess.TimeoutExpired("mmdc", 1))
    monkeypatch.setattr(rasterizer_module.subprocess, "run", fake)

    assert MermaidCliRasterizer(timeout=1).rasterize(SOURCE, tmp_path) is None


def test_no_output_file_returns_none(tmp_path: Path, monkeypatch) -> None:
    fake = _FakeRun(write_output=False)
    monkeypatch.setattr(rasterizer_module.subprocess, "run", fake)

    assert MermaidCliRasterizer().rasterize(SOURCE, tmp_path) is None


def test_unwritable_cache_dir_returns_none(tmp_path: Path, monkeypatch) -> None:
    fake = _FakeRun()
    monkeypatch.setattr(rasterizer_module.subprocess, "run", fake)
    blocker = tmp_path / "cache"
    blocker.write_text("not a directory", encoding="utf-8")
    blocks = [CodeBlock(language="mermaid", text=SOURCE)]

    assert MermaidCliRasterizer().rasterize(SOURCE, blocker) is None
    assert resolve_diagrams(blocks, MermaidCliRasterizer(), blocker) == blocks
    assert fake.commands == []


def test_resolve_diagrams_swaps_rendered_blocks(tmp_path: Path, fake_rasterizer) -> None:
    blocks = [
        Paragraph(),
        CodeBlock(language="mermaid", text=SOURCE),
        CodeBlock(language="python", text="print(1)"),
        CodeBlock(language="mermaid", text="   "),
    ]

    resolved = resolve_diagrams(blocks, fake_rasterizer, tmp_path)

    assert fake_rasterizer.calls == [SOURCE]
    image = resolved[1]
    assert isinstance(image, ImageBlock)
    assert image.image_kind == "diagram"
    assert image.source == SOURCE
    assert Path(image.path).is_file()
    assert resolved[0] is blocks[0]
    assert resolved[2] is blocks[2]
    assert resolved[3] is blocks[3]


def test_resolve_diagrams_keeps_source_on_failure(tmp_path: Path, failing_rasterizer) -> None:
    blocks = [CodeBlock(language="mermaid", text=SOURCE)]

    assert resolve_diagrams(blocks, failing_rasterizer, tmp_path) == blocks
    assert resolve_diagrams(blocks, DisabledRasterizer(), tmp_path) == blocks
