"""Mermaid CLI adapter with a content-addressed PNG cache."""

from __future__ import annotations

import json
import logging
import shlex
import subprocess
from pathlib import Path
from typing import Any, Protocol

from core.config import Settings
from persistence.hashing import diagram_cache_key

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "mermaid-config.json"
WIDE_RENDER_WIDTH = 1200
WIREFRAME_RENDER_WIDTH = 500

MERMAID_CONFIG: dict[str, Any] = {
    "theme": "base",
    "themeVariables": {
        "primaryColor": "#2196F3",
        "primaryTextColor": "#ffffff",
        "primaryBorderColor": "#1976D2",
        "lineColor": "#757575",
        "secondaryColor": "#FFC107",
        "secondaryTextColor": "#5D4037",
        "tertiaryColor": "#FFF9C4",
        "tertiaryTextColor": "#5D4037",
        "nodeBorder": "#1976D2",
        "clusterBkg": "#E3F2FD",
        "clusterBorder": "#90CAF9",
        "defaultLinkColor": "#757575",
        "titleColor": "#5D4037",
        "edgeLabelBackground": "transparent",
        "textColor": "#1565C0",
        "classText": "#1565C0",
    },
    # Word cannot display foreignObject text, so labels must be plain SVG text.
    "flowchart": {"htmlLabels": False, "useMaxWidth": True},
    "class": {"htmlLabels": False, "useMaxWidth": True},
    "state": {"htmlLabels": False, "useMaxWidth": True},
    "sequence": {"useMaxWidth": True},
    "gantt": {"useMaxWidth": True},
    "er": {"useMaxWidth": True},
    "pie": {"useMaxWidth": True},
    "journey": {"useMaxWidth": True},
}


class DiagramRasterizer(Protocol):
    def rasterize(self, source: str, cache_dir: Path) -> Path | None:
        """Return the PNG path for ``source``, or ``None`` when rendering failed."""
        ...


def render_width(source: str) -> int:
    """Block wireframes render narrow; everything else renders wide."""
    first_line = source.strip().splitlines()[0] if source.strip() else ""
    if "block-beta" in first_line:
        return WIREFRAME_RENDER_WIDTH
    return WIDE_RENDER_WIDTH


class MermaidCliRasterizer:
    """Render Mermaid source through ``mmdc``.

    Output files are named after a hash of the diagram source and render
    options, so a second call with the same source finds the PNG on disk and
    never starts the external tool again. Failures are logged and reported as
    ``None``; nothing is raised to the caller.
    """

    def __init__(
        self,
        cli: str = "mmdc",
        *,
        timeout: float = 60.0,
        scale: int = 2,
        background: str = "white",
    ) -> None:
        self.cli = cli
        self.timeout = timeout
        self.scale = scale
        self.background = background

    @classmethod
    def from_settings(cls, settings: Settings) -> "MermaidCliRasterizer":
        return cls(
            settings.mermaid_cli,
            timeout=settings.mermaid_timeout,
            scale=settings.mermaid_scale,
            background=settings.mermaid_background,
        )

    def cache_path(self, source: str, cache_dir: Path) -> Path:
        key = diagram_cache_key(
            source,
            {
                "width": render_width(source),
                "scale": self.scale,
                "background": self.background,
            },
        )
        return Path(cache_dir) / f"mermaid-{key}.png"

    def rasterize(self, source: str, cache_dir: Path) -> Path | None:
        output = self.cache_path(source, cache_dir)
        if output.is_file() and output.stat().st_size > 0:
            logger.debug("Diagram cache hit: %s", output.name)
            return output

        source_path = output.with_suffix(".mmd")
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            source_path.write_text(source, encoding="utf-8")
            config_path = _write_config(output.parent)
        except OSError as exc:
            logger.warning("Diagram cache not writable (%s): %s", output.parent, exc)
            return None

        cmd = [
            *shlex.split(self.cli),
            "-i",
            str(source_path),
            "-o",
            str(output),
            "-c",
            str(config_path),
            "-b",
            self.background,
            "-w",
            str(render_width(source)),
            "-s",
            str(self.scale),
        ]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Mermaid render timed out after %ss", self.timeout)
            _discard(output)
            return None
        except OSError as exc:
            logger.warning("Mermaid CLI unavailable (%s): %s", self.cli, exc)
            return None

        if result.returncode != 0:
            logger.warning(
                "Mermaid render failed (exit %s): %s",
                result.returncode,
                (result.stderr or "").strip()[:500],
            )
            _discard(output)
            return None
        if not output.is_file():
            logger.warning("Mermaid CLI produced no output: %s", output)
            return None
        return output


class DisabledRasterizer:
    """Rasterizer that always declines, leaving diagrams as source text."""

    def rasterize(self, source: str, cache_dir: Path) -> Path | None:
        return None


def _write_config(cache_dir: Path) -> Path:
    path = cache_dir / CONFIG_FILE_NAME
    if not path.exists():
        path.write_text(json.dumps(MERMAID_CONFIG, indent=2), encoding="utf-8")
    return path


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


__all__ = [
    "DiagramRasterizer",
    "DisabledRasterizer",
    "MERMAID_CONFIG",
    "MermaidCliRasterizer",
    "render_width",
]
