"""Markdown to DOCX conversion service (single file and directory sweep)."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.config import Settings, get_settings
from diagrams.rasterizer import DiagramRasterizer, MermaidCliRasterizer
from diagrams.resolve import resolve_diagrams
from parsing.structure import parse_document
from reporting import render_document
from reporting.schemas import RenderOptions
from schemas.internal.blocks import CodeBlock, ImageBlock
from services.io import atomic_write_bytes, read_text

logger = logging.getLogger(__name__)

BatchStatus = Literal["converted", "skipped", "failed"]


class ConversionError(Exception):
    """Raised when a single document cannot be converted."""


class ConversionResult(BaseModel):
    input_path: str
    output_path: str
    block_count: int = 0
    diagrams_rendered: int = 0
    diagrams_as_source: int = 0

    model_config = ConfigDict(extra="forbid")


class BatchItemResult(BaseModel):
    relative_path: str
    status: BatchStatus
    output_path: Optional[str] = None
    error: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class BatchSummary(BaseModel):
    input_dir: str
    items: List[BatchItemResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def counts(self) -> dict[str, int]:
        counts = {"converted": 0, "skipped": 0, "failed": 0}
        for item in self.items:
            counts[item.status] += 1
        return counts


def default_output_path(input_path: Path) -> Path:
    return input_path.with_suffix(".docx")


def convert_file(
    input_path: str | Path,
    output_path: str | Path | None = None,
    *,
    settings: Settings | None = None,
    rasterizer: DiagramRasterizer | None = None,
    keep_cache: bool | None = None,
) -> ConversionResult:
    """Convert one Markdown file; the output file is written atomically."""
    settings = settings or get_settings()
    source = Path(input_path)
    if not source.is_file():
        raise ConversionError(f"Input file not found: {source}")
    target = Path(output_path) if output_path else default_output_path(source)

    try:
        text = read_text(source)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConversionError(f"Cannot read {source}: {exc}") from exc

    logger.info("Converting %s -> %s", source, target)
    structure = parse_document(text)

    cache_dir = target.parent / settings.diagram_cache_dirname
    rasterizer = rasterizer or MermaidCliRasterizer.from_settings(settings)
    blocks = resolve_diagrams(structure.blocks, rasterizer, cache_dir)
    structure = structure.model_copy(update={"blocks": blocks})

    data = render_document(
        structure,
        target.stem,
        options=RenderOptions.from_settings(settings),
        base_dir=source.parent,
    )
    atomic_write_bytes(target, data)

    keep = settings.keep_diagram_cache if keep_cache is None else keep_cache
    if not keep:
        remove_cache_dir(cache_dir)

    logger.info("Wrote %s (%s bytes)", target, len(data))
    return ConversionResult(
        input_path=str(source),
        output_path=str(target),
        block_count=len(blocks),
        diagrams_rendered=sum(
            1 for b in blocks if isinstance(b, ImageBlock) and b.image_kind == "diagram"
        ),
        diagrams_as_source=sum(1 for b in blocks if isinstance(b, CodeBlock) and b.is_diagram),
    )


def remove_cache_dir(cache_dir: Path) -> None:
    if cache_dir.is_dir():
        shutil.rmtree(cache_dir, ignore_errors=True)
        logger.debug("Removed diagram cache %s", cache_dir)


def discover_markdown(input_dir: Path) -> list[Path]:
    files = [
        path
        for path in input_dir.rglob("*")
        if path.is_file() and path.suffix.lower() == ".md"
    ]
    files.sort(key=lambda path: path.relative_to(input_dir).as_posix())
    return files


def is_up_to_date(source: Path, output: Path) -> bool:
    """True when ``output`` exists and is not older than ``source``."""
    if not output.is_file():
        return False
    return output.stat().st_mtime >= source.stat().st_mtime


def convert_directory(
    input_dir: str | Path,
    output_dir: str | Path | None = None,
    *,
    force: bool = False,
    settings: Settings | None = None,
    rasterizer: DiagramRasterizer | None = None,
) -> BatchSummary:
    """Convert every Markdown file under ``input_dir``.

    Each file is an independent unit: a failure is recorded and the sweep
    continues. Files whose output is newer than the source are skipped
    unless ``force`` is set.
    """
    settings = settings or get_settings()
    root = Path(input_dir)
    if not root.is_dir():
        raise ConversionError(f"Input directory not found: {root}")
    out_root = Path(output_dir) if output_dir else None

    summary = BatchSummary(input_dir=str(root))
    for source in discover_markdown(root):
        relative = source.relative_to(root)
        target = (
            out_root / relative.with_suffix(".docx")
            if out_root is not None
            else default_output_path(source)
        )
        rel_text = relative.as_posix()
        if not force and is_up_to_date(source, target):
            logger.info("Skipping up-to-date %s", rel_text)
            summary.items.append(
                BatchItemResult(relative_path=rel_text, status="skipped", output_path=str(target))
            )
            continue
        try:
            convert_file(source, target, settings=settings, rasterizer=rasterizer)
        except Exception as exc:
            logger.warning("Conversion failed for %s: %s", rel_text, exc)
            summary.items.append(
                BatchItemResult(
                    relative_path=rel_text,
                    status="failed",
                    output_path=str(target),
                    error=_format_error(exc),
                )
            )
            continue
        summary.items.append(
            BatchItemResult(relative_path=rel_text, status="converted", output_path=str(target))
        )
    return summary


def _format_error(exc: Exception) -> str:
    return f"{type(exc).__name__}: {exc}"


__all__ = [
    "BatchItemResult",
    "BatchSummary",
    "ConversionError",
    "ConversionResult",
    "convert_directory",
    "convert_file",
    "default_output_path",
    "discover_markdown",
    "is_up_to_date",
    "remove_cache_dir",
]
