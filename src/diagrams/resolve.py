"""Replace Mermaid code blocks with rendered images."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from diagrams.rasterizer import DiagramRasterizer
from schemas.internal.blocks import Block, CodeBlock, ImageBlock

logger = logging.getLogger(__name__)


def resolve_diagrams(
    blocks: Iterable[Block],
    rasterizer: DiagramRasterizer,
    cache_dir: Path,
) -> list[Block]:
    """Return ``blocks`` with each renderable diagram swapped for an image.

    A diagram whose rendering fails stays a literal ``CodeBlock`` so the
    renderer prints its source in monospace.
    """
    resolved: list[Block] = []
    rendered = failed = 0
    for block in blocks:
        if isinstance(block, CodeBlock) and block.is_diagram and block.text.strip():
            path = rasterizer.rasterize(block.text, cache_dir)
            if path is None:
                failed += 1
                resolved.append(block)
                continue
            rendered += 1
            resolved.append(
                ImageBlock(path=str(path), image_kind="diagram", source=block.text)
            )
            continue
        resolved.append(block)
    if rendered or failed:
        logger.info("Diagrams rendered: %s, kept as source: %s", rendered, failed)
    return resolved


__all__ = ["resolve_diagrams"]
