"""Diagram rasterization and image sizing."""

from diagrams.imaging import fit_within, read_image_size
from diagrams.rasterizer import DiagramRasterizer, DisabledRasterizer, MermaidCliRasterizer
from diagrams.resolve import resolve_diagrams

__all__ = [
    "DiagramRasterizer",
    "DisabledRasterizer",
    "MermaidCliRasterizer",
    "fit_within",
    "read_image_size",
    "resolve_diagrams",
]
