"""Parsed Markdown block contracts."""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ImageKind = Literal["diagram", "figure"]


class InlineRun(BaseModel):
    text: str
    bold: bool = False
    monospace: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)


class Heading(BaseModel):
    kind: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=5)
    text: str
    page_break_before: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)


class Paragraph(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    runs: List[InlineRun] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


class Table(BaseModel):
    kind: Literal["table"] = "table"
    headers: List[str]
    rows: List[List[str]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class CodeBlock(BaseModel):
    kind: Literal["code"] = "code"
    language: Optional[str] = None
    text: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def is_diagram(self) -> bool:
        return self.language == "mermaid"


class RequirementRecord(BaseModel):
    """Structured requirement block keyed by canonical field names.

    ``fields`` keeps authoring order. ``labels`` maps each key in ``fields`` to
    the label text used in the source document.
    """

    kind: Literal["requirement"] = "requirement"
    id: str
    name: str = ""
    fields: Dict[str, str] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)
    acceptance_criteria: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class ImageBlock(BaseModel):
    kind: Literal["image"] = "image"
    path: str
    alt: str = ""
    image_kind: ImageKind = "figure"
    source: Optional[str] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class PageBreak(BaseModel):
    kind: Literal["page_break"] = "page_break"

    model_config = ConfigDict(extra="forbid", frozen=True)


Block = Annotated[
    Union[Heading, Paragraph, Table, CodeBlock, RequirementRecord, ImageBlock, PageBreak],
    Field(discriminator="kind"),
]


__all__ = [
    "Block",
    "CodeBlock",
    "Heading",
    "ImageBlock",
    "ImageKind",
    "InlineRun",
    "PageBreak",
    "Paragraph",
    "RequirementRecord",
    "Table",
]
