"""Document-level parse result contracts."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.internal.blocks import Block, Table


class CoverInfo(BaseModel):
    title: str = ""
    subtitle: str = ""
    version: str = ""
    author: str = ""
    organization: str = ""
    date: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)


class DocumentStructure(BaseModel):
    """Cover metadata, front matter and body blocks of one source document."""

    cover: CoverInfo = Field(default_factory=CoverInfo)
    toc_lines: List[str] = Field(default_factory=list)
    revision_history: Optional[Table] = None
    blocks: List[Block] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


__all__ = ["CoverInfo", "DocumentStructure"]
