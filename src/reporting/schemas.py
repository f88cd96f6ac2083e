"""Render configuration for the DOCX writer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.config import Settings


class FontOptions(BaseModel):
    latin: str = "Arial"
    cjk: str = "微軟正黑體"
    code: str = "Consolas"

    model_config = ConfigDict(extra="forbid")


class RenderOptions(BaseModel):
    """Layout settings for one rendered document.

    Widths are in twips (1/1440 inch); image boxes are in pixels.
    """

    fonts: FontOptions = Field(default_factory=FontOptions)
    page_content_width: int = Field(default=9360, gt=0)
    page_margin: int = Field(default=1440, ge=0)
    diagram_max_width: int = Field(default=550, gt=0)
    diagram_max_height: int = Field(default=600, gt=0)
    figure_max_width: int = Field(default=500, gt=0)
    figure_max_height: int = Field(default=650, gt=0)
    requirement_label_width: int = Field(default=2200, gt=0)
    update_fields_on_open: bool = True

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _validate_requirement_columns(self) -> "RenderOptions":
        if self.requirement_label_width >= self.page_content_width:
            raise ValueError("requirement_label_width must be narrower than page_content_width")
        return self

    @property
    def requirement_value_width(self) -> int:
        return self.page_content_width - self.requirement_label_width

    @classmethod
    def from_settings(cls, settings: Settings) -> "RenderOptions":
        return cls(
            fonts=FontOptions(
                latin=settings.font_latin,
                cjk=settings.font_cjk,
                code=settings.font_code,
            ),
            page_content_width=settings.page_content_width,
            diagram_max_width=settings.diagram_max_width,
            diagram_max_height=settings.diagram_max_height,
            figure_max_width=settings.figure_max_width,
            figure_max_height=settings.figure_max_height,
        )


__all__ = ["FontOptions", "RenderOptions"]
