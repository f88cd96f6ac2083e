"""Application configuration and .env loading."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized runtime configuration."""

    mermaid_cli: str = Field(default="mmdc", validation_alias="MERMAID_CLI")
    mermaid_timeout: float = Field(default=60.0, validation_alias="MERMAID_TIMEOUT")
    mermaid_scale: int = Field(default=2, validation_alias="MERMAID_SCALE")
    mermaid_background: str = Field(
        default="white", validation_alias="MERMAID_BACKGROUND"
    )

    font_latin: str = Field(default="Arial", validation_alias="DOCX_FONT_LATIN")
    font_cjk: str = Field(default="微軟正黑體", validation_alias="DOCX_FONT_CJK")
    font_code: str = Field(default="Consolas", validation_alias="DOCX_FONT_CODE")
    page_content_width: int = Field(
        default=9360, validation_alias="DOCX_PAGE_CONTENT_WIDTH"
    )

    diagram_max_width: int = Field(default=550, validation_alias="DIAGRAM_MAX_WIDTH")
    diagram_max_height: int = Field(default=600, validation_alias="DIAGRAM_MAX_HEIGHT")
    figure_max_width: int = Field(default=500, validation_alias="FIGURE_MAX_WIDTH")
    figure_max_height: int = Field(default=650, validation_alias="FIGURE_MAX_HEIGHT")

    diagram_cache_dirname: str = Field(
        default=".mermaid-temp", validation_alias="DIAGRAM_CACHE_DIRNAME"
    )
    keep_diagram_cache: bool = Field(
        default=False, validation_alias="KEEP_DIAGRAM_CACHE"
    )

    validator_scripts_dir: str | None = Field(
        default=None, validation_alias="VALIDATOR_SCRIPTS_DIR"
    )
    validator_timeout: float = Field(default=300.0, validation_alias="VALIDATOR_TIMEOUT")

    log_level: str = Field(default="INFO", validation_alias="REGDOCS_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from .env/environment."""
    return Settings()


__all__ = ["Settings", "get_settings"]
