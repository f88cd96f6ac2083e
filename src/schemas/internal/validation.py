"""UI-flow validation report contracts."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ValidatorStatus = Literal["passed", "failed", "skipped"]

FILE_NOT_FOUND = "FILE_NOT_FOUND"


class PathCheck(BaseModel):
    """Outcome of checking one family of referenced paths."""

    total: int = 0
    valid: int = 0
    missing: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class IframeSrcResults(BaseModel):
    ipad_diagram: PathCheck = Field(default_factory=PathCheck)
    iphone_diagram: PathCheck = Field(default_factory=PathCheck)
    device_preview: PathCheck = Field(default_factory=PathCheck)
    device_preview_iframes: PathCheck = Field(default_factory=PathCheck)
    data_iphone_attrs: PathCheck = Field(default_factory=PathCheck)

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    def total_missing(self) -> int:
        return sum(
            len(check.missing)
            for check in (
                self.ipad_diagram,
                self.iphone_diagram,
                self.device_preview,
                self.device_preview_iframes,
                self.data_iphone_attrs,
            )
        )


class ScreenCount(BaseModel):
    ipad: int = 0
    iphone: int = 0

    model_config = ConfigDict(extra="forbid")


class IframeSrcReport(BaseModel):
    project_path: str
    results: IframeSrcResults
    actual_screens: ScreenCount
    counts_consistent: bool
    total_missing: int
    passed: bool
    error_log_path: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class ValidatorOutcome(BaseModel):
    name: str
    script: str
    status: ValidatorStatus
    returncode: Optional[int] = None
    detail: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class ValidationSummary(BaseModel):
    project_path: str
    outcomes: List[ValidatorOutcome] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def count(self, status: ValidatorStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def passed(self) -> bool:
        return self.count("failed") == 0


__all__ = [
    "FILE_NOT_FOUND",
    "IframeSrcReport",
    "IframeSrcResults",
    "PathCheck",
    "ScreenCount",
    "ValidationSummary",
    "ValidatorOutcome",
    "ValidatorStatus",
]
