"""Sequential UI-flow validation: the built-in iframe check plus external scripts."""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.table import Table

from core.config import Settings, get_settings
from schemas.internal.validation import ValidationSummary, ValidatorOutcome
from validation.iframe_src import IframeSrcValidator, print_report

logger = logging.getLogger(__name__)

BUILTIN_SCRIPT = "<built-in>"


@dataclass(frozen=True)
class ExternalValidator:
    name: str
    script: str
    description: str = ""


EXTERNAL_VALIDATORS: tuple[ExternalValidator, ...] = (
    ExternalValidator(
        "UI Flow Structure",
        "validate-ui-flow.js",
        "Screen files and module structure",
    ),
    ExternalValidator(
        "Navigation",
        "validate-navigation.js",
        "Navigation links and click handlers",
    ),
    ExternalValidator(
        "Consistency",
        "validate-consistency.js",
        "Consistency with the reference example",
    ),
)

INTERPRETERS: dict[str, list[str]] = {
    ".js": ["node"],
    ".py": [sys.executable],
    ".sh": ["bash"],
}

_STATUS_STYLES = {"passed": "green", "failed": "red", "skipped": "yellow"}


def interpreter_for(script: Path) -> list[str]:
    try:
        return list(INTERPRETERS[script.suffix.lower()])
    except KeyError as exc:
        raise ValueError(f"Unsupported validator script type: {script.name}") from exc


class ValidationRunner:
    def __init__(
        self,
        project_path: str | Path,
        *,
        settings: Settings | None = None,
        console: Console | None = None,
        validators: Iterable[ExternalValidator] = EXTERNAL_VALIDATORS,
    ) -> None:
        self.project = Path(project_path)
        self.settings = settings or get_settings()
        self.console = console or Console()
        self.validators = tuple(validators)

    def search_dirs(self) -> list[Path]:
        dirs = [self.project]
        if self.settings.validator_scripts_dir:
            dirs.append(Path(self.settings.validator_scripts_dir).expanduser())
        return dirs

    def locate(self, script: str) -> Path | None:
        for directory in self.search_dirs():
            candidate = directory / script
            if candidate.is_file():
                return candidate
        return None

    def run_builtin(self) -> ValidatorOutcome:
        report = IframeSrcValidator(self.project).validate()
        print_report(report, self.console)
        detail = None
        if not report.passed:
            detail = f"{report.total_missing} missing path(s)"
            if not report.counts_consistent:
                detail += ", screen counts inconsistent"
        return ValidatorOutcome(
            name="iframe src Paths",
            script=BUILTIN_SCRIPT,
            status="passed" if report.passed else "failed",
            returncode=0 if report.passed else 1,
            detail=detail,
        )

    def run_external(self, validator: ExternalValidator) -> ValidatorOutcome:
        script = self.locate(validator.script)
        if script is None:
            self.console.print(
                f"[yellow]{validator.script} not found, skipping[/yellow]"
            )
            return ValidatorOutcome(
                name=validator.name,
                script=validator.script,
                status="skipped",
                detail="script not found",
            )

        command = [*interpreter_for(script), str(script.resolve()), str(self.project.resolve())]
        logger.info("Running validator %s: %s", validator.name, " ".join(command))
        try:
            completed = subprocess.run(
                command,
                cwd=self.project,
                timeout=self.settings.validator_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Validator %s timed out", validator.name)
            return ValidatorOutcome(
                name=validator.name,
                script=str(script),
                status="failed",
                detail=f"timed out after {self.settings.validator_timeout:g}s",
            )
        except OSError as exc:
            logger.warning("Validator %s could not start: %s", validator.name, exc)
            return ValidatorOutcome(
                name=validator.name,
                script=str(script),
                status="failed",
                detail=f"{type(exc).__name__}: {exc}",
            )

        return ValidatorOutcome(
            name=validator.name,
            script=str(script),
            status="passed" if completed.returncode == 0 else "failed",
            returncode=completed.returncode,
        )

    def run(self) -> ValidationSummary:
        summary = ValidationSummary(project_path=str(self.project))
        total = len(self.validators) + 1
        self.console.rule("UI Flow Complete Validation")
        self.console.print(f"[cyan]Project: {self.project}[/cyan]")

        self.console.rule(f"[bold][1/{total}] iframe src Paths[/bold]")
        summary.outcomes.append(self.run_builtin())

        for index, validator in enumerate(self.validators, start=2):
            self.console.rule(f"[bold][{index}/{total}] {validator.name}[/bold]")
            if validator.description:
                self.console.print(f"[dim]{validator.description}[/dim]")
            summary.outcomes.append(self.run_external(validator))

        print_summary(summary, self.console)
        return summary


def print_summary(summary: ValidationSummary, console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title="Validation Summary")
    table.add_column("Validator", style="bold")
    table.add_column("Status")
    table.add_column("Detail", overflow="fold")
    for outcome in summary.outcomes:
        style = _STATUS_STYLES[outcome.status]
        table.add_row(
            outcome.name,
            f"[{style}]{outcome.status.upper()}[/{style}]",
            outcome.detail or "",
        )
    console.print(table)
    if summary.passed:
        console.print("[bold green]ALL VALIDATIONS PASSED[/bold green]")
    else:
        console.print("[bold red]SOME VALIDATIONS FAILED[/bold red]")


def run_all(
    project_path: str | Path,
    *,
    settings: Settings | None = None,
    console: Console | None = None,
) -> ValidationSummary:
    return ValidationRunner(project_path, settings=settings, console=console).run()


__all__ = [
    "EXTERNAL_VALIDATORS",
    "ExternalValidator",
    "INTERPRETERS",
    "ValidationRunner",
    "interpreter_for",
    "print_summary",
    "run_all",
]
