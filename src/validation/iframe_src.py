"""Referential-integrity check for generated UI-flow HTML trees.

Three views reference the generated screens: the iPad and iPhone flow
diagrams under ``docs/`` and ``device-preview.html``. Every relative HTML
path they mention must exist, and all views must agree with the number of
iPad screen files actually on disk.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from rich.console import Console

from schemas.internal.validation import (
    FILE_NOT_FOUND,
    IframeSrcReport,
    IframeSrcResults,
    PathCheck,
    ScreenCount,
)

logger = logging.getLogger(__name__)

IPAD_DIAGRAM = "docs/ui-flow-diagram-ipad.html"
IPHONE_DIAGRAM = "docs/ui-flow-diagram-iphone.html"
DEVICE_PREVIEW = "device-preview.html"
ERROR_LOG = "workspace/iframe-src-error-log.json"
PHASE = "iframe-src-validation"
RECOVERY_ACTION = "fix-diagram-and-preview-files"

DIAGRAM_SRC_RE = re.compile(r'src="\.\./([^"]+\.html)"')
LOAD_SCREEN_RE = re.compile(r"loadScreen\(['\"]([^'\"]+\.html)['\"]")
PREVIEW_IFRAME_RE = re.compile(
    r'id="(preview-iframe-(?:ipad|ipad-mini|iphone))"\s+src="([^"]+)"'
)
DATA_IPHONE_RE = re.compile(r'data-iphone="([^"]+)"')
SCREEN_FILE_RE = re.compile(r"^SCR-.*\.html$")


@dataclass(frozen=True)
class IframeSrcConfig:
    ipad_excludes: tuple[str, ...] = ("iphone", "docs")
    iphone_dir: str = "iphone"
    write_error_log: bool = True


def find_screens(root: Path, start: str = ".", excludes: Iterable[str] = ()) -> list[str]:
    """Relative POSIX paths of ``SCR-*.html`` files below ``root / start``."""
    base = (root / start).resolve()
    if not base.is_dir():
        return []
    excluded = set(excludes)
    root_resolved = root.resolve()
    screens: list[str] = []
    for dirpath, dirnames, filenames in os.walk(base):
        rel_dir = Path(dirpath).relative_to(root_resolved)
        if not rel_dir.parts:
            dirnames[:] = [name for name in dirnames if name not in excluded]
        dirnames.sort()
        for name in sorted(filenames):
            if SCREEN_FILE_RE.match(name):
                screens.append((rel_dir / name).as_posix())
    return screens


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


class IframeSrcValidator:
    def __init__(
        self,
        project_path: str | Path,
        config: IframeSrcConfig | None = None,
    ) -> None:
        self.root = Path(project_path)
        self.config = config or IframeSrcConfig()

    def _exists(self, relative: str) -> bool:
        return (self.root / relative).is_file()

    def _check_paths(self, paths: Iterable[str], *, labels: Iterable[str] | None = None) -> PathCheck:
        paths = list(paths)
        names = list(labels) if labels is not None else paths
        check = PathCheck(total=len(paths))
        for path, name in zip(paths, names):
            if self._exists(path):
                check.valid += 1
            else:
                check.missing.append(name)
        return check

    def _read(self, relative: str) -> str | None:
        path = self.root / relative
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8", errors="replace")

    def check_diagram(self, relative: str) -> PathCheck:
        content = self._read(relative)
        if content is None:
            return PathCheck(missing=[FILE_NOT_FOUND])
        return self._check_paths(DIAGRAM_SRC_RE.findall(content))

    def check_device_preview(self) -> tuple[PathCheck, PathCheck, PathCheck]:
        content = self._read(DEVICE_PREVIEW)
        if content is None:
            return PathCheck(missing=[FILE_NOT_FOUND]), PathCheck(), PathCheck()

        load_screens = self._check_paths(_unique(LOAD_SCREEN_RE.findall(content)))

        iframes = PREVIEW_IFRAME_RE.findall(content)
        iframe_check = self._check_paths(
            [src for _, src in iframes],
            labels=[f"{iframe_id}: {src}" for iframe_id, src in iframes],
        )

        data_iphone = self._check_paths(_unique(DATA_IPHONE_RE.findall(content)))
        return load_screens, iframe_check, data_iphone

    def validate(self) -> IframeSrcReport:
        ipad_screens = find_screens(self.root, ".", self.config.ipad_excludes)
        iphone_screens = find_screens(self.root, self.config.iphone_dir)

        results = IframeSrcResults(
            ipad_diagram=self.check_diagram(IPAD_DIAGRAM),
            iphone_diagram=self.check_diagram(IPHONE_DIAGRAM),
        )
        (
            results.device_preview,
            results.device_preview_iframes,
            results.data_iphone_attrs,
        ) = self.check_device_preview()

        actual = len(ipad_screens)
        consistent = (
            actual == results.ipad_diagram.total
            and actual == results.iphone_diagram.total
            and actual == results.device_preview.total
        )
        total_missing = results.total_missing()
        report = IframeSrcReport(
            project_path=str(self.root),
            results=results,
            actual_screens=ScreenCount(ipad=actual, iphone=len(iphone_screens)),
            counts_consistent=consistent,
            total_missing=total_missing,
            passed=total_missing == 0 and consistent,
        )
        if not report.passed and self.config.write_error_log:
            log_path = write_error_log(self.root, report)
            report = report.model_copy(update={"error_log_path": str(log_path)})
        return report


def build_error_log(report: IframeSrcReport) -> dict:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "phase": PHASE,
        "results": report.results.model_dump(by_alias=True),
        "actualScreenCount": report.actual_screens.model_dump(),
        "recovery_action": RECOVERY_ACTION,
    }


def write_error_log(root: Path, report: IframeSrcReport) -> Path:
    path = root / ERROR_LOG
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(build_error_log(report), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    logger.info("Wrote iframe src error log %s", path)
    return path


def print_report(report: IframeSrcReport, console: Console | None = None) -> None:
    console = console or Console()
    results = report.results
    console.rule("iframe src Path Validation")
    console.print(
        f"[cyan]Screens on disk:[/cyan] iPad {report.actual_screens.ipad}, "
        f"iPhone {report.actual_screens.iphone}"
    )

    sections = [
        (IPAD_DIAGRAM, results.ipad_diagram),
        (IPHONE_DIAGRAM, results.iphone_diagram),
        (f"{DEVICE_PREVIEW} loadScreen()", results.device_preview),
        (f"{DEVICE_PREVIEW} iframe src", results.device_preview_iframes),
        (f"{DEVICE_PREVIEW} data-iphone", results.data_iphone_attrs),
    ]
    for name, check in sections:
        if not check.missing:
            console.print(f"[green]OK[/green] {name}: {check.valid}/{check.total} paths valid")
            continue
        console.print(f"[red]MISSING[/red] {name}: {len(check.missing)} path(s)")
        for missing in check.missing:
            console.print(f"   [red]- {missing}[/red]")

    console.print(
        "Screen counts: "
        f"actual {report.actual_screens.ipad}, "
        f"iPad diagram {results.ipad_diagram.total}, "
        f"iPhone diagram {results.iphone_diagram.total}, "
        f"device-preview {results.device_preview.total}"
    )
    if report.passed:
        console.print("[bold green]iframe src Path Validation PASSED[/bold green]")
        return
    console.print("[bold red]iframe src Path Validation FAILED[/bold red]")
    console.print(f"   Missing paths: {report.total_missing}")
    console.print(f"   Counts consistent: {'yes' if report.counts_consistent else 'no'}")
    if report.error_log_path:
        console.print(f"[dim]Error log: {report.error_log_path}[/dim]")


__all__ = [
    "IframeSrcConfig",
    "IframeSrcValidator",
    "build_error_log",
    "find_screens",
    "print_report",
    "write_error_log",
]
