"""UI-flow HTML validators."""

from .iframe_src import IframeSrcConfig, IframeSrcValidator, print_report
from .runner import EXTERNAL_VALIDATORS, ValidationRunner, print_summary, run_all

__all__ = [
    "EXTERNAL_VALIDATORS",
    "IframeSrcConfig",
    "IframeSrcValidator",
    "ValidationRunner",
    "print_report",
    "print_summary",
    "run_all",
]
