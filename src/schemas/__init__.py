"""Schema package for parsed documents and validation reports."""

from .internal import Block, DocumentStructure, IframeSrcReport, ValidationSummary

__all__ = ["Block", "DocumentStructure", "IframeSrcReport", "ValidationSummary"]
