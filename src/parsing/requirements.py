"""Requirement record recognition and field capture."""

from __future__ import annotations

import re

from schemas.internal.blocks import RequirementRecord

REQUIREMENT_PREFIXES = ("SRS", "SWD", "SDD", "STC", "REQ")

REQUIREMENT_HEADING_RE = re.compile(
    r"^#{3,5}\s+((?:" + "|".join(REQUIREMENT_PREFIXES) + r")-[A-Z][A-Z0-9]*-\d+)"
    r"\s*[:：]?\s*(.*)$"
)
REQUIREMENT_ID_RE = re.compile(r"^(?:SRS|SDD|SWD|STC|REQ|SCR)-[A-Z][A-Z0-9]*-\d+")
_FIELD_RE = re.compile(r"^\*\*(.+?)(?:[:：]\*\*|\*\*\s*[:：])\s*(.*)$")
_RULE_RE = re.compile(r"^-{3,}$")

ACCEPTANCE_CRITERIA = "acceptance_criteria"

FIELD_SYNONYMS: dict[str, frozenset[str]] = {
    "description": frozenset({"description", "描述", "描述說明", "说明"}),
    "statement": frozenset({"statement", "requirement statement", "需求陳述", "需求陈述"}),
    "rationale": frozenset({"rationale", "理由", "依據", "依据"}),
    "priority": frozenset({"priority", "優先級", "优先级"}),
    "safety_class": frozenset(
        {"safety class", "safety classification", "安全分類", "安全分类"}
    ),
    "verification_method": frozenset(
        {"verification method", "verification", "驗證方法", "验证方法"}
    ),
    ACCEPTANCE_CRITERIA: frozenset({"acceptance criteria", "驗收標準", "验收标准"}),
}

_LABEL_INDEX = {
    label: key for key, labels in FIELD_SYNONYMS.items() for label in labels
}


def normalize_label(label: str) -> str:
    return " ".join(label.split()).casefold()


def canonical_field(label: str) -> str:
    """Map a surface label to its canonical key; unknown labels map to themselves."""
    cleaned = label.strip()
    return _LABEL_INDEX.get(normalize_label(cleaned), cleaned)


def match_requirement_heading(line: str) -> tuple[str, str] | None:
    match = REQUIREMENT_HEADING_RE.match(line.strip())
    if not match:
        return None
    return match.group(1), match.group(2).strip()


def ends_requirement(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("#") or bool(_RULE_RE.match(stripped))


class RequirementBuilder:
    """Collects the lines of one requirement record."""

    def __init__(self, req_id: str, name: str) -> None:
        self.req_id = req_id
        self.name = name
        self.fields: dict[str, str] = {}
        self.labels: dict[str, str] = {}
        self.criteria: list[str] = []
        self._active: str | None = None

    @property
    def in_criteria(self) -> bool:
        return self._active == ACCEPTANCE_CRITERIA

    def feed(self, line: str) -> None:
        stripped = line.strip()
        if not stripped:
            return

        match = _FIELD_RE.match(stripped)
        if match:
            label = match.group(1).strip()
            value = match.group(2).strip()
            key = canonical_field(label)
            self._active = key
            self.labels.setdefault(key, label)
            if key != ACCEPTANCE_CRITERIA:
                self._append(key, value)
            return

        # Criteria are bullet items only.
        if self.in_criteria:
            if stripped.startswith("- "):
                self.criteria.append(stripped[2:].strip())
            return

        if self._active is not None:
            self._append(self._active, stripped)

    def _append(self, key: str, value: str) -> None:
        current = self.fields.get(key, "")
        if current and value:
            self.fields[key] = f"{current} {value}"
        else:
            self.fields[key] = current or value

    def build(self) -> RequirementRecord:
        fields = {key: value for key, value in self.fields.items() if value}
        labels = {
            key: label
            for key, label in self.labels.items()
            if key in fields or key == ACCEPTANCE_CRITERIA
        }
        if not self.criteria:
            labels.pop(ACCEPTANCE_CRITERIA, None)
        return RequirementRecord(
            id=self.req_id,
            name=self.name,
            fields=fields,
            labels=labels,
            acceptance_criteria=list(self.criteria),
        )


__all__ = [
    "ACCEPTANCE_CRITERIA",
    "FIELD_SYNONYMS",
    "REQUIREMENT_HEADING_RE",
    "REQUIREMENT_ID_RE",
    "RequirementBuilder",
    "canonical_field",
    "ends_requirement",
    "match_requirement_heading",
    "normalize_label",
]
