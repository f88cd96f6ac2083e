from __future__ import annotations

import json
from pathlib import Path

import yaml
from docx import Document
from typer.testing import CliRunner

from cli.app import app
from cli.commands import config as config_command
from regdocs import __version__

DOC = """\
# System Requirements
## Table of Contents
- 1. Scope
## 1. Scope

Scope text with **emphasis**.

```mermaid
sequenceDiagram
  A->>B: hello
```
"""


def test_version_flag() -> None:
    result = CliRunner().invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_convert_falls_back_when_mermaid_cli_missing(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("MERMAID_CLI", "regdocs-test-missing-mmdc")
    source = tmp_path / "SRS.md"
    source.write_text(DOC, encoding="utf-8")

    result = CliRunner().invoke(app, ["convert", str(source)])

    assert result.exit_code == 0, result.output
    output = tmp_path / "SRS.docx"
    assert output.is_file()
    texts = [p.text for p in Document(str(output)).paragraphs]
    assert "sequenceDiagram" in texts
    assert "Scope text with emphasis." in texts
    assert "Warning: 1" in result.output


def test_convert_explicit_output(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("MERMAID_CLI", "regdocs-test-missing-mmdc")
    source = tmp_path / "in.md"
    source.write_text("# Title\n## 1. Body\ntext\n", encoding="utf-8")
    target = tmp_path / "nested" / "out.docx"

    result = CliRunner().invoke(app, ["convert", str(source), str(target)])

    assert result.exit_code == 0, result.output
    assert target.is_file()
    assert str(target) in result.output


def test_convert_missing_input_exits_non_zero(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["convert", str(tmp_path / "absent.md")])

    assert result.exit_code == 1
    assert "Error: Input file not found" in result.output


def test_invalid_log_level_is_rejected(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["--log-level", "loud", "convert", str(tmp_path / "x.md")])

    assert result.exit_code != 0


def test_validate_iframe_src_fails_on_empty_project(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["validate-iframe-src", str(tmp_path)])

    assert result.exit_code == 1
    assert "FAILED" in result.output
    assert (tmp_path / "workspace" / "iframe-src-error-log.json").is_file()


def test_validate_all_rejects_missing_directory(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["validate-all", str(tmp_path / "nope")])

    assert result.exit_code != 0


def test_config_diff_shows_overrides(monkeypatch) -> None:
    monkeypatch.setenv("MERMAID_SCALE", "3")

    result = CliRunner().invoke(config_command.app, ["diff"])

    assert result.exit_code == 0
    diff = json.loads(result.output)
    assert diff["mermaid_scale"] == {"value": 3, "default": 2}


def test_config_show_plain() -> None:
    result = CliRunner().invoke(config_command.app, ["show", "--no-json"])

    assert result.exit_code == 0
    assert "mermaid_cli=mmdc" in result.output


def test_config_export_yaml(tmp_path: Path) -> None:
    target = tmp_path / "settings.yaml"

    result = CliRunner().invoke(
        config_command.app, ["export", "--format", "yaml", "--output", str(target)]
    )

    assert result.exit_code == 0
    data = yaml.safe_load(target.read_text(encoding="utf-8"))
    assert data["font_code"] == "Consolas"
    assert data["validator_scripts_dir"] is None
