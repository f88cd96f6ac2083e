"""Configuration inspection commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml

from core.config import Settings, get_settings
from cli.common import emit_json


app = typer.Typer(
    help="配置查看与导出",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
    options_metavar="[选项]",
    subcommand_metavar="命令 [参数]",
)

_EXPORT_FORMATS = ("json", "yaml")


@app.command("show", help="查看当前生效配置")
def show_config(
    json_out: bool = typer.Option(True, "--json/--no-json", help="输出 JSON"),
) -> None:
    payload = get_settings().model_dump()
    if json_out:
        emit_json(payload)
        return
    for key, value in payload.items():
        typer.echo(f"{key}={value}")


@app.command("export", help="导出配置为 JSON 或 YAML")
def export_config(
    output: Path | None = typer.Option(
        None,
        "--output",
        help="导出文件路径（默认输出到 stdout）",
    ),
    fmt: str = typer.Option(
        "json",
        "--format",
        help="导出格式：json|yaml",
    ),
) -> None:
    fmt = fmt.strip().lower()
    if fmt not in _EXPORT_FORMATS:
        raise typer.BadParameter(f"--format 仅支持 json|yaml: {fmt}")
    content = render_settings(get_settings().model_dump(), fmt)
    if output is None:
        typer.echo(content.rstrip("\n"))
        return
    output.write_text(content, encoding="utf-8")
    typer.echo(f"已写入: {output}")


@app.command("diff", help="显示与默认值的差异")
def diff_config() -> None:
    emit_json(settings_diff(get_settings()))


def render_settings(payload: dict[str, Any], fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(payload, allow_unicode=True, sort_keys=False)
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def settings_diff(settings: Settings) -> dict[str, dict[str, Any]]:
    defaults = _settings_defaults()
    diff: dict[str, dict[str, Any]] = {}
    for key, value in settings.model_dump().items():
        default = defaults.get(key)
        if value != default:
            diff[key] = {"value": value, "default": default}
    return diff


def _settings_defaults() -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for name, field in Settings.model_fields.items():
        defaults[name] = field.default
    return defaults


__all__ = ["app", "render_settings", "settings_diff"]
