"""Typer CLI entrypoint for Markdown to DOCX conversion and UI-flow checks."""

from __future__ import annotations

import os
import shlex
import sys
from importlib import import_module
from pathlib import Path

import typer

from regdocs import __version__

_SUBCOMMAND_SPECS: list[tuple[str, str, str]] = [
    ("config", "cli.commands.config", "配置查看与导出"),
]
_SUBCOMMAND_NAMES = {name for name, _, _ in _SUBCOMMAND_SPECS}
_SUBCOMMANDS_REGISTERED = False

app = typer.Typer(
    help=(
        "法规文档命令行工具\n\n将 Markdown 规格文档转换为 Word 文档，并校验 UI Flow 产物\n"
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    add_completion=True,
    options_metavar="[选项]",
    subcommand_metavar="命令 [参数]",
)


@app.callback()
def root(
    ctx: typer.Context,
    version_flag: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="输出版本信息",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="日志级别（默认使用配置项 REGDOCS_LOG_LEVEL）",
    ),
) -> None:
    if version_flag:
        typer.echo(__version__)
        raise typer.Exit()

    from cli.common import configure_logging, normalize_log_level
    from core.config import get_settings

    configure_logging(normalize_log_level(log_level or get_settings().log_level))

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command(help="将单个 Markdown 文件转换为 Word 文档")
def convert(
    input_path: Path = typer.Argument(
        ...,
        metavar="输入文件",
    ),
    output_path: Path | None = typer.Argument(
        None,
        metavar="[输出文件]",
        help="默认与输入文件同名（.docx）",
    ),
    keep_cache: bool = typer.Option(
        False,
        "--keep-cache",
        help="保留 Mermaid 渲染缓存目录",
    ),
) -> None:
    from services.convert import ConversionError, convert_file

    try:
        result = convert_file(
            input_path,
            output_path,
            keep_cache=True if keep_cache else None,
        )
    except (ConversionError, OSError) as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1)

    typer.echo(f"已写入: {result.output_path}")
    if result.diagrams_as_source:
        typer.echo(
            f"Warning: {result.diagrams_as_source} 个 Mermaid 图表渲染失败，已保留源码"
        )


@app.command(help="批量转换目录中的 Markdown 文件")
def batch(
    input_dir: Path = typer.Argument(
        ...,
        metavar="输入目录",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        help="输出目录（默认写在源文件旁）",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="忽略时间戳，全部重新转换",
    ),
    json_out: bool = typer.Option(
        False,
        "--json",
        help="输出 JSON 汇总",
    ),
) -> None:
    from cli.common import emit_json
    from services.convert import ConversionError, convert_directory

    try:
        summary = convert_directory(input_dir, output_dir, force=force)
    except ConversionError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1)

    total = len(summary.items)
    if total == 0:
        typer.echo(f"目录中未发现 Markdown: {input_dir}")
    for index, item in enumerate(summary.items, start=1):
        line = f"[{index}/{total}] {item.status} {item.relative_path}"
        if item.error:
            line += f" ({item.error})"
        typer.echo(line)

    counts = summary.counts()
    typer.echo(
        f"converted={counts['converted']} skipped={counts['skipped']} failed={counts['failed']}"
    )
    if json_out:
        emit_json(summary.model_dump())
    if counts["failed"]:
        raise typer.Exit(code=1)


@app.command("validate-iframe-src", help="校验 UI Flow 图表与预览页中的 iframe 路径")
def validate_iframe_src(
    project: Path = typer.Argument(
        Path("."),
        metavar="[项目目录]",
    ),
) -> None:
    from rich.console import Console

    from validation.iframe_src import IframeSrcValidator, print_report

    _require_project_dir(project)
    report = IframeSrcValidator(project).validate()
    print_report(report, Console())
    if not report.passed:
        raise typer.Exit(code=1)


@app.command("validate-all", help="依次运行全部 UI Flow 校验")
def validate_all(
    project: Path = typer.Argument(
        Path("."),
        metavar="[项目目录]",
    ),
) -> None:
    from rich.console import Console

    from validation.runner import run_all

    _require_project_dir(project)
    summary = run_all(project, console=Console())
    if not summary.passed:
        raise typer.Exit(code=1)


def _require_project_dir(project: Path) -> None:
    if not project.is_dir():
        raise typer.BadParameter(f"项目目录不存在: {project}")


def _parse_invoked_subcommand() -> str | None:
    completion_args = os.getenv("_TYPER_COMPLETE_ARGS")
    tokens: list[str]
    if completion_args:
        try:
            tokens = shlex.split(completion_args)
        except ValueError:
            tokens = completion_args.split()
        if tokens:
            tokens = tokens[1:]
    else:
        tokens = sys.argv[1:]

    for token in tokens:
        if token in _SUBCOMMAND_NAMES:
            return token
        if token.startswith("-"):
            continue
        break
    return None


def _register_subcommands() -> None:
    global _SUBCOMMANDS_REGISTERED
    if _SUBCOMMANDS_REGISTERED:
        return

    selected = _parse_invoked_subcommand()
    for name, module_path, help_text in _SUBCOMMAND_SPECS:
        if selected == name:
            module = import_module(module_path)
            app.add_typer(module.app, name=name)
            continue
        app.add_typer(
            typer.Typer(
                help=help_text,
                add_completion=False,
                no_args_is_help=True,
                options_metavar="[选项]",
                subcommand_metavar="命令 [参数]",
            ),
            name=name,
        )

    _SUBCOMMANDS_REGISTERED = True


def main() -> None:
    _register_subcommands()
    app()


__all__ = ["app", "main"]
