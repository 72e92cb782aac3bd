# src/locale_hub/presentation/cli/commands/catalogue.py
"""
目录导入命令。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from locale_hub.core.exceptions import KeyCollisionError, UnsupportedLocaleError

from .._utils import run_with_coordinator

app = typer.Typer(help="导入翻译目录。", no_args_is_help=True)
console = Console()


@app.command("load")
def load(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="目录 JSON 文件。"),
    ],
) -> None:
    """导入 JSON 目录：写入翻译键，并把变化的值一路发布。"""
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[bold red]❌ JSON 格式错误: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e

    try:
        report = run_with_coordinator(ctx, lambda c: c.load_catalogue(document))
    except (ValidationError, UnsupportedLocaleError, KeyCollisionError) as e:
        console.print(f"[bold red]❌ 目录不合法: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e

    console.print("[bold green]✅ 目录导入完成。[/bold green]")
    console.print(f"  - [dim]翻译键:[/dim] {report.keys_upserted}")
    console.print(f"  - [dim]新草稿:[/dim] {report.drafts_created}")
    console.print(f"  - [dim]已发布:[/dim] {len(report.published)}")
    console.print(f"  - [dim]未变化跳过:[/dim] {report.skipped}")
    if report.missing_keys:
        console.print(f"  - [yellow]未知的键:[/yellow] {', '.join(report.missing_keys)}")
    for failure in report.failed:
        console.print(
            f"  - [red]{failure.translation_id}[/red]: "
            f"{failure.error_code} {escape(failure.message or '')}"
        )
