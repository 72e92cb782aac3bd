# src/locale_hub/presentation/cli/commands/usage.py
"""
使用统计命令。
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from .._shared_options import KEY_NAME_ARG, LOCALE_ARG
from .._utils import run_with_coordinator

app = typer.Typer(help="记录与查看使用统计。", no_args_is_help=True)
console = Console()


@app.command("record")
def record(
    ctx: typer.Context,
    key_name: KEY_NAME_ARG,
    locale: LOCALE_ARG,
    load_time_ms: Annotated[
        Optional[float],
        typer.Option("--load-time", min=0.0, help="加载耗时样本 (毫秒)。"),
    ] = None,
) -> None:
    run_with_coordinator(ctx, lambda c: c.record_usage(key_name, locale, load_time_ms))
    console.print("[green]✅ 已记录。[/green]")


@app.command("show")
def show(
    ctx: typer.Context,
    key_name: KEY_NAME_ARG,
    locale: LOCALE_ARG,
    day: Annotated[
        Optional[str], typer.Option("--day", help="日期 YYYY-MM-DD，默认今天 (UTC)。")
    ] = None,
) -> None:
    """显示某个键在某天的使用统计。"""
    try:
        target = date.fromisoformat(day) if day else None
    except ValueError as e:
        raise typer.BadParameter(f"日期格式应为 YYYY-MM-DD: {day!r}") from e

    stat = run_with_coordinator(ctx, lambda c: c.get_usage(key_name, locale, target))
    if stat is None:
        console.print("[yellow]⚠️ 没有使用记录。[/yellow]")
        return
    table = Table(title=f"{key_name} / {locale} @ {stat.recorded_date.isoformat()}")
    table.add_column("浏览", justify="right")
    table.add_column("请求", justify="right")
    table.add_column("耗时样本", justify="right")
    table.add_column("平均耗时 (ms)", justify="right")
    table.add_row(
        str(stat.view_count),
        str(stat.total_requests),
        str(stat.load_samples),
        "-" if stat.avg_load_time_ms is None else f"{stat.avg_load_time_ms:.2f}",
    )
    console.print(table)
