# src/locale_hub/presentation/cli/commands/cache.py
"""
语言包缓存命令：读取、作废与预热。
"""

from __future__ import annotations

import json
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .._shared_options import LOCALE_ARG, NAMESPACE_OPTION
from .._utils import run_with_coordinator

app = typer.Typer(help="读取、作废与预热语言包缓存。", no_args_is_help=True)
console = Console()


@app.command("get")
def cache_get(
    ctx: typer.Context, locale: LOCALE_ARG, namespace: NAMESPACE_OPTION = None
) -> None:
    """输出 (locale, namespace) 的语言包，缓存失效时自动重建。"""
    bundle = run_with_coordinator(
        ctx, lambda c: c.get_cached_bundle(locale, namespace)
    )
    console.print(
        Panel(
            Syntax(
                json.dumps(bundle, indent=2, ensure_ascii=False),
                "json",
                theme="monokai",
            ),
            title=f"[green]语言包 {locale}/{namespace or '*'}[/green]",
            border_style="green",
        )
    )


@app.command("invalidate")
def cache_invalidate(
    ctx: typer.Context,
    locale: Annotated[
        Optional[str], typer.Option("--locale", "-l", help="省略表示全部语言。")
    ] = None,
    namespace: NAMESPACE_OPTION = None,
    reason: Annotated[
        str, typer.Option("--reason", "-r", help="作废原因。")
    ] = "manual invalidation",
) -> None:
    """作废匹配的缓存条目（下次读取时重建）。"""
    affected = run_with_coordinator(
        ctx, lambda c: c.invalidate(locale, namespace, reason)
    )
    console.print(f"[green]✅ 已作废 {affected} 条缓存。[/green]")


@app.command("warm")
def cache_warm(
    ctx: typer.Context,
    locales: Annotated[
        Optional[list[str]],
        typer.Option("--locale", "-l", help="要预热的语言 (可多次使用)；默认全部。"),
    ] = None,
    namespace: NAMESPACE_OPTION = None,
) -> None:
    """预先生成语言包。"""
    entries = run_with_coordinator(ctx, lambda c: c.warm_cache(locales, namespace))
    table = Table(title="已生成的语言包")
    table.add_column("语言")
    table.add_column("命名空间")
    table.add_column("分组数", justify="right")
    table.add_column("版本", justify="right")
    table.add_column("耗时 (ms)", justify="right")
    for entry in entries:
        table.add_row(
            entry.locale,
            entry.namespace or "*",
            str(len(entry.payload)),
            str(entry.version),
            f"{entry.generation_time_ms:.2f}",
        )
    console.print(table)
