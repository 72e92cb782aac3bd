# src/locale_hub/presentation/cli/commands/query.py
"""
查询命令：解析单个键、按类别列出、检索与统计。
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from .._shared_options import KEY_NAME_ARG, LOCALE_ARG
from .._utils import run_with_coordinator

app = typer.Typer(help="解析、检索与统计已发布的翻译。", no_args_is_help=True)
console = Console()


def _parse_vars(pairs: list[str]) -> dict[str, str]:
    variables: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"变量格式应为 name=value: {pair!r}")
        variables[name] = value
    return variables


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    key_name: KEY_NAME_ARG,
    locale: LOCALE_ARG,
    var: Annotated[
        Optional[list[str]],
        typer.Option("--var", "-v", help="插值变量 name=value (可多次使用)。"),
    ] = None,
    fallback: Annotated[
        Optional[str], typer.Option("--fallback", "-f", help="回退语言。")
    ] = None,
) -> None:
    """解析单个键；找不到时输出键名本身。"""
    variables = _parse_vars(var or [])
    text = run_with_coordinator(
        ctx, lambda c: c.resolve(key_name, locale, variables, fallback)
    )
    console.print(text, markup=False, highlight=False)


@app.command("category")
def category(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="类别名。")],
    locale: LOCALE_ARG,
) -> None:
    """列出某类别下的已发布翻译（不做语言回退）。"""
    entries = run_with_coordinator(ctx, lambda c: c.get_by_category(name, locale))
    table = Table(title=f"{name} / {locale}")
    table.add_column("键")
    table.add_column("值")
    table.add_column("变量")
    for e in entries:
        table.add_row(e.key_name, e.value, ", ".join(e.interpolation_vars))
    console.print(table)


@app.command("search")
def search(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="检索词。")],
    locale: LOCALE_ARG,
    categories: Annotated[
        Optional[list[str]],
        typer.Option("--category", "-c", help="限定类别 (可多次使用)。"),
    ] = None,
    limit: Annotated[
        Optional[int], typer.Option("--limit", help="最多返回条数。")
    ] = None,
) -> None:
    """在已发布的翻译中检索。"""
    hits = run_with_coordinator(
        ctx, lambda c: c.search(text, locale, categories, limit)
    )
    if not hits:
        console.print("[yellow]⚠️ 没有匹配结果。[/yellow]")
        return
    table = Table(title=f"检索 '{text}'")
    table.add_column("相关度", justify="right")
    table.add_column("键")
    table.add_column("类别")
    table.add_column("值")
    for h in hits:
        table.add_row(f"{h.rank:.3f}", h.key_name, h.category, h.value)
    console.print(table)


@app.command("stats")
def stats(
    ctx: typer.Context,
    locale: Annotated[
        Optional[str], typer.Option("--locale", "-l", help="只统计某个语言。")
    ] = None,
    days_back: Annotated[
        int, typer.Option("--days", help="使用统计的回溯天数。")
    ] = 30,
) -> None:
    """按语言显示完成度与使用情况。"""
    rows = run_with_coordinator(ctx, lambda c: c.get_statistics(locale, days_back))
    table = Table(title="翻译统计")
    for col in ("语言", "激活键", "已发布", "草稿", "完成度", "浏览", "平均耗时 (ms)"):
        table.add_column(col, justify="right" if col != "语言" else "left")
    for s in rows:
        table.add_row(
            s.locale,
            str(s.total_keys),
            str(s.published),
            str(s.draft),
            f"{s.completion_percentage:.2f}%",
            str(s.total_views),
            "-" if s.avg_load_time_ms is None else f"{s.avg_load_time_ms:.2f}",
        )
    console.print(table)
