# src/locale_hub/presentation/cli/commands/translation.py
"""
翻译工作流命令：创建草稿、审核、批准、拒绝、返工、发布与审计。
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from locale_hub.core.types import TranslationStatus

from .._shared_options import ACTOR_OPTION, KEY_NAME_ARG, LOCALE_ARG, TRANSLATION_ID_ARG
from .._utils import report_transition, run_with_coordinator

app = typer.Typer(help="管理翻译记录的工作流状态。", no_args_is_help=True)
console = Console()


@app.command("create")
def create(
    ctx: typer.Context,
    key_name: KEY_NAME_ARG,
    locale: LOCALE_ARG,
    value: Annotated[str, typer.Argument(help="翻译文本。")],
    icu_message: Annotated[
        Optional[str], typer.Option("--icu", help="ICU 消息模板 (可选)。")
    ] = None,
    actor: ACTOR_OPTION = "cli_user",
) -> None:
    """为 (key, locale) 创建一条新版本的草稿。"""
    try:
        translation_id = run_with_coordinator(
            ctx,
            lambda c: c.create_draft(key_name, locale, value, icu_message, actor),
        )
    except (LookupError, ValueError) as e:
        console.print(f"[bold red]❌ 创建草稿失败: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e
    console.print("[green]✅ 草稿已创建。[/green]")
    console.print(f"  - [dim]翻译 ID:[/dim] {translation_id}")


@app.command("submit")
def submit(
    ctx: typer.Context,
    translation_id: TRANSLATION_ID_ARG,
    actor: ACTOR_OPTION = "cli_user",
) -> None:
    """提交草稿进入审核。"""
    result = run_with_coordinator(
        ctx, lambda c: c.submit_for_review(translation_id, actor)
    )
    report_transition(result, f"{translation_id} 已提交审核。")


@app.command("approve")
def approve(
    ctx: typer.Context,
    translation_id: TRANSLATION_ID_ARG,
    actor: ACTOR_OPTION = "cli_user",
) -> None:
    result = run_with_coordinator(ctx, lambda c: c.approve(translation_id, actor))
    report_transition(result, f"{translation_id} 已批准。")


@app.command("reject")
def reject(
    ctx: typer.Context,
    translation_id: TRANSLATION_ID_ARG,
    reason: Annotated[str, typer.Option("--reason", "-r", help="拒绝原因。")],
    actor: ACTOR_OPTION = "cli_user",
) -> None:
    result = run_with_coordinator(
        ctx, lambda c: c.reject(translation_id, reason, actor)
    )
    report_transition(result, f"{translation_id} 已拒绝。")


@app.command("rework")
def rework(
    ctx: typer.Context,
    translation_id: TRANSLATION_ID_ARG,
    actor: ACTOR_OPTION = "cli_user",
) -> None:
    """把被拒绝的翻译退回草稿。"""
    result = run_with_coordinator(
        ctx, lambda c: c.return_to_draft(translation_id, actor)
    )
    report_transition(result, f"{translation_id} 已退回草稿。")


@app.command("publish")
def publish(
    ctx: typer.Context,
    translation_id: TRANSLATION_ID_ARG,
    actor: ACTOR_OPTION = "cli_user",
) -> None:
    """发布一条已批准的翻译，并作废受影响的缓存。"""
    result = run_with_coordinator(ctx, lambda c: c.publish(translation_id, actor))
    report_transition(result, f"{translation_id} 已发布。")


@app.command("bulk")
def bulk(
    ctx: typer.Context,
    translation_ids: Annotated[list[str], typer.Argument(help="一个或多个翻译 ID。")],
    status: Annotated[
        TranslationStatus, typer.Option("--status", "-s", help="目标状态。")
    ],
    reason: Annotated[
        Optional[str], typer.Option("--reason", "-r", help="拒绝原因 (可选)。")
    ] = None,
    actor: ACTOR_OPTION = "cli_user",
) -> None:
    """对多条记录执行同一迁移；每条记录独立成败。"""
    report = run_with_coordinator(
        ctx, lambda c: c.bulk_transition(translation_ids, status, actor, reason)
    )
    console.print(
        f"[green]成功 {len(report.succeeded)} 条[/green]，"
        f"[red]失败 {len(report.failed)} 条[/red]，作废缓存 {report.invalidated} 条。"
    )
    for failure in report.failed:
        console.print(
            f"  - [red]{failure.translation_id}[/red]: "
            f"{failure.error_code} {escape(failure.message or '')}"
        )
    if report.failed:
        raise typer.Exit(code=1)


@app.command("history")
def history(ctx: typer.Context, translation_id: TRANSLATION_ID_ARG) -> None:
    """显示一条翻译记录的审计历史。"""
    records = run_with_coordinator(ctx, lambda c: c.get_history(translation_id))
    if not records:
        console.print("[yellow]⚠️ 没有审计记录。[/yellow]")
        return
    table = Table(title=f"审计记录 {translation_id}")
    table.add_column("时间")
    table.add_column("操作")
    table.add_column("状态")
    table.add_column("操作者")
    table.add_column("原因")
    for r in records:
        table.add_row(
            r.changed_at.isoformat() if r.changed_at else "",
            r.action,
            f"{r.old_status or '-'} → {r.new_status or '-'}",
            r.actor,
            r.change_reason or "",
        )
    console.print(table)
