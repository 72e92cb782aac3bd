# src/locale_hub/presentation/cli/commands/db.py
"""
数据库管理命令：建表、迁移与版本查询。
"""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from locale_hub.containers import ApplicationContainer
from locale_hub.infrastructure.db import create_schema, dispose_engine
from locale_hub.management import migrate_db

app = typer.Typer(help="数据库管理命令 (建表、迁移)。", no_args_is_help=True)
console = Console()


@app.command("init")
def db_init(ctx: typer.Context) -> None:
    """直接按 ORM 模型建表（开发与测试用；生产环境请使用 `db upgrade`）。"""
    container: ApplicationContainer = ctx.obj

    async def _main() -> None:
        engine = container.persistence.db_engine()
        try:
            await create_schema(engine)
        finally:
            await dispose_engine(engine)

    asyncio.run(_main())
    console.print("[green]✅ 数据表已创建。[/green]")


@app.command("upgrade")
def db_upgrade(
    ctx: typer.Context,
    revision: Annotated[str, typer.Argument(help="目标版本。")] = "head",
) -> None:
    """运行数据库迁移，将 Schema 升级到指定版本。"""
    url = ctx.obj.pydantic_config().database.url
    try:
        migrate_db.upgrade(url, revision)
    except Exception as e:
        console.print(f"[bold red]❌ 迁移命令执行失败: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]✅ 已升级到 {revision}。[/green]")


@app.command("downgrade")
def db_downgrade(
    ctx: typer.Context,
    revision: Annotated[str, typer.Argument(help="目标版本，'base' 表示全部回滚。")],
    yes: Annotated[bool, typer.Option("-y", "--yes", help="跳过确认。")] = False,
) -> None:
    """[危险] 回滚数据库迁移。"""
    url = ctx.obj.pydantic_config().database.url
    if not yes:
        typer.confirm(
            f"确定要把 '{migrate_db.mask_db_url(url)}' 回滚到 {revision} 吗?",
            abort=True,
        )
    try:
        migrate_db.downgrade(url, revision)
    except Exception as e:
        console.print(f"[bold red]❌ 回滚命令执行失败: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]✅ 已回滚到 {revision}。[/green]")


@app.command("current")
def db_current(ctx: typer.Context) -> None:
    """显示数据库当前的迁移版本。"""
    url = ctx.obj.pydantic_config().database.url
    revision = asyncio.run(migrate_db.get_current_revision(url))
    console.print(f"当前版本: [bold]{revision or '(未迁移)'}[/bold]")
