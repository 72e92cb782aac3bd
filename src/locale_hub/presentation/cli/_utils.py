# src/locale_hub/presentation/cli/_utils.py
"""
CLI 内部共享的辅助工具，例如用于管理 Coordinator 生命周期的上下文管理器。
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from locale_hub.application.coordinator import Coordinator
from locale_hub.bootstrap import shutdown_container
from locale_hub.containers import ApplicationContainer
from locale_hub.core.types import TransitionResult

T = TypeVar("T")

console = Console()


@asynccontextmanager
async def get_coordinator(
    container: ApplicationContainer,
) -> AsyncGenerator[Coordinator, None]:
    """
    一个异步上下文管理器，用于安全地获取 Coordinator 并在结束时释放资源。
    这是 CLI 中所有与应用层交互的命令的推荐模式。
    """
    try:
        yield container.services.coordinator()
    finally:
        await shutdown_container(container)


def run_with_coordinator(
    ctx: typer.Context, func: Callable[[Coordinator], Awaitable[T]]
) -> T:
    """在一个新的事件循环中执行 `func(coordinator)`。"""
    container: ApplicationContainer = ctx.obj

    async def _main() -> T:
        async with get_coordinator(container) as coordinator:
            return await func(coordinator)

    return asyncio.run(_main())


def report_transition(result: TransitionResult, success_message: str) -> None:
    """打印工作流操作结果；失败时以退出码 1 结束命令。"""
    if result.success:
        console.print(f"[green]✅ {success_message}[/green]")
        return
    console.print(
        f"[bold red]❌ 操作失败 ({result.error_code}): "
        f"{escape(result.message or '')}[/bold red]"
    )
    raise typer.Exit(code=1)
