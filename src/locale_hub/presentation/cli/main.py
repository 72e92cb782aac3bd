# src/locale_hub/presentation/cli/main.py
"""
Locale-Hub 命令行管理工具的入口。

主回调负责加载配置、创建 DI 容器并把它挂到 `ctx.obj` 上；
各子命令通过 `_utils.run_with_coordinator` 在独立的事件循环中执行。
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from locale_hub.bootstrap import create_app_config, create_container, resolve_env_mode

from .commands import cache, catalogue, db, query, translation, usage

app = typer.Typer(
    name="locale-hub",
    help="🌐 Locale-Hub 翻译缓存与解析引擎命令行管理工具。",
    add_completion=False,
    no_args_is_help=True,
)

# 注册所有子命令
app.add_typer(db.app, name="db")
app.add_typer(cache.app, name="cache")
app.add_typer(translation.app, name="translation")
app.add_typer(query.app, name="query")
app.add_typer(catalogue.app, name="catalogue")
app.add_typer(usage.app, name="usage")

console = Console()


@app.callback()
def main(ctx: typer.Context) -> None:
    """主回调函数，负责创建和装配 DI 容器。"""
    try:
        config = create_app_config(env_mode=resolve_env_mode())
        ctx.obj = create_container(config, service_name="locale-hub-cli")
    except Exception as e:
        console.print(
            "[bold red]❌ 启动失败：无法加载配置或初始化容器: "
            f"{escape(str(e))}[/bold red]"
        )
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
