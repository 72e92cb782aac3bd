# src/locale_hub/presentation/cli/_shared_options.py
"""
CLI 共享参数定义库

本模块使用 typing.Annotated 和 Typer 为所有可复用的 CLI 选项
提供单一事实来源。这确保了所有命令中相同参数的
帮助文本、短名称和行为完全一致。
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer

# --- 定位相关 ---
KEY_NAME_ARG = Annotated[str, typer.Argument(help="翻译键，如 'common.save'。")]

LOCALE_ARG = Annotated[str, typer.Argument(help="语言代码，如 'en'、'fr'。")]

TRANSLATION_ID_ARG = Annotated[str, typer.Argument(help="翻译记录 ID。")]

NAMESPACE_OPTION = Annotated[
    Optional[str],
    typer.Option("--namespace", "-n", help="命名空间；省略表示全部命名空间。"),
]

# --- 通用选项 ---
ACTOR_OPTION = Annotated[
    str, typer.Option("--actor", "-a", help="操作者身份。", show_default=True)
]
