# src/locale_hub/presentation/cli/__init__.py
"""
Locale-Hub CLI 的初始化模块。

入口点为 `locale_hub.presentation.cli.main:app`。
"""

from .main import app

__all__ = ["app"]
