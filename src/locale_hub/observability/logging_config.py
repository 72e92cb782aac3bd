# src/locale_hub/observability/logging_config.py
"""
Locale-Hub 的日志配置：structlog 经 ProcessorFormatter 桥接到标准 logging。

两种输出格式（`logging.format`）：
- console：Rich 面板，本地时间；翻译定位字段（locale/namespace/translation_id 等）排在最前。
- json   ：每行一条 JSON，时间戳为 ISO-8601 UTC。

应用 logger (`locale_hub`) 使用配置的级别；根 logger 固定为 WARNING，
数据库驱动等第三方 logger 也压到 WARNING。
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any, Literal

import structlog
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from structlog.typing import Processor

APP_LOGGER_NAME = "locale_hub"
ROOT_LEVEL = "WARNING"

# 这些字段在面板中排在最前，便于按翻译定位一条日志
PINNED_FIELDS = ("key_name", "locale", "namespace", "translation_id", "actor")

_NOISY_LOGGERS = ("asyncio", "aiosqlite", "asyncpg", "sqlalchemy.engine")

_LEVEL_STYLES: dict[str, tuple[str, str]] = {
    "debug": ("cyan", "DEBUG   "),
    "info": ("green", "INFO    "),
    "warning": ("yellow", "WARNING "),
    "error": ("bold red", "ERROR   "),
    "critical": ("magenta", "CRITICAL"),
}


def _ordered_fields(kv: MutableMapping[str, Any]) -> list[tuple[str, Any]]:
    pinned = [(k, kv[k]) for k in PINNED_FIELDS if k in kv]
    rest = sorted((k, v) for k, v in kv.items() if k not in PINNED_FIELDS)
    return pinned + rest


class HybridPanelRenderer:
    """
    structlog 的最终渲染器：每条事件渲染为一个 Rich 面板。

    标题是等宽的级别标签加 logger 名与服务名，右下角是时间戳。
    超长或多行的字符串值去掉引号后折行显示。进程内第一次输出前补一个空行。
    """

    def __init__(self, *, long_value_at: int = 256, key_width: int = 15) -> None:
        self._console = Console()
        self._long_value_at = long_value_at
        self._key_width = key_width
        self._is_first_render = True

    def __call__(
        self, logger: Any, name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        event = str(event_dict.pop("event", "")).strip()
        if not event:
            return ""

        timestamp = event_dict.pop("timestamp", "")
        level = event_dict.pop("level", "info").lower()
        logger_name = event_dict.pop("logger", "unknown")
        service = event_dict.pop("service", None)
        event_dict.pop("_record", None)
        event_dict.pop("_logger", None)

        rendered = self._render(event, level, logger_name, service, timestamp, event_dict)
        if self._is_first_render:
            self._is_first_render = False
            return f"\n{rendered}"
        return rendered

    def _format_value(self, value: Any) -> str:
        text = repr(value)
        if isinstance(value, str) and (len(text) > self._long_value_at or "\n" in value):
            return value
        return text

    def _render(
        self,
        event: str,
        level: str,
        logger_name: str,
        service: str | None,
        timestamp: str,
        kv: MutableMapping[str, Any],
    ) -> str:
        border_style, level_text = _LEVEL_STYLES.get(level, ("dim", level.upper()))
        title = Text.from_markup(f"[{border_style}]{level_text}[/]")
        title.append(f" ({logger_name})", style="cyan dim")
        if service:
            title.append(f" [{service}]", style="dim")

        body: list[RenderableType] = [Text(event)]
        if kv:
            table = Table(show_header=False, show_edge=False, box=None, padding=(0, 1))
            table.add_column(style="dim", justify="right", width=self._key_width)
            table.add_column(style="bright_white", overflow="fold")
            for key, value in _ordered_fields(kv):
                table.add_row(f"{key} :", Text(self._format_value(value)))
            body.append(table)

        with self._console.capture() as capture:
            self._console.print(
                Panel(
                    Group(*body),
                    title=title,
                    title_align="left",
                    subtitle=Text(str(timestamp), style="dim") if timestamp else None,
                    subtitle_align="right",
                    border_style=border_style,
                    expand=False,
                    padding=(1, 2),
                )
            )
        return capture.get().rstrip()


def setup_logging(
    *,
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "console",
    service: str | None = None,
) -> None:
    """
    配置全局日志系统，由 DI 核心容器在 `init_resources` 时调用一次。

    Args:
        log_level: `locale_hub` logger 的最低级别。
        log_format: 'console' 或 'json'。
        service: 通过 contextvars 绑定到每条日志的服务名。
    """
    if log_format == "json":
        timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
        renderer: Processor = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        timestamper = structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False)
        renderer = HybridPanelRenderer()

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        timestamper,
    ]
    structlog.configure(
        processors=[
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(ROOT_LEVEL)
    logging.getLogger(APP_LOGGER_NAME).setLevel(log_level.upper())
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    if service:
        structlog.contextvars.bind_contextvars(service=service)

    structlog.get_logger(__name__).info(
        "日志系统已配置完成。", log_format=log_format, app_log_level=log_level.upper()
    )
