"""
提供一个统一的、可注入的事件发布服务。
"""

from __future__ import annotations

import structlog

from locale_hub.core.types import Event
from locale_hub.core.uow import IUnitOfWork

logger = structlog.get_logger(__name__)


def _status_value(status) -> str | None:
    return status.value if status is not None else None


class EventPublisher:
    """负责把工作流事件写入 UoW 的审计表的通用服务。"""

    async def publish(self, uow: IUnitOfWork, event: Event) -> None:
        """
        在一个给定的工作单元 (UoW) 上下文中发布一个事件。

        Args:
            uow: 当前的 Unit of Work 实例。
            event: 要发布的事件对象。
        """
        await uow.history.add(
            translation_id=event.translation_id,
            key_id=event.key_id,
            locale=event.locale,
            action=event.event_type,
            actor=event.actor,
            old_status=_status_value(event.old_status),
            new_status=_status_value(event.new_status),
            old_value=event.old_value,
            new_value=event.new_value,
            change_reason=event.reason,
        )
        logger.debug(
            "工作流事件已记录",
            event_type=event.event_type,
            translation_id=event.translation_id,
            actor=event.actor,
        )
