# src/locale_hub/core/interfaces.py
"""
定义了 Locale-Hub 中外部协作者与可替换基础设施的抽象接口协议 (Protocols)。
高层模块（如 Application 层）应依赖于这些抽象接口，而不是具体的实现类。
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .types import CacheEntry, Translation, WorkflowAction
    from .uow import IUnitOfWork


class CacheStore(Protocol):
    """语言包快照的存储。它是生成后 payload 的唯一写入者。"""

    async def get(self, locale: str, namespace: str | None) -> CacheEntry | None:
        """读取 (locale, namespace) 的条目；不存在时返回 None。"""
        ...

    async def save(
        self, entry: CacheEntry, generation_started_at: datetime
    ) -> CacheEntry:
        """
        写入（覆盖）一个条目并返回实际持久化后的结果。

        如果存储中的条目在 `generation_started_at` 之后被作废过，
        新条目会以 `is_valid=False` 写入，迫使下一次读取重新生成。
        """
        ...

    async def invalidate(
        self,
        locale: str | None,
        namespace: str | None,
        reason: str,
        at: datetime,
        uow: IUnitOfWork | None = None,
    ) -> int:
        """
        作废匹配的条目并返回受影响的条数。

        传入 `uow` 时加入调用方的事务（用于发布操作的原子性）。
        """
        ...


class Authorizer(Protocol):
    """工作流状态迁移的授权策略（由外部系统提供）。"""

    async def can_transition(
        self, actor_id: str, translation: Translation, action: WorkflowAction
    ) -> bool: ...
