# src/locale_hub/infrastructure/authorization.py
"""授权器的默认实现。真实的角色/策略判定由外部系统提供。"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from locale_hub.core.types import Translation, WorkflowAction


class AllowAllAuthorizer:
    """放行所有迁移。"""

    async def can_transition(
        self, actor_id: str, translation: Translation, action: WorkflowAction
    ) -> bool:
        return True


class StaticRoleAuthorizer:
    """
    按静态的“操作 -> 允许的操作者”表授权。

    表中没有出现的操作对所有人放行；出现的操作只对列出的操作者放行。
    """

    def __init__(self, grants: Mapping[WorkflowAction | str, Iterable[str]]):
        self._grants = {
            WorkflowAction(action): frozenset(actors) for action, actors in grants.items()
        }

    async def can_transition(
        self, actor_id: str, translation: Translation, action: WorkflowAction
    ) -> bool:
        allowed = self._grants.get(action)
        return allowed is None or actor_id in allowed
