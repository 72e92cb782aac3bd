# src/locale_hub/domain/workflow.py
"""
翻译工作流的纯领域规则：状态迁移表。

状态机:
    draft -> review -> approved -> published
    draft -> approved
    review -> rejected -> draft
已发布的行在新版本发布时转为 superseded（由发布流程内部完成，不是公开操作）。
"""

from __future__ import annotations

from dataclasses import dataclass

from locale_hub.core.exceptions import StateError
from locale_hub.core.types import TranslationStatus, WorkflowAction


@dataclass(frozen=True)
class Transition:
    action: WorkflowAction
    allowed_from: frozenset[TranslationStatus]
    to_status: TranslationStatus


TRANSITIONS: dict[WorkflowAction, Transition] = {
    WorkflowAction.SUBMIT_FOR_REVIEW: Transition(
        WorkflowAction.SUBMIT_FOR_REVIEW,
        frozenset({TranslationStatus.DRAFT}),
        TranslationStatus.REVIEW,
    ),
    WorkflowAction.APPROVE: Transition(
        WorkflowAction.APPROVE,
        frozenset({TranslationStatus.DRAFT, TranslationStatus.REVIEW}),
        TranslationStatus.APPROVED,
    ),
    WorkflowAction.REJECT: Transition(
        WorkflowAction.REJECT,
        frozenset({TranslationStatus.REVIEW}),
        TranslationStatus.REJECTED,
    ),
    WorkflowAction.RETURN_TO_DRAFT: Transition(
        WorkflowAction.RETURN_TO_DRAFT,
        frozenset({TranslationStatus.REJECTED}),
        TranslationStatus.DRAFT,
    ),
    WorkflowAction.PUBLISH: Transition(
        WorkflowAction.PUBLISH,
        frozenset({TranslationStatus.APPROVED}),
        TranslationStatus.PUBLISHED,
    ),
}

# bulk_transition 的目标状态 -> 对应操作
ACTION_FOR_TARGET: dict[TranslationStatus, WorkflowAction] = {
    t.to_status: action for action, t in TRANSITIONS.items()
}


def action_for_target(status: TranslationStatus | str) -> WorkflowAction:
    """把批量操作的目标状态映射为工作流操作；没有对应操作时抛出 StateError。"""
    try:
        return ACTION_FOR_TARGET[TranslationStatus(status)]
    except (KeyError, ValueError):
        target = getattr(status, "value", status)
        raise StateError(f"不能通过工作流把翻译迁移到 {target!r} 状态") from None


def check_transition(
    action: WorkflowAction, current: TranslationStatus, *, translation_id: str
) -> Transition:
    """校验 `current` 状态下是否允许执行 `action`，不允许时抛出 StateError。"""
    transition = TRANSITIONS[action]
    if current not in transition.allowed_from:
        allowed = ", ".join(sorted(s.value for s in transition.allowed_from))
        raise StateError(
            f"操作 {action.value!r} 要求状态为 [{allowed}]，当前为 {current.value!r}",
            translation_id=translation_id,
        )
    return transition
