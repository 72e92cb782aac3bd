# src/locale_hub/application/events.py
"""
定义了 Locale-Hub 系统中所有工作流事件的数据模型。

每个事件都在产生它的同一事务中写入 `lh_translation_history` 审计表。
"""

from locale_hub.core.types import Event


class TranslationCreated(Event):
    """新的草稿版本被创建时触发。"""

    event_type: str = "translation.created"


class TranslationSubmitted(Event):
    """草稿被提交审核时触发。"""

    event_type: str = "translation.submitted"


class TranslationApproved(Event):
    event_type: str = "translation.approved"


class TranslationRejected(Event):
    """审核中的翻译被拒绝时触发，reason 记录拒绝原因。"""

    event_type: str = "translation.rejected"


class TranslationReturnedToDraft(Event):
    event_type: str = "translation.returned_to_draft"


class TranslationPublished(Event):
    """一个翻译版本被发布时触发。"""

    event_type: str = "translation.published"


class TranslationSuperseded(Event):
    """旧的已发布版本被新版本取代时触发。"""

    event_type: str = "translation.superseded"
