# src/locale_hub/core/exceptions.py
"""
本模块定义了 Locale-Hub 项目中所有自定义的、语义化的异常类型。

使用自定义异常可以使错误处理更加精确和清晰，方便上层调用者根据
不同的错误类型执行不同的处理逻辑。
"""


class LocaleHubError(Exception):
    """
    所有 Locale-Hub 自定义异常的通用基类。
    捕获此异常可以处理所有源自本项目的预期错误。
    """

    pass


class ConfigurationError(LocaleHubError):
    """
    表示在加载、解析或验证配置时发生的错误。
    例如，.env 文件缺失关键字段，或配置值格式不正确。
    """

    pass


class UnsupportedLocaleError(LocaleHubError, ValueError):
    """请求的语言不在配置的受支持语言列表中。"""

    pass


class WorkflowError(LocaleHubError):
    """
    工作流操作失败的基类。

    `code` 与 `TransitionResult.error_code` 使用同一套词汇，服务层据此把
    异常转换为调用方可检查的结果对象。
    """

    code = "workflow_error"

    def __init__(self, message: str, *, translation_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.translation_id = translation_id


class StateError(WorkflowError):
    """尝试了当前状态下不允许的状态迁移（例如审批一条已发布的翻译）。"""

    code = "invalid_state"


class NotFoundError(WorkflowError, LookupError):
    """
    引用的翻译或翻译键不存在。
    继承自 LookupError 是为了保持与字典查找行为的一致性。
    """

    code = "not_found"


class ConflictError(WorkflowError):
    """并发写入者竞争同一 (key, locale) 的发布权，本次操作落败。"""

    code = "conflict"


class PermissionDeniedError(WorkflowError):
    """授权器拒绝了本次状态迁移。"""

    code = "forbidden"


class KeyCollisionError(LocaleHubError, ValueError):
    """两个翻译键映射到语言包中的同一位置（例如 `title` 与 `title.value`）。"""

    pass
