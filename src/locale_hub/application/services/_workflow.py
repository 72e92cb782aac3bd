"""翻译工作流（草稿 -> 审核 -> 批准 -> 发布）的应用服务。"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy.exc import IntegrityError

from locale_hub.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StateError,
    UnsupportedLocaleError,
    WorkflowError,
)
from locale_hub.core.types import (
    BulkTransitionResult,
    HistoryRecord,
    Translation,
    TranslationStatus,
    TransitionResult,
    WorkflowAction,
)
from locale_hub.domain.workflow import action_for_target, check_transition
from locale_hub.utils import count_words, utc_now

from ..events import (
    TranslationApproved,
    TranslationCreated,
    TranslationPublished,
    TranslationRejected,
    TranslationReturnedToDraft,
    TranslationSubmitted,
    TranslationSuperseded,
)

if TYPE_CHECKING:
    from locale_hub.config import LocaleHubConfig
    from locale_hub.core.interfaces import Authorizer, CacheStore
    from locale_hub.core.uow import IUnitOfWork
    from locale_hub.infrastructure.uow import UowFactory

    from ._event_publisher import EventPublisher

logger = structlog.get_logger(__name__)

BULK_PUBLISH_REASON = "bulk publish operation"


def publish_reason(translation_id: str) -> str:
    return f"translation published: {translation_id}"


class WorkflowService:
    """
    管理翻译记录的状态迁移。

    每个操作都是一个独立事务；非法迁移、找不到记录、授权拒绝与并发冲突
    都以 `TransitionResult(success=False)` 报告，且不修改任何状态。
    存储层故障照常向上抛出。
    """

    def __init__(
        self,
        uow_factory: UowFactory,
        config: LocaleHubConfig,
        cache_store: CacheStore,
        authorizer: Authorizer,
        event_publisher: EventPublisher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._uow_factory = uow_factory
        self._config = config
        self._cache_store = cache_store
        self._authorizer = authorizer
        self._event_publisher = event_publisher
        self._clock = clock

        # 按 (key_id, locale) 串行化发布的分段锁池
        self._lock_pool_size = config.workflow.lock_pool_size
        self._key_locks: list[asyncio.Lock] = [
            asyncio.Lock() for _ in range(self._lock_pool_size)
        ]

    def _lock_for(self, key_id: str, locale: str) -> asyncio.Lock:
        return self._key_locks[hash((key_id, locale)) % self._lock_pool_size]

    async def _authorize(
        self, actor_id: str, translation: Translation, action: WorkflowAction
    ) -> None:
        if not await self._authorizer.can_transition(actor_id, translation, action):
            raise PermissionDeniedError(
                f"操作者 {actor_id!r} 无权执行 {action.value!r}",
                translation_id=translation.id,
            )

    @staticmethod
    def _failure(
        translation_id: str,
        error: WorkflowError,
        from_status: TranslationStatus | None = None,
    ) -> TransitionResult:
        return TransitionResult(
            success=False,
            translation_id=translation_id,
            from_status=from_status,
            error_code=error.code,
            message=error.message,
        )

    async def _load(self, uow: IUnitOfWork, translation_id: str) -> Translation:
        current = await uow.translations.get_by_id(translation_id)
        if current is None:
            raise NotFoundError(
                f"翻译记录不存在: {translation_id}", translation_id=translation_id
            )
        return current

    # ------------------------------------------------------------------ #
    # 草稿创建
    # ------------------------------------------------------------------ #

    async def create_draft(
        self,
        key_name: str,
        locale: str,
        value: str,
        icu_message: str | None = None,
        actor_id: str = "system",
    ) -> str:
        """
        为 (key, locale) 创建下一个版本的草稿，返回新记录 ID。

        已发布的记录不会被原地修改；新内容总是走一条新的草稿。
        """
        if locale not in self._config.locales.supported:
            raise UnsupportedLocaleError(
                f"语言 {locale!r} 不在受支持列表 {self._config.locales.supported} 中"
            )
        try:
            async with self._uow_factory() as uow:
                key = await uow.keys.get_by_name(key_name)
                if key is None or not key.is_active:
                    raise NotFoundError(f"翻译键不存在或未激活: {key_name}")

                latest = await uow.translations.get_latest(key.id, locale)
                translation_id = await uow.translations.add(
                    key_id=key.id,
                    locale=locale,
                    value=value,
                    icu_message=icu_message,
                    status=TranslationStatus.DRAFT.value,
                    version=(latest.version + 1) if latest else 1,
                    previous_value=latest.value if latest else None,
                    word_count=count_words(value),
                    character_count=len(value),
                    created_by=actor_id,
                    updated_by=actor_id,
                )
                created = await self._load(uow, translation_id)
                await self._authorize(actor_id, created, WorkflowAction.CREATE)
                await self._event_publisher.publish(
                    uow,
                    TranslationCreated(
                        translation_id=translation_id,
                        key_id=key.id,
                        locale=locale,
                        actor=actor_id,
                        new_status=TranslationStatus.DRAFT,
                        old_value=created.previous_value,
                        new_value=value,
                    ),
                )
        except IntegrityError as e:
            raise ConflictError(
                f"并发创建 {key_name}/{locale} 的草稿版本冲突"
            ) from e

        logger.info(
            "草稿已创建",
            translation_id=translation_id,
            key_name=key_name,
            locale=locale,
            version=created.version,
        )
        return translation_id

    # ------------------------------------------------------------------ #
    # 普通状态迁移
    # ------------------------------------------------------------------ #

    async def _transition(
        self,
        action: WorkflowAction,
        translation_id: str,
        actor_id: str,
        event_cls: type,
        *,
        extra_values: Callable[[datetime], dict[str, Any]] | None = None,
        reason: str | None = None,
    ) -> TransitionResult:
        from_status: TranslationStatus | None = None
        try:
            async with self._uow_factory() as uow:
                current = await self._load(uow, translation_id)
                from_status = current.status
                transition = check_transition(
                    action, current.status, translation_id=translation_id
                )
                await self._authorize(actor_id, current, action)

                now = self._clock()
                values = {"updated_by": actor_id, "updated_at": now}
                if extra_values is not None:
                    values.update(extra_values(now))
                updated = await uow.translations.transition(
                    translation_id,
                    transition.allowed_from,
                    transition.to_status,
                    **values,
                )
                if not updated:
                    raise ConflictError(
                        "记录状态已被并发修改", translation_id=translation_id
                    )
                await self._event_publisher.publish(
                    uow,
                    event_cls(
                        translation_id=translation_id,
                        key_id=current.key_id,
                        locale=current.locale,
                        actor=actor_id,
                        old_status=current.status,
                        new_status=transition.to_status,
                        reason=reason,
                    ),
                )
        except WorkflowError as e:
            logger.warning(
                "工作流操作被拒绝",
                action=action.value,
                translation_id=translation_id,
                error_code=e.code,
                reason=e.message,
            )
            return self._failure(translation_id, e, from_status)

        logger.info(
            "工作流状态已迁移",
            action=action.value,
            translation_id=translation_id,
            from_status=from_status.value,
            to_status=transition.to_status.value,
            actor=actor_id,
        )
        return TransitionResult(
            success=True,
            translation_id=translation_id,
            from_status=from_status,
            to_status=transition.to_status,
        )

    async def submit_for_review(
        self, translation_id: str, actor_id: str = "system"
    ) -> TransitionResult:
        return await self._transition(
            WorkflowAction.SUBMIT_FOR_REVIEW,
            translation_id,
            actor_id,
            TranslationSubmitted,
        )

    async def approve(self, translation_id: str, approver_id: str) -> TransitionResult:
        """批准草稿或审核中的翻译，记录批准人与时间。"""
        return await self._transition(
            WorkflowAction.APPROVE,
            translation_id,
            approver_id,
            TranslationApproved,
            extra_values=lambda now: {"approved_by": approver_id, "approved_at": now},
        )

    async def reject(
        self, translation_id: str, reason: str, actor_id: str = "system"
    ) -> TransitionResult:
        return await self._transition(
            WorkflowAction.REJECT,
            translation_id,
            actor_id,
            TranslationRejected,
            extra_values=lambda now: {"rejection_reason": reason},
            reason=reason,
        )

    async def return_to_draft(
        self, translation_id: str, actor_id: str = "system"
    ) -> TransitionResult:
        """把被拒绝的翻译退回草稿以便返工。"""
        return await self._transition(
            WorkflowAction.RETURN_TO_DRAFT,
            translation_id,
            actor_id,
            TranslationReturnedToDraft,
        )

    # ------------------------------------------------------------------ #
    # 发布
    # ------------------------------------------------------------------ #

    async def publish(self, translation_id: str, publisher_id: str) -> TransitionResult:
        """
        发布一条已批准的翻译。

        在同一事务内：取代该 (key, locale) 旧的已发布记录、标记本记录为已发布、
        写审计记录，并作废对应 (locale, namespace) 的缓存。三者要么全部生效，
        要么全部回滚。
        """
        return await self._publish(translation_id, publisher_id, invalidate=True)

    async def _publish(
        self, translation_id: str, publisher_id: str, *, invalidate: bool
    ) -> TransitionResult:
        async with self._uow_factory() as uow:
            located = await uow.translations.get_by_id(translation_id)
        if located is None:
            return self._failure(
                translation_id,
                NotFoundError(f"翻译记录不存在: {translation_id}"),
            )

        from_status: TranslationStatus | None = located.status
        namespace: str | None = None
        reason = publish_reason(translation_id)
        async with self._lock_for(located.key_id, located.locale):
            try:
                async with self._uow_factory() as uow:
                    # 持锁后重新读取，拿到最新状态
                    current = await self._load(uow, translation_id)
                    from_status = current.status
                    transition = check_transition(
                        WorkflowAction.PUBLISH, current.status, translation_id=translation_id
                    )
                    await self._authorize(publisher_id, current, WorkflowAction.PUBLISH)

                    key = await uow.keys.get_by_id(current.key_id)
                    namespace = key.namespace if key else None
                    now = self._clock()

                    superseded = await uow.translations.supersede_published(
                        current.key_id,
                        current.locale,
                        exclude_id=translation_id,
                        at=now,
                        actor=publisher_id,
                    )
                    updated = await uow.translations.transition(
                        translation_id,
                        transition.allowed_from,
                        transition.to_status,
                        published_by=publisher_id,
                        published_at=now,
                        updated_by=publisher_id,
                        updated_at=now,
                    )
                    if not updated:
                        raise ConflictError(
                            "记录状态已被并发修改", translation_id=translation_id
                        )

                    for old in superseded:
                        await self._event_publisher.publish(
                            uow,
                            TranslationSuperseded(
                                translation_id=old.id,
                                key_id=old.key_id,
                                locale=old.locale,
                                actor=publisher_id,
                                old_status=TranslationStatus.PUBLISHED,
                                new_status=TranslationStatus.SUPERSEDED,
                                reason=f"superseded by {translation_id}",
                            ),
                        )
                    await self._event_publisher.publish(
                        uow,
                        TranslationPublished(
                            translation_id=translation_id,
                            key_id=current.key_id,
                            locale=current.locale,
                            actor=publisher_id,
                            old_status=current.status,
                            new_status=TranslationStatus.PUBLISHED,
                            old_value=superseded[0].value if superseded else None,
                            new_value=current.value,
                        ),
                    )
                    if invalidate:
                        await self._cache_store.invalidate(
                            current.locale, namespace, reason, now, uow=uow
                        )
            except IntegrityError:
                # 跨进程的并发发布由部分唯一索引兜底
                error = ConflictError(
                    "同一键与语言已有其他版本被并发发布", translation_id=translation_id
                )
                logger.warning(
                    "发布冲突", translation_id=translation_id, error_code=error.code
                )
                return self._failure(translation_id, error, from_status)
            except WorkflowError as e:
                logger.warning(
                    "发布被拒绝",
                    translation_id=translation_id,
                    error_code=e.code,
                    reason=e.message,
                )
                return self._failure(translation_id, e, from_status)

            if invalidate:
                # 提交前开始的并发生成可能读到旧数据；提交后再作废一次
                await self._cache_store.invalidate(
                    current.locale, namespace, reason, self._clock()
                )

        logger.info(
            "翻译已发布",
            translation_id=translation_id,
            key_id=current.key_id,
            locale=current.locale,
            superseded=[t.id for t in superseded],
            publisher=publisher_id,
        )
        return TransitionResult(
            success=True,
            translation_id=translation_id,
            from_status=from_status,
            to_status=TranslationStatus.PUBLISHED,
        )

    # ------------------------------------------------------------------ #
    # 批量
    # ------------------------------------------------------------------ #

    async def bulk_transition(
        self,
        translation_ids: Iterable[str],
        new_status: TranslationStatus,
        actor_id: str,
        reason: str | None = None,
    ) -> BulkTransitionResult:
        """
        对一组记录逐条执行同一迁移，每条记录一个独立事务。

        目标为 published 时不做逐条作废，而是在最后做一次全量作废。
        """
        ids = list(dict.fromkeys(translation_ids))
        report = BulkTransitionResult()
        try:
            action = action_for_target(new_status)
        except StateError as e:
            report.failed = [self._failure(tid, e) for tid in ids]
            return report

        for tid in ids:
            if action is WorkflowAction.PUBLISH:
                result = await self._publish(tid, actor_id, invalidate=False)
            elif action is WorkflowAction.APPROVE:
                result = await self.approve(tid, actor_id)
            elif action is WorkflowAction.REJECT:
                result = await self.reject(tid, reason or "bulk rejection", actor_id)
            elif action is WorkflowAction.SUBMIT_FOR_REVIEW:
                result = await self.submit_for_review(tid, actor_id)
            else:
                result = await self.return_to_draft(tid, actor_id)

            if result.success:
                report.succeeded.append(tid)
            else:
                report.failed.append(result)

        if action is WorkflowAction.PUBLISH and report.succeeded:
            report.invalidated = await self._cache_store.invalidate(
                None, None, BULK_PUBLISH_REASON, self._clock()
            )

        logger.info(
            "批量迁移完成",
            action=action.value,
            succeeded=len(report.succeeded),
            failed=len(report.failed),
            invalidated=report.invalidated,
        )
        return report

    # ------------------------------------------------------------------ #
    # 审计
    # ------------------------------------------------------------------ #

    async def get_history(self, translation_id: str) -> list[HistoryRecord]:
        """按时间顺序返回一条翻译记录的全部审计记录。"""
        async with self._uow_factory() as uow:
            return await uow.history.list_for_translation(translation_id)
