"""
从 JSON 目录文档批量导入翻译键与翻译。

文档形状::

    {
      "keys": [{"key_name": "common.save", "category": "common", ...}],
      "translations": {
        "en": {"common.save": "Save"},
        "fr": {"common.greeting": {"value": "Bonjour {name}", "icu_message": null}}
      }
    }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, Field, field_validator

from locale_hub.core.exceptions import (
    KeyCollisionError,
    NotFoundError,
    UnsupportedLocaleError,
)
from locale_hub.core.types import KeyPriority, TransitionResult, TranslationStatus
from locale_hub.domain.bundle import colliding_key_names, split_key_name

if TYPE_CHECKING:
    from locale_hub.config import LocaleHubConfig
    from locale_hub.core.uow import IUnitOfWork
    from locale_hub.infrastructure.uow import UowFactory

    from ._workflow import WorkflowService

logger = structlog.get_logger(__name__)

CATALOGUE_ACTOR = "catalogue"


class CatalogueKey(BaseModel):
    key_name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    namespace: Optional[str] = None
    description: Optional[str] = None
    interpolation_vars: list[str] = Field(default_factory=list)
    supports_pluralization: bool = False
    priority: KeyPriority = KeyPriority.MEDIUM
    is_active: bool = True


class CatalogueValue(BaseModel):
    value: str
    icu_message: Optional[str] = None


class CatalogueDocument(BaseModel):
    keys: list[CatalogueKey] = Field(default_factory=list)
    translations: dict[str, dict[str, Union[str, CatalogueValue]]] = Field(
        default_factory=dict
    )

    @field_validator("keys")
    @classmethod
    def _unique_key_names(cls, v: list[CatalogueKey]) -> list[CatalogueKey]:
        names = [k.key_name for k in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"重复的 key_name: {duplicates}")
        slots: dict[tuple[str, str], list[str]] = {}
        for name in names:
            slots.setdefault(split_key_name(name), []).append(name)
        clashes = sorted(group for group in slots.values() if len(group) > 1)
        if clashes:
            raise ValueError(f"以下键名映射到语言包中的同一位置: {clashes}")
        return v


class CatalogueLoadReport(BaseModel):
    keys_upserted: int = 0
    drafts_created: int = 0
    published: list[str] = Field(default_factory=list)
    skipped: int = 0
    missing_keys: list[str] = Field(default_factory=list)
    failed: list[TransitionResult] = Field(default_factory=list)
    invalidated: int = 0


class CatalogueService:
    """把目录文档驱动过完整的 草稿 -> 批准 -> 发布 流程。"""

    def __init__(
        self,
        uow_factory: UowFactory,
        config: LocaleHubConfig,
        workflow: WorkflowService,
    ):
        self._uow_factory = uow_factory
        self._config = config
        self._workflow = workflow

    async def load(
        self,
        document: Union[CatalogueDocument, Mapping[str, Any]],
        actor_id: str = CATALOGUE_ACTOR,
    ) -> CatalogueLoadReport:
        """
        导入一份目录。与当前已发布内容完全相同的值会被跳过；
        结束时由批量发布统一作废一次缓存。

        Raises:
            pydantic.ValidationError: 文档结构不合法。
            UnsupportedLocaleError: 文档包含未配置的语言。
            KeyCollisionError: 文档中的键与已登记的键占用语言包的同一位置。
        """
        doc = (
            document
            if isinstance(document, CatalogueDocument)
            else CatalogueDocument.model_validate(document)
        )
        unsupported = sorted(
            set(doc.translations) - set(self._config.locales.supported)
        )
        if unsupported:
            raise UnsupportedLocaleError(f"目录中包含不受支持的语言: {unsupported}")

        report = CatalogueLoadReport()
        async with self._uow_factory() as uow:
            await self._reject_slot_collisions(uow, doc.keys)
            for key in doc.keys:
                await uow.keys.upsert(
                    key.key_name, **key.model_dump(exclude={"key_name"})
                )
            report.keys_upserted = len(doc.keys)

        draft_ids = []
        for locale in sorted(doc.translations):
            for key_name, raw in sorted(doc.translations[locale].items()):
                entry = CatalogueValue(value=raw) if isinstance(raw, str) else raw
                if await self._is_unchanged(key_name, locale, entry):
                    report.skipped += 1
                    continue
                try:
                    draft_ids.append(
                        await self._workflow.create_draft(
                            key_name,
                            locale,
                            entry.value,
                            icu_message=entry.icu_message,
                            actor_id=actor_id,
                        )
                    )
                except NotFoundError:
                    report.missing_keys.append(key_name)
        report.drafts_created = len(draft_ids)

        if draft_ids:
            approved = await self._workflow.bulk_transition(
                draft_ids, TranslationStatus.APPROVED, actor_id
            )
            published = await self._workflow.bulk_transition(
                approved.succeeded, TranslationStatus.PUBLISHED, actor_id
            )
            report.published = published.succeeded
            report.failed = approved.failed + published.failed
            report.invalidated = published.invalidated

        logger.info(
            "目录导入完成",
            keys=report.keys_upserted,
            drafts=report.drafts_created,
            published=len(report.published),
            skipped=report.skipped,
            missing_keys=len(report.missing_keys),
            failed=len(report.failed),
        )
        return report

    async def _reject_slot_collisions(
        self, uow: IUnitOfWork, keys: list[CatalogueKey]
    ) -> None:
        """已登记的键与文档中的键不能占用语言包的同一位置。"""
        for key in keys:
            clashing = await uow.keys.find_existing(colliding_key_names(key.key_name))
            if clashing:
                raise KeyCollisionError(
                    f"键 {key.key_name!r} 与已登记的键 {clashing} "
                    "映射到语言包中的同一位置"
                )

    async def _is_unchanged(
        self, key_name: str, locale: str, entry: CatalogueValue
    ) -> bool:
        async with self._uow_factory() as uow:
            key = await uow.keys.get_by_name(key_name)
            if key is None:
                return False
            current = await uow.translations.get_published(key.id, locale)
        return (
            current is not None
            and current.value == entry.value
            and current.icu_message == entry.icu_message
        )
