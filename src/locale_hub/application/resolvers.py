# src/locale_hub/application/resolvers.py
"""
提供把 (key, locale) 解析为最终展示字符串的解析器。

解析路径永不抛出异常：找不到翻译或存储故障时退化为键名本身。
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Mapping, Optional

import structlog

from locale_hub.core.types import CategoryEntry, PublishedTranslation
from locale_hub.domain.bundle import MISSING_KEY_PLACEHOLDER, interpolate

if TYPE_CHECKING:
    from locale_hub.application.services import UsageRecorderService
    from locale_hub.config import LocaleHubConfig
    from locale_hub.infrastructure.uow import UowFactory

logger = structlog.get_logger(__name__)


class TranslationResolver:
    """负责解析单个键，并按类别批量读取已发布的翻译。"""

    def __init__(
        self,
        uow_factory: UowFactory,
        config: LocaleHubConfig,
        usage_recorder: Optional[UsageRecorderService] = None,
    ):
        self._uow_factory = uow_factory
        self._config = config
        self._usage_recorder = usage_recorder

    async def _lookup(
        self, key_name: str, locale: str, fallback_locale: str
    ) -> Optional[PublishedTranslation]:
        async with self._uow_factory() as uow:
            found = await uow.translations.find_published(key_name, locale)
            if found is None and fallback_locale != locale:
                found = await uow.translations.find_published(key_name, fallback_locale)
        return found

    async def resolve(
        self,
        key_name: str,
        locale: str,
        variables: Optional[Mapping[str, Any]] = None,
        fallback_locale: Optional[str] = None,
    ) -> str:
        """
        解析顺序：请求语言 -> 回退语言（默认 `locales.default_locale`）-> 键名。

        只有键声明过的插值变量才会被替换。
        """
        if not key_name:
            return MISSING_KEY_PLACEHOLDER
        fallback = fallback_locale or self._config.locales.default_locale

        t0 = time.perf_counter()
        try:
            found = await self._lookup(key_name, locale, fallback)
        except Exception:
            logger.exception(
                "解析翻译时读取存储失败，退化为键名", key_name=key_name, locale=locale
            )
            return key_name
        elapsed_ms = (time.perf_counter() - t0) * 1000

        if found is None:
            logger.debug("未找到已发布翻译", key_name=key_name, locale=locale, fallback=fallback)
            result = key_name
        else:
            result = interpolate(found.template, found.interpolation_vars, variables)
            if found.locale != locale:
                logger.debug(
                    "使用回退语言的翻译",
                    key_name=key_name,
                    locale=locale,
                    fallback=found.locale,
                )

        await self._record(key_name, locale, elapsed_ms)
        return result

    async def _record(self, key_name: str, locale: str, elapsed_ms: float) -> None:
        if self._usage_recorder is None or not self._config.usage.record_on_resolve:
            return
        try:
            await self._usage_recorder.record_usage(key_name, locale, elapsed_ms)
        except Exception:
            logger.warning(
                "记录使用统计失败，已忽略", key_name=key_name, locale=locale, exc_info=True
            )

    async def get_by_category(self, category: str, locale: str) -> list[CategoryEntry]:
        """返回某类别下 `locale` 的全部已发布翻译，按键名排序，不做语言回退。"""
        async with self._uow_factory() as uow:
            rows = await uow.translations.list_by_category(category, locale)
        return [
            CategoryEntry(
                key_name=row.key_name,
                value=row.value,
                icu_message=row.icu_message,
                interpolation_vars=row.interpolation_vars,
                supports_pluralization=row.supports_pluralization,
            )
            for row in rows
        ]
