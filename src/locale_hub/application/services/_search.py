"""已发布翻译的全文检索。"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from locale_hub.core.types import SearchHit
from locale_hub.domain.search import rank_rows, tokenize

if TYPE_CHECKING:
    from locale_hub.config import LocaleHubConfig
    from locale_hub.infrastructure.uow import UowFactory

logger = structlog.get_logger(__name__)


class SearchService:
    def __init__(self, uow_factory: UowFactory, config: LocaleHubConfig):
        self._uow_factory = uow_factory
        self._config = config

    async def search(
        self,
        query: str,
        locale: str,
        categories: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> list[SearchHit]:
        """按相关度降序、key_name 升序返回至多 `limit` 条结果；空查询返回空列表。"""
        phrase = query.strip()
        if not phrase:
            return []
        effective_limit = min(
            limit if limit is not None else self._config.search.default_limit,
            self._config.search.max_limit,
        )
        if effective_limit <= 0:
            return []

        async with self._uow_factory() as uow:
            candidates = await uow.translations.search_candidates(
                locale, tokenize(phrase), phrase, categories
            )
        hits = rank_rows(candidates, phrase, effective_limit)
        logger.debug(
            "检索完成",
            query=phrase,
            locale=locale,
            candidates=len(candidates),
            returned=len(hits),
        )
        return hits
