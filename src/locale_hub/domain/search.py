# src/locale_hub/domain/search.py
"""检索的纯领域逻辑：分词与相关度打分。"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable, Sequence

from locale_hub.core.types import PublishedTranslation, SearchHit

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)

KEY_NAME_BONUS = 0.5
VALUE_SUBSTRING_BONUS = 0.25


def fold(*parts: str | None) -> str:
    """
    把若干文本按 Unicode 规则折叠大小写后以换行拼接。
    结果存入检索列 (`search_text` / `search_value`)，供 SQL 预筛做子串匹配。
    """
    return "\n".join(p.casefold() for p in parts if p)


def tokenize(text: str | None) -> list[str]:
    if not text:
        return []
    return [t.casefold() for t in _TOKEN_RE.findall(text)]


def score(row: PublishedTranslation, terms: Sequence[str], phrase: str) -> float:
    """
    计算一行的相关度；不匹配时返回 0。

    由三部分组成：
    - 词频：查询词在 value + description 中出现的次数，按文档长度归一；
    - 覆盖率：命中的不同查询词占全部查询词的比例；
    - 子串加成：整个查询作为子串出现在 key_name 或 value 中。
    """
    tokens = tokenize(f"{row.value} {row.description or ''}")
    counts = Counter(tokens)
    hits = sum(counts[t] for t in terms)
    matched_terms = sum(1 for t in set(terms) if counts[t])

    needle = phrase.casefold()
    in_key = bool(needle) and needle in row.key_name.casefold()
    in_value = bool(needle) and needle in row.value.casefold()

    if not hits and not in_key and not in_value:
        return 0.0

    rank = 0.0
    if hits:
        rank += hits / max(len(tokens), 1)
        rank += matched_terms / max(len(set(terms)), 1)
    if in_key:
        rank += KEY_NAME_BONUS
    if in_value:
        rank += VALUE_SUBSTRING_BONUS
    return round(rank, 6)


def rank_rows(
    rows: Iterable[PublishedTranslation], query: str, limit: int
) -> list[SearchHit]:
    """对候选行打分，按相关度降序、key_name 升序排序并截断到 `limit`。"""
    phrase = query.strip()
    terms = tokenize(phrase)
    hits: list[SearchHit] = []
    for row in rows:
        rank = score(row, terms, phrase)
        if rank <= 0:
            continue
        hits.append(
            SearchHit(
                translation_id=row.translation_id,
                key_name=row.key_name,
                category=row.category,
                locale=row.locale,
                value=row.value,
                description=row.description,
                rank=rank,
            )
        )
    hits.sort(key=lambda h: (-h.rank, h.key_name))
    return hits[:limit]
