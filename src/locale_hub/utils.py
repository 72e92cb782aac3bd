# src/locale_hub/utils.py
"""
本模块包含项目范围内的通用工具函数。
语言代码校验全面采用 langcodes 库。
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

from langcodes import Language
from langcodes.tag_parser import LanguageTagError

# 语言子标签应该由 2-3 个字母组成 (BCP 47)
LANGUAGE_SUBTAG_PATTERN = re.compile(r"^[a-zA-Z]{2,3}$")


def validate_lang_codes(lang_codes: list[str]) -> None:
    """使用 `langcodes` 库校验语言代码列表中的每个代码是否符合 BCP 47 规范。"""
    for code in lang_codes:
        try:
            lang = Language.get(code)
            if not lang.language or not LANGUAGE_SUBTAG_PATTERN.match(lang.language):
                raise LanguageTagError(
                    f"Tag '{code}' lacks a valid 2-3 letter language subtag."
                )
        except LanguageTagError as e:
            raise ValueError(f"提供的语言代码 '{code}' 格式无效。原因: {e}") from e


def utc_now() -> datetime:
    """返回带时区信息的当前 UTC 时间。"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """
    将数据库读出的时间统一为 UTC aware。

    SQLite 不保存时区信息，读出的是 naive 时间；写入时我们总是写 UTC，
    因此 naive 值按 UTC 解释即可。
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_today(now: datetime | None = None) -> date:
    """返回 UTC 日历日，用作使用统计的分桶键。"""
    return (now or utc_now()).astimezone(timezone.utc).date()


def count_words(text: str) -> int:
    """按空白切分统计词数。"""
    return len(text.split())
