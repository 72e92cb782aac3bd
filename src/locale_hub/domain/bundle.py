# src/locale_hub/domain/bundle.py
"""
语言包 (bundle) 构建与模板插值的纯函数。

bundle 形状为 `{section: {leaf: value}}`：键名按第一个 `.` 切分，
更深层级的剩余部分作为一个带点的叶子名保留在 section 内。
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from locale_hub.core.types import PublishedTranslation

DEFAULT_LEAF = "value"
MISSING_KEY_PLACEHOLDER = "[missing key]"

# 只匹配简单占位符 `{name}`；ICU 的 `{count, plural, ...}` 与 `{# item}` 不会命中。
_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def split_key_name(key_name: str) -> tuple[str, str]:
    """把 `common.save` 切分为 (`common`, `save`)；无点的键落在 `value` 叶子上。"""
    section, _, leaf = key_name.partition(".")
    return section, leaf or DEFAULT_LEAF


def colliding_key_names(key_name: str) -> set[str]:
    """
    返回与 `key_name` 落在同一语言包位置的其他键名。

    只有 `value` 叶子会被多个键名共享：`title`、`title.` 与 `title.value`
    都映射到 (`title`, `value`)。
    """
    section, leaf = split_key_name(key_name)
    if leaf != DEFAULT_LEAF:
        return set()
    return {section, f"{section}.", f"{section}.{DEFAULT_LEAF}"} - {key_name}


def build_bundle(rows: Iterable[PublishedTranslation]) -> dict[str, dict[str, str]]:
    """
    从已发布的翻译构建嵌套语言包。

    输出只依赖行内容：按 key_name 排序后构建，因此相同输入总是产生
    键顺序一致的字典，序列化后逐字节相同。ICU 模板不进入语言包。
    """
    bundle: dict[str, dict[str, str]] = {}
    for row in sorted(rows, key=lambda r: r.key_name):
        section, leaf = split_key_name(row.key_name)
        bundle.setdefault(section, {})[leaf] = row.value
    return bundle


def interpolate(
    template: str, declared_vars: Iterable[str], variables: Mapping[str, Any] | None
) -> str:
    """
    白名单插值：只替换键声明过且调用方提供了的变量。

    未声明的变量即使提供了也不会替换；声明了但未提供的变量保留原占位符。
    替换是单遍的，替换进去的值不会被再次展开。
    """
    if not variables:
        return template
    allowed = set(declared_vars)
    if not allowed:
        return template

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in allowed and name in variables:
            return str(variables[name])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_substitute, template)
