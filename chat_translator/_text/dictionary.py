# -*- coding: utf-8 -*-
"""用户词典：把 `original,translation` 行编译为替换规则，一次编译，多次应用。"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class DictionaryEntry:
    original: str
    translated: str
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class DictionaryRules:
    """按 `original` 长度降序排列的替换规则，较长的词条优先匹配。"""

    entries: tuple[DictionaryEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def apply(self, text: str) -> str:
        for entry in self.entries:
            # 使用函数作为替换值，避免译文中的反斜杠被当作转义
            text = entry.pattern.sub(lambda _m, t=entry.translated: t, text)
        return text


EMPTY_RULES = DictionaryRules()


def parse_dictionary(source: str | None) -> list[tuple[str, str]]:
    """
    解析换行分隔的词典文本。

    只有第一个逗号用于分割（译文本身可以包含逗号）；
    缺少逗号或任一侧为空的行会被丢弃。
    """
    if not source:
        return []
    pairs: list[tuple[str, str]] = []
    for line in source.splitlines():
        original, sep, translated = line.partition(",")
        if not sep:
            continue
        original, translated = original.strip(), translated.strip()
        if original and translated:
            pairs.append((original, translated))
    return pairs


@functools.lru_cache(maxsize=32)
def compile_dictionary(source: str | None) -> DictionaryRules:
    pairs = parse_dictionary(source)
    if not pairs:
        return EMPTY_RULES
    pairs.sort(key=lambda p: len(p[0]), reverse=True)
    return DictionaryRules(
        entries=tuple(
            DictionaryEntry(
                original=original,
                translated=translated,
                pattern=re.compile(re.escape(original), re.IGNORECASE),
            )
            for original, translated in pairs
        )
    )


def invalidate_compiled_dictionaries() -> None:
    """在外部设置变更后丢弃已编译的词典。"""
    compile_dictionary.cache_clear()
