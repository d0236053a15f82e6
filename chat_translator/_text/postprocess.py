# -*- coding: utf-8 -*-
"""对服务商输出做纯装饰性的确定性修饰。"""

from __future__ import annotations

# 各模式互不重叠，应用顺序不影响结果
SOFTENING_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("でしょうか？", "かな？"),
    ("ですね！", "だね！"),
    ("ありがとうございます", "ありがとう"),
    ("してください", "して"),
)

WRAPPING_QUOTES = ("「」", '""')


def _is_wrapped(text: str, opening: str, closing: str) -> bool:
    """只有首尾引号互相配对（内部不再出现引号）时才算外层引号。"""
    if len(text) < 2 or text[0] != opening or text[-1] != closing:
        return False
    inner = text[1:-1]
    return opening not in inner and closing not in inner


def postprocess(translated_text: str) -> str:
    """把几种生硬的句尾改为口语，并去掉模型常加的外层引号。"""
    text = translated_text.strip()
    for opening, closing in WRAPPING_QUOTES:
        if _is_wrapped(text, opening, closing):
            text = text[1:-1].strip()
            break
    for pattern, replacement in SOFTENING_REPLACEMENTS:
        text = text.replace(pattern, replacement)
    return text
