# -*- coding: utf-8 -*-
from __future__ import annotations

import re
from collections.abc import Callable

import regex

# 预编译正则表达式以提高性能
RE_ELONGATION = regex.compile(r"(\p{L})\1{2,}")
RE_EMOJI_BEFORE_WORD = regex.compile(r"(\p{Extended_Pictographic}\uFE0F?)(?=[\p{L}\p{N}])")
RE_WORD_BEFORE_EMOJI = regex.compile(r"([\p{L}\p{N}])(?=\p{Extended_Pictographic})")
# 链接片段在归一化时原样保留
RE_URL_SPAN = re.compile(r"(?:https?://|www\.)\S+", re.IGNORECASE)

# 网络缩写 -> 展开形式；整词、不区分大小写匹配
ABBREVIATIONS: dict[str, str] = {
    "lol": "haha",
    "lmao": "hahaha",
    "btw": "by the way",
    "idk": "I don't know",
    "imo": "in my opinion",
    "omg": "oh my god",
    "tbh": "to be honest",
    "gg": "good game",
    "brb": "be right back",
    "np": "no problem",
    "ty": "thank you",
    "thx": "thanks",
    "pls": "please",
    "u": "you",
    "ur": "your",
}
RE_ABBREVIATION = re.compile(
    r"\b(" + "|".join(re.escape(k) for k in ABBREVIATIONS) + r")\b", re.IGNORECASE
)

# 以下用于跳过判定
RE_JAPANESE = re.compile(r"[一-龠ぁ-んァ-ヶー]")
RE_LAUGHTER_ONLY = re.compile(r"^(w|ｗ|草)+$", re.IGNORECASE)
RE_URL_ONLY = re.compile(r"^https?://\S+$")
RE_NO_WORDS = regex.compile(r"^[ｦ-ﾟ\d\s\p{P}\p{S}]+$")
RE_EMOJI_ONLY = regex.compile(r"^[\p{Extended_Pictographic}\uFE0F\u200D\s]+$")
RE_ASCII_ALNUM = re.compile(r"[a-zA-Z0-9]")
RE_REPEATED_CHAR = re.compile(r"^([a-zA-Z0-9])\1{2,}$")
RE_ASCII_LETTER = re.compile(r"[a-zA-Z]")


def _outside_urls(text: str, transform: Callable[[str], str]) -> str:
    """只对链接以外的片段应用 transform。"""
    parts: list[str] = []
    last = 0
    for match in RE_URL_SPAN.finditer(text):
        parts.append(transform(text[last : match.start()]))
        parts.append(match.group())
        last = match.end()
    parts.append(transform(text[last:]))
    return "".join(parts)


def collapse_elongations(text: str) -> str:
    """'soooo' -> 'soo'：三个及以上相同字母压缩为两个。"""
    return _outside_urls(text, lambda s: RE_ELONGATION.sub(r"\1\1", s))


def space_emoji(text: str) -> str:
    """在相邻的表情符号与字母数字之间插入空格。"""
    text = RE_EMOJI_BEFORE_WORD.sub(r"\1 ", text)
    return RE_WORD_BEFORE_EMOJI.sub(r"\1 ", text)


def expand_abbreviations(text: str) -> str:
    return _outside_urls(
        text,
        lambda s: RE_ABBREVIATION.sub(lambda m: ABBREVIATIONS[m.group(1).lower()], s),
    )


def normalize_chat_text(text: str) -> str:
    """
    对聊天文本做领域归一化，提高服务商的理解度。

    处理步骤（顺序固定）:
    1. 压缩拉长的字母。
    2. 分隔表情符号与字母数字。
    3. 展开常见网络缩写。
    """
    normalized = collapse_elongations(text)
    normalized = space_emoji(normalized)
    return expand_abbreviations(normalized)


def should_skip_translation(text: str | None) -> bool:
    """判断一条评论是否无需翻译（日语、纯笑声、纯链接、纯符号等）。"""
    if not text or not text.strip():
        return True
    trimmed = text.strip()
    if RE_JAPANESE.search(trimmed):
        return True
    if RE_LAUGHTER_ONLY.match(trimmed):
        return True
    if RE_URL_ONLY.match(trimmed):
        return True
    if RE_NO_WORDS.match(trimmed):
        return True
    if RE_EMOJI_ONLY.match(trimmed) and not RE_ASCII_ALNUM.search(trimmed):
        return True
    if RE_REPEATED_CHAR.match(trimmed):
        return True
    return len(RE_ASCII_LETTER.findall(trimmed)) <= 1
