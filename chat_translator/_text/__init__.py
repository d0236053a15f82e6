"""
文本前后处理：领域归一化、用户词典替换、跳过判定与输出修饰。
全部为纯函数，不依赖引擎状态。
"""

from __future__ import annotations

from .dictionary import (
    DictionaryRules,
    compile_dictionary,
    invalidate_compiled_dictionaries,
    parse_dictionary,
)
from .normalizers import normalize_chat_text, should_skip_translation
from .postprocess import postprocess


def preprocess(text: str, dictionary: str | DictionaryRules | None = None) -> str:
    """先做领域归一化，再应用用户词典。"""
    rules = (
        dictionary
        if isinstance(dictionary, DictionaryRules)
        else compile_dictionary(dictionary or "")
    )
    return rules.apply(normalize_chat_text(text))


__all__ = [
    "DictionaryRules",
    "compile_dictionary",
    "invalidate_compiled_dictionaries",
    "normalize_chat_text",
    "parse_dictionary",
    "postprocess",
    "preprocess",
    "should_skip_translation",
]
