# chat_translator/__init__.py
"""Chat-Translator: 面向直播聊天的翻译编排引擎。

提供带缓存、请求合并、滑动窗口限流和服务商回退链的异步协调器。
"""

__version__ = "0.3.0"

from .config import ChatTranslatorConfig
from .coordinator import Coordinator
from .types import (
    ErrorKind,
    ProviderKind,
    RequestConfig,
    TranslationRequest,
    TranslationResult,
    TranslationStatus,
)

__all__ = [
    "__version__",
    "ChatTranslatorConfig",
    "Coordinator",
    "ErrorKind",
    "ProviderKind",
    "RequestConfig",
    "TranslationRequest",
    "TranslationResult",
    "TranslationStatus",
]
