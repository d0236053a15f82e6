"""翻译服务商适配器：封闭集合 {Google, Gemini, DeepL}。"""

from .base import BaseProvider, BaseProviderConfig
from .deepl import DeepLProvider, DeepLProviderConfig
from .gemini import GeminiProvider, GeminiProviderConfig
from .google import GoogleFreeProvider, GoogleFreeProviderConfig

__all__ = [
    "BaseProvider",
    "BaseProviderConfig",
    "DeepLProvider",
    "DeepLProviderConfig",
    "GeminiProvider",
    "GeminiProviderConfig",
    "GoogleFreeProvider",
    "GoogleFreeProviderConfig",
]
