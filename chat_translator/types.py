# chat_translator/types.py
"""
本模块定义了 Chat-Translator 系统的核心数据类型。
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from chat_translator.utils import clean_credentials


class ProviderKind(str, Enum):
    """封闭的翻译服务商集合。"""

    GOOGLE = "google"
    GEMINI = "gemini"
    DEEPL = "deepl"


class ErrorKind(str, Enum):
    """结果错误通道中的错误分类。"""

    CONFIGURATION_MISSING = "configuration_missing"
    TRANSPORT = "transport"
    MALFORMED_RESPONSE = "malformed_response"
    RATE_EXCEEDED = "rate_exceeded"
    EMPTY_INPUT = "empty_input"
    INTERNAL = "internal"


class TranslationStatus(str, Enum):
    """单次翻译请求的最终状态。"""

    TRANSLATED = "TRANSLATED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class ProviderSuccess(BaseModel):
    """代表从翻译服务商成功返回的单次翻译结果。"""

    translated_text: str


class ProviderError(BaseModel):
    """代表从翻译服务商返回的单次失败结果。"""

    error_kind: ErrorKind
    error_message: str


ProviderResult = Union[ProviderSuccess, ProviderError]


class CacheEntry(BaseModel):
    """响应缓存中的一条记录。键是未经处理的原始输入文本。"""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str
    created_at: float


class RequestConfig(BaseModel):
    """
    随每个请求传入的配置快照（由外部设置组件持久化）。

    在单个请求内不可变；凭证轮换索引在请求之间变化，
    由 Coordinator 持有，不属于快照。
    """

    model_config = ConfigDict(frozen=True)

    provider: ProviderKind = ProviderKind.GOOGLE
    credentials: tuple[str, ...] = ()
    fallback_enabled: bool = True
    dictionary: str = ""

    @field_validator("credentials", mode="before")
    @classmethod
    def drop_blank_credentials(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, (list, tuple)):
            return clean_credentials(v)
        return v


class TranslationRequest(BaseModel):
    """一条待翻译的原始文本及其配置快照。"""

    model_config = ConfigDict(frozen=True)

    raw_text: str
    config: RequestConfig = RequestConfig()


class TranslationResult(BaseModel):
    """由 Coordinator 返回给调用方的结果对象。"""

    status: TranslationStatus
    translation: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    provider: Optional[ProviderKind] = None
    from_cache: bool = False

    @model_validator(mode="after")
    def check_consistency(self) -> "TranslationResult":
        if self.status == TranslationStatus.TRANSLATED and self.translation is None:
            raise ValueError("TRANSLATED 状态的结果必须包含 translation。")
        if self.status == TranslationStatus.FAILED and (
            self.error is None or self.error_kind is None
        ):
            raise ValueError("FAILED 状态的结果必须包含 error 与 error_kind。")
        return self

    @classmethod
    def success(
        cls,
        text: str,
        provider: Optional[ProviderKind] = None,
        from_cache: bool = False,
    ) -> "TranslationResult":
        return cls(
            status=TranslationStatus.TRANSLATED,
            translation=text,
            provider=provider,
            from_cache=from_cache,
        )

    @classmethod
    def failure(
        cls,
        error_kind: ErrorKind,
        message: str,
        provider: Optional[ProviderKind] = None,
    ) -> "TranslationResult":
        return cls(
            status=TranslationStatus.FAILED,
            error_kind=error_kind,
            error=message,
            provider=provider,
        )

    @classmethod
    def skipped(cls) -> "TranslationResult":
        return cls(status=TranslationStatus.SKIPPED)

    @property
    def ok(self) -> bool:
        return self.status == TranslationStatus.TRANSLATED

    def to_response(self) -> dict[str, Any]:
        """转换为对外的响应结构：成功为 {translation}，失败为 {error}。"""
        if self.status == TranslationStatus.TRANSLATED:
            return {"translation": self.translation}
        if self.status == TranslationStatus.SKIPPED:
            return {"translation": "", "skipped": True}
        return {"error": self.error}
