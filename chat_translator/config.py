# chat_translator/config.py

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chat_translator.types import RequestConfig
from chat_translator.utils import validate_lang_codes


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: Literal["json", "console"] = "console"


class CacheConfig(BaseModel):
    """响应缓存配置模型。时间单位均为秒。"""

    maxsize: int = Field(default=2000, gt=0)
    ttl: float = Field(default=300.0, gt=0)
    sweep_interval: float = Field(
        default=60.0, gt=0, description="后台清扫过期条目的间隔"
    )


class RateLimitConfig(BaseModel):
    """Gemini 客户端速率预算：每个凭证在窗口内允许的调用次数。"""

    per_credential_limit: int = Field(default=15, gt=0)
    window_seconds: float = Field(default=60.0, gt=0)


class HttpConfig(BaseModel):
    timeout_total: float = Field(default=10.0, gt=0)
    timeout_connect: float = Field(default=5.0, gt=0)


class ChatTranslatorConfig(BaseSettings):
    """进程级配置，在引擎创建时读取一次。"""

    model_config = SettingsConfigDict(
        env_prefix="CT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    target_lang: str = "ja"
    gemini_model: str = "gemini-2.5-flash-lite"

    cache: CacheConfig = Field(default_factory=CacheConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("target_lang")
    @classmethod
    def validate_target_lang_code(cls, v: str) -> str:
        validate_lang_codes([v])
        return v


__all__ = [
    "CacheConfig",
    "ChatTranslatorConfig",
    "HttpConfig",
    "LoggingConfig",
    "RateLimitConfig",
    "RequestConfig",
]
