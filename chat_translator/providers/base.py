# chat_translator/providers/base.py
"""
本模块定义了所有翻译服务商适配器必须继承的抽象基类（ABC）。
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Optional, TypeVar

import httpx
import structlog
from pydantic import BaseModel

from chat_translator.exceptions import (
    ChatTranslatorError,
    MalformedResponseError,
    TransportError,
)
from chat_translator.types import (
    ErrorKind,
    ProviderError,
    ProviderKind,
    ProviderResult,
    ProviderSuccess,
)

logger = structlog.get_logger(__name__)

_ConfigType = TypeVar("_ConfigType", bound="BaseProviderConfig")


class BaseProviderConfig(BaseModel):
    """所有服务商配置模型的基类。"""

    target_lang: str = "ja"


class BaseProvider(ABC, Generic[_ConfigType]):
    """
    翻译服务商的纯异步抽象基类。

    子类只需实现 `_execute_single_translation`，并通过抛出
    `TransportError` / `MalformedResponseError` 报告失败；
    模板方法 `atranslate` 负责把所有异常转换为 `ProviderError`。
    """

    CONFIG_MODEL: type[_ConfigType]
    KIND: ClassVar[ProviderKind]
    REQUIRES_CREDENTIAL: ClassVar[bool] = True

    def __init__(self, client: httpx.AsyncClient, config: _ConfigType):
        self.client = client
        self.config = config

    @property
    def name(self) -> str:
        return self.KIND.value

    @abstractmethod
    async def _execute_single_translation(
        self, text: str, credential: Optional[str]
    ) -> str:
        """[子类实现] 真正执行单次翻译的逻辑，返回译文。"""
        ...

    async def atranslate(
        self, text: str, credential: Optional[str] = None
    ) -> ProviderResult:
        """[模板方法] 执行单次翻译并把失败统一为 ProviderError。"""
        if self.REQUIRES_CREDENTIAL and not credential:
            return ProviderError(
                error_kind=ErrorKind.CONFIGURATION_MISSING,
                error_message=f"{self.name} API 密钥未设置",
            )
        try:
            translated_text = await self._execute_single_translation(text, credential)
        except ChatTranslatorError as e:
            return ProviderError(error_kind=e.error_kind, error_message=str(e))
        except httpx.HTTPError as e:
            return ProviderError(
                error_kind=ErrorKind.TRANSPORT,
                error_message=f"{self.name} 通信错误: {e.__class__.__name__}: {e}",
            )
        except Exception as e:
            logger.error("服务商执行时出现未知异常", provider=self.name, exc_info=True)
            return ProviderError(
                error_kind=ErrorKind.INTERNAL,
                error_message=f"未知服务商错误: {e.__class__.__name__}: {e}",
            )
        return ProviderSuccess(translated_text=translated_text)

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """发送请求并解析 JSON；非 2xx 视为传输错误，无法解析视为响应不正确。"""
        response = await self.client.request(method, url, **kwargs)
        if not response.is_success:
            raise TransportError(self._error_message(response))
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"{self.name} 返回了无法解析的响应体") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        fallback = f"HTTP error! status: {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if body.get("message"):
                return str(body["message"])
        return fallback
