# chat_translator/providers/google.py
"""提供一个使用非官方免费 Google 翻译端点的服务商，它也是通用的回退目标。"""

from typing import Any, Optional

from chat_translator.exceptions import MalformedResponseError
from chat_translator.providers.base import BaseProvider, BaseProviderConfig
from chat_translator.types import ProviderKind


class GoogleFreeProviderConfig(BaseProviderConfig):
    endpoint: str = "https://translate.googleapis.com/translate_a/single"


class GoogleFreeProvider(BaseProvider[GoogleFreeProviderConfig]):
    """无需凭证、尽力而为的免费服务商。"""

    CONFIG_MODEL = GoogleFreeProviderConfig
    KIND = ProviderKind.GOOGLE
    REQUIRES_CREDENTIAL = False

    async def _execute_single_translation(
        self, text: str, credential: Optional[str]
    ) -> str:
        data = await self._request_json(
            "GET",
            self.config.endpoint,
            params={
                "client": "gtx",
                "sl": "auto",
                "tl": self.config.target_lang,
                "dt": "t",
                "q": text,
            },
        )
        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Any) -> str:
        """响应的第一个元素是分段列表，每段的第一个元素是译文片段。"""
        if not isinstance(data, list) or not data or not isinstance(data[0], list):
            raise MalformedResponseError("Google 翻译返回的结构不正确")
        segments = [
            segment[0]
            for segment in data[0]
            if isinstance(segment, list) and segment and isinstance(segment[0], str)
        ]
        translated_text = "".join(segments).strip()
        if not translated_text:
            raise MalformedResponseError("Google 翻译返回了空内容")
        return translated_text
