# chat_translator/providers/deepl.py
"""提供一个使用 DeepL v2 翻译接口的服务商。"""

from typing import Any, Optional

from chat_translator.exceptions import MalformedResponseError
from chat_translator.providers.base import BaseProvider, BaseProviderConfig
from chat_translator.types import ProviderKind

FREE_API_HOST = "api-free.deepl.com"
PRO_API_HOST = "api.deepl.com"


class DeepLProviderConfig(BaseProviderConfig):
    pass


class DeepLProvider(BaseProvider[DeepLProviderConfig]):
    """单凭证服务商，不做客户端速率限制。"""

    CONFIG_MODEL = DeepLProviderConfig
    KIND = ProviderKind.DEEPL

    @staticmethod
    def api_url(credential: str) -> str:
        # 免费版密钥以 ':fx' 结尾，使用独立的主机
        host = FREE_API_HOST if credential.endswith(":fx") else PRO_API_HOST
        return f"https://{host}/v2/translate"

    async def _execute_single_translation(
        self, text: str, credential: Optional[str]
    ) -> str:
        if not credential:
            raise ValueError("DeepL 需要 API 密钥")
        data = await self._request_json(
            "POST",
            self.api_url(credential),
            headers={"Authorization": f"DeepL-Auth-Key {credential}"},
            json={"text": [text], "target_lang": self.config.target_lang.upper()},
        )
        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Any) -> str:
        try:
            translated_text = data["translations"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError("API 返回的翻译结果结构不正确") from e
        if not isinstance(translated_text, str) or not translated_text.strip():
            raise MalformedResponseError("API 返回了空内容")
        return translated_text.strip()
