# chat_translator/providers/gemini.py
"""提供一个使用 Gemini generateContent 接口的 LLM 翻译服务商。"""

from typing import Any, Optional

from chat_translator.exceptions import MalformedResponseError
from chat_translator.providers.base import BaseProvider, BaseProviderConfig
from chat_translator.types import ProviderKind


class GeminiProviderConfig(BaseProviderConfig):
    endpoint: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash-lite"
    prompt_template: str = (
        "You are a professional translator who knows live-stream chat and "
        "internet culture well. Translate the following chat comment into "
        "natural, casual spoken language for viewers whose language is "
        "'{target_lang}'. Keep the nuance of slang, abbreviations and emoji so "
        "the original emotion comes through. Reply with the translated text "
        "only, without any explanation or prefix.\n"
        "Comment: 「{text}」"
    )


class GeminiProvider(BaseProvider[GeminiProviderConfig]):
    """
    单次调用把文本嵌入固定的指令模板，返回一段生成文本。

    速率预算与凭证轮换由 Coordinator 负责，此处只消费给定的凭证。
    """

    CONFIG_MODEL = GeminiProviderConfig
    KIND = ProviderKind.GEMINI

    def build_prompt(self, text: str) -> str:
        return self.config.prompt_template.format(
            text=text, target_lang=self.config.target_lang
        )

    async def _execute_single_translation(
        self, text: str, credential: Optional[str]
    ) -> str:
        url = f"{self.config.endpoint}/models/{self.config.model}:generateContent"
        data = await self._request_json(
            "POST",
            url,
            params={"key": credential},
            json={"contents": [{"parts": [{"text": self.build_prompt(text)}]}]},
        )
        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Any) -> str:
        try:
            translated_text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError("API 返回的翻译结果结构不正确") from e
        if not isinstance(translated_text, str) or not translated_text.strip():
            raise MalformedResponseError("API 返回了空内容")
        return translated_text.strip()
