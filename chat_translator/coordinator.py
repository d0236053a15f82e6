# chat_translator/coordinator.py
"""本模块包含 Chat-Translator 引擎的主协调器。"""

import time
from collections.abc import Callable
from typing import Any, Optional

import httpx
import structlog

from chat_translator._text import (
    compile_dictionary,
    invalidate_compiled_dictionaries,
    postprocess,
    preprocess,
    should_skip_translation,
)
from chat_translator.cache import ResponseCache
from chat_translator.coalescer import RequestCoalescer
from chat_translator.config import ChatTranslatorConfig
from chat_translator.providers import (
    BaseProvider,
    DeepLProvider,
    GeminiProvider,
    GoogleFreeProvider,
)
from chat_translator.rate_limiter import SlidingWindowRateLimiter
from chat_translator.types import (
    ErrorKind,
    ProviderKind,
    ProviderResult,
    ProviderSuccess,
    RequestConfig,
    TranslationRequest,
    TranslationResult,
)
from chat_translator.utils import mask_credential

logger = structlog.get_logger(__name__)

# 只有这两类主服务商失败会触发一次免费回退
FALLBACK_ERROR_KINDS = frozenset({ErrorKind.TRANSPORT, ErrorKind.MALFORMED_RESPONSE})


class Coordinator:
    """
    异步主协调器：进程启动时创建一次，持有缓存、进行中请求表、
    速率窗口和凭证轮换索引，直到进程结束。

    单个请求的流程：
    预处理 -> 缓存检查 -> 合并检查 -> 速率检查 -> 服务商调用
    -> (失败时) 免费回退 -> 后处理 -> 写缓存。

    所有簿记操作都不会让出事件循环，唯一的挂起点是服务商的网络调用，
    因此共享状态无需加锁。
    """

    def __init__(
        self,
        config: Optional[ChatTranslatorConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.config = config or ChatTranslatorConfig()
        self.cache = ResponseCache(self.config.cache, timer=timer)
        self.coalescer = RequestCoalescer(self.cache)
        self.rate_limiter = SlidingWindowRateLimiter(
            per_credential_limit=self.config.rate_limit.per_credential_limit,
            window_seconds=self.config.rate_limit.window_seconds,
            timer=timer,
        )
        self.rotation_index = 0
        self.initialized = False
        self._client = client
        self._owns_client = client is None
        self._providers: dict[ProviderKind, BaseProvider[Any]] = {}

    async def __aenter__(self) -> "Coordinator":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def initialize(self) -> None:
        """创建共享的 HTTP 客户端与服务商实例，并启动缓存清扫任务。"""
        if self.initialized:
            return
        logger.info("协调器初始化开始...")
        if self._client is None:
            timeout = httpx.Timeout(
                self.config.http.timeout_total,
                connect=self.config.http.timeout_connect,
            )
            self._client = httpx.AsyncClient(timeout=timeout)

        target_lang = self.config.target_lang
        self._providers = {
            ProviderKind.GOOGLE: GoogleFreeProvider(
                self._client,
                GoogleFreeProvider.CONFIG_MODEL(target_lang=target_lang),
            ),
            ProviderKind.GEMINI: GeminiProvider(
                self._client,
                GeminiProvider.CONFIG_MODEL(
                    target_lang=target_lang, model=self.config.gemini_model
                ),
            ),
            ProviderKind.DEEPL: DeepLProvider(
                self._client,
                DeepLProvider.CONFIG_MODEL(target_lang=target_lang),
            ),
        }
        self.cache.start_sweeper()
        self.initialized = True
        logger.info(
            "协调器初始化完成。",
            target_lang=target_lang,
            cache_maxsize=self.config.cache.maxsize,
            cache_ttl=self.config.cache.ttl,
        )

    async def close(self) -> None:
        """优雅停机：等待进行中的请求自然结束，然后释放资源。"""
        if not self.initialized:
            return
        logger.info("开始优雅停机...")
        await self.coalescer.wait_idle()
        await self.cache.stop_sweeper()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
        self.initialized = False
        logger.info("优雅停机完成。")

    def invalidate_dictionary(self) -> None:
        """外部设置变更信号：丢弃已编译的词典规则。"""
        invalidate_compiled_dictionaries()
        logger.debug("词典规则已失效，将在下次请求时重新编译")

    def stats(self) -> dict[str, int]:
        return {
            "cache_size": len(self.cache),
            "pending": len(self.coalescer),
            "rate_window": len(self.rate_limiter),
            "rotation_index": self.rotation_index,
        }

    async def translate(
        self, raw_text: str, config: Optional[RequestConfig] = None
    ) -> TranslationResult:
        """翻译一条原始文本。任何内部故障都会转换为失败结果，而不是抛出。"""
        request = TranslationRequest(
            raw_text=raw_text or "", config=config or RequestConfig()
        )
        return await self.handle(request)

    async def handle(self, request: TranslationRequest) -> TranslationResult:
        if not self.initialized:
            raise RuntimeError("Coordinator is not initialized.")
        try:
            return await self._handle(request)
        except Exception as e:
            logger.error("翻译请求处理失败", exc_info=True)
            return TranslationResult.failure(
                ErrorKind.INTERNAL, f"内部错误: {e.__class__.__name__}: {e}"
            )

    async def _handle(self, request: TranslationRequest) -> TranslationResult:
        raw_text = request.raw_text
        if not raw_text:
            return TranslationResult.failure(
                ErrorKind.EMPTY_INPUT, "没有需要翻译的文本"
            )
        if should_skip_translation(raw_text):
            return TranslationResult.skipped()

        # 缓存键是未经处理的原始文本
        entry = self.cache.get(raw_text)
        if entry is not None:
            logger.debug("缓存命中", key_length=len(raw_text))
            return TranslationResult.success(entry.value, from_cache=True)

        return await self.coalescer.dispatch_or_join(
            raw_text, lambda: self._dispatch(request)
        )

    async def _dispatch(self, request: TranslationRequest) -> TranslationResult:
        cfg = request.config
        text = preprocess(request.raw_text, compile_dictionary(cfg.dictionary))

        match cfg.provider:
            case ProviderKind.GOOGLE:
                return await self._call_free(text)
            case ProviderKind.GEMINI:
                if not cfg.credentials:
                    return TranslationResult.failure(
                        ErrorKind.CONFIGURATION_MISSING,
                        "Gemini API 密钥未设置",
                        provider=ProviderKind.GEMINI,
                    )
                if not self.rate_limiter.try_acquire(len(cfg.credentials)):
                    logger.info(
                        "Gemini 速率预算已用尽，改用免费服务商",
                        window=len(self.rate_limiter),
                        limit=self.rate_limiter.limit_for(len(cfg.credentials)),
                    )
                    return await self._call_free(text)
                credential = self._next_credential(cfg.credentials)
            case ProviderKind.DEEPL:
                if not cfg.credentials:
                    return TranslationResult.failure(
                        ErrorKind.CONFIGURATION_MISSING,
                        "DeepL API 密钥未设置",
                        provider=ProviderKind.DEEPL,
                    )
                credential = cfg.credentials[0]

        provider = self._providers[cfg.provider]
        outcome = await provider.atranslate(text, credential)
        if isinstance(outcome, ProviderSuccess):
            return self._to_result(outcome, cfg.provider)

        logger.warning(
            "服务商调用失败",
            provider=provider.name,
            error_kind=outcome.error_kind.value,
            error=outcome.error_message,
            credential=mask_credential(credential),
        )
        if outcome.error_kind in FALLBACK_ERROR_KINDS and cfg.fallback_enabled:
            logger.info("回退到免费服务商", failed_provider=provider.name)
            return await self._call_free(text, is_fallback=True)
        return self._to_result(outcome, cfg.provider)

    async def _call_free(self, text: str, is_fallback: bool = False) -> TranslationResult:
        """调用免费服务商。作为回退目标时失败不再重试。"""
        outcome = await self._providers[ProviderKind.GOOGLE].atranslate(text)
        if is_fallback and not isinstance(outcome, ProviderSuccess):
            logger.warning("免费服务商回退失败", error=outcome.error_message)
            return TranslationResult.failure(
                outcome.error_kind,
                f"免费翻译回退失败: {outcome.error_message}",
                provider=ProviderKind.GOOGLE,
            )
        return self._to_result(outcome, ProviderKind.GOOGLE)

    def _next_credential(self, credentials: tuple[str, ...]) -> str:
        """轮询选择凭证；无论本次调用成功与否，索引都会前进。"""
        credential = credentials[self.rotation_index % len(credentials)]
        self.rotation_index += 1
        return credential

    @staticmethod
    def _to_result(outcome: ProviderResult, provider: ProviderKind) -> TranslationResult:
        if isinstance(outcome, ProviderSuccess):
            return TranslationResult.success(
                postprocess(outcome.translated_text), provider=provider
            )
        return TranslationResult.failure(
            outcome.error_kind, outcome.error_message, provider=provider
        )
