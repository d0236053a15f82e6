# chat_translator/coalescer.py
"""本模块确保每个不同的键在任意时刻最多只有一个进行中的服务商调用。"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Optional

import structlog

from chat_translator.cache import ResponseCache
from chat_translator.types import ErrorKind, TranslationResult

logger = structlog.get_logger(__name__)

WorkFactory = Callable[[], Awaitable[TranslationResult]]


class RequestCoalescer:
    """
    并发的相同请求合并为一次底层调用，结果分发给每一个等待者。

    等待者通过 `asyncio.shield` 等待共享任务：某个调用方放弃等待时，
    共享任务不会被取消，稍后到达的结果只是被该调用方丢弃。
    """

    def __init__(self, cache: Optional[ResponseCache] = None):
        self._cache = cache
        self._pending: dict[str, asyncio.Task[TranslationResult]] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    async def dispatch_or_join(
        self, key: str, work_factory: WorkFactory
    ) -> TranslationResult:
        task = self._pending.get(key)
        if task is not None:
            logger.debug("合并到进行中的请求", key_length=len(key))
            return await asyncio.shield(task)

        task = asyncio.create_task(self._run(key, work_factory))
        self._pending[key] = task
        return await asyncio.shield(task)

    async def _run(self, key: str, work_factory: WorkFactory) -> TranslationResult:
        try:
            result = await work_factory()
        except Exception as e:
            logger.error("翻译流水线出现未处理的异常", exc_info=True)
            result = TranslationResult.failure(
                ErrorKind.INTERNAL, f"内部错误: {e.__class__.__name__}: {e}"
            )
        finally:
            # 无论成功、失败还是被取消，都必须注销
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

        if self._cache is not None and result.ok and result.translation is not None:
            self._cache.set(key, result.translation)
        return result

    async def wait_idle(self) -> None:
        """等待所有进行中的请求结束（用于优雅停机，不会中止它们）。"""
        while self._pending:
            await asyncio.gather(*self._pending.values(), return_exceptions=True)
