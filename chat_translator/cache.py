# chat_translator/cache.py
"""本模块提供有界的内存响应缓存，用于减少重复的翻译请求。"""

import asyncio
import time
from collections.abc import Callable
from typing import Optional

import structlog
from cachetools import FIFOCache

from chat_translator.config import CacheConfig
from chat_translator.types import CacheEntry

logger = structlog.get_logger(__name__)


class ResponseCache:
    """
    一个受 TTL 与容量双重约束的翻译结果缓存。

    - 容量溢出时淘汰最早插入的条目（以插入顺序近似 LRU，而非访问顺序）。
    - 过期条目在查找时被惰性删除，同时由后台任务周期性清扫。

    所有方法都是同步的，不会在中途让出事件循环，因此在单线程
    asyncio 环境下无需加锁。
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.config = config or CacheConfig()
        self._timer = timer
        self._entries: FIFOCache[str, CacheEntry] = FIFOCache(
            maxsize=self.config.maxsize
        )
        self._sweeper: Optional[asyncio.Task[None]] = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at > self.config.ttl

    def get(self, key: str) -> CacheEntry | None:
        """查找缓存条目；缺失或过期均视为未命中，过期条目会被删除。"""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry, self._timer()):
            del self._entries[key]
            return None
        return entry

    def set(self, key: str, value: str) -> None:
        """插入或覆盖条目；超出容量时由 FIFOCache 淘汰最早插入的条目。"""
        self._entries[key] = CacheEntry(key=key, value=value, created_at=self._timer())

    def sweep(self) -> int:
        """一次性移除所有过期条目，返回移除的数量。"""
        now = self._timer()
        expired = [
            key for key, entry in self._entries.items() if self._is_expired(entry, now)
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.config.sweep_interval)
            removed = self.sweep()
            if removed:
                logger.debug("已清扫过期缓存条目", removed=removed, size=len(self))

    def start_sweeper(self) -> None:
        """启动后台清扫任务。必须在运行中的事件循环内调用。"""
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.create_task(
            self._sweep_forever(), name="response-cache-sweeper"
        )

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        await asyncio.gather(self._sweeper, return_exceptions=True)
        self._sweeper = None
