# tests/unit/test_cache.py
"""
针对 `chat_translator.cache` 模块的单元测试。

本测试文件验证了缓存的基本功能（设置、获取、TTL过期）、
按插入顺序的容量淘汰以及后台清扫任务。
"""

import asyncio

import pytest

from chat_translator.cache import ResponseCache
from chat_translator.config import CacheConfig
from tests.helpers.fakes import FakeClock


def test_cache_set_and_get(clock: FakeClock) -> None:
    """测试基本的缓存设置和获取功能。"""
    cache = ResponseCache(timer=clock)
    assert cache.get("hello") is None

    cache.set("hello", "こんにちは")
    entry = cache.get("hello")

    assert entry is not None
    assert entry.key == "hello"
    assert entry.value == "こんにちは"
    assert entry.created_at == clock.now


def test_expired_entry_is_a_miss_and_is_deleted(clock: FakeClock) -> None:
    """测试过期条目在查找时被视为未命中并被删除（确定性测试）。"""
    cache = ResponseCache(CacheConfig(ttl=1), timer=clock)
    cache.set("hello", "こんにちは")

    clock.advance(1.0)
    assert cache.get("hello") is not None  # 恰好等于 TTL 仍然有效

    clock.advance(0.1)
    assert cache.get("hello") is None
    assert "hello" not in cache


def test_overflow_evicts_oldest_insertion(clock: FakeClock) -> None:
    """插入 maxsize + 1 个不同的键后，最早插入的键不可再取回，其余的都在。"""
    maxsize = 5
    cache = ResponseCache(CacheConfig(maxsize=maxsize), timer=clock)
    keys = [f"key-{i}" for i in range(maxsize + 1)]
    for key in keys:
        cache.set(key, key.upper())

    assert len(cache) == maxsize
    assert cache.get(keys[0]) is None
    for key in keys[1:]:
        assert cache.get(key) is not None


def test_eviction_ignores_access_order(clock: FakeClock) -> None:
    cache = ResponseCache(CacheConfig(maxsize=2), timer=clock)
    cache.set("a", "1")
    cache.set("b", "2")
    cache.get("a")  # 访问不会刷新位置
    cache.set("c", "3")

    assert cache.get("a") is None
    assert cache.get("b") is not None


def test_sweep_removes_only_expired_entries(clock: FakeClock) -> None:
    cache = ResponseCache(CacheConfig(ttl=10), timer=clock)
    cache.set("old", "古い")
    clock.advance(8)
    cache.set("new", "新しい")
    clock.advance(5)

    assert cache.sweep() == 1
    assert "old" not in cache
    assert "new" in cache


@pytest.mark.asyncio
async def test_background_sweeper_prunes_without_lookups(clock: FakeClock) -> None:
    """即使没有任何查找，后台任务也会移除过期条目。"""
    cache = ResponseCache(CacheConfig(ttl=1, sweep_interval=0.01), timer=clock)
    cache.set("hello", "こんにちは")
    clock.advance(2)

    cache.start_sweeper()
    try:
        for _ in range(50):
            if len(cache) == 0:
                break
            await asyncio.sleep(0.01)
        assert len(cache) == 0
    finally:
        await cache.stop_sweeper()


@pytest.mark.asyncio
async def test_start_sweeper_is_idempotent() -> None:
    cache = ResponseCache()
    cache.start_sweeper()
    first = cache._sweeper
    cache.start_sweeper()

    assert cache._sweeper is first
    await cache.stop_sweeper()
    assert cache._sweeper is None
