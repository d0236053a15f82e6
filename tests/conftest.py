# tests/conftest.py
"""项目全局共享的测试 Fixtures。"""

from collections.abc import AsyncGenerator, Generator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from pytest_mock import MockerFixture
from rich.console import Console

from chat_translator.config import CacheConfig, ChatTranslatorConfig
from chat_translator.coordinator import Coordinator
from tests.helpers.fakes import FakeBackends, FakeClock


@pytest.fixture(scope="session", autouse=True)
def disable_rich_colors_for_tests(
    session_mocker: MockerFixture,
) -> Generator[None, None, None]:
    """全局禁用 rich 库的颜色输出，以确保测试结果的确定性。"""
    original_init = Console.__init__

    def new_init(self: Console, *args: Any, **kwargs: Any) -> None:
        kwargs["force_terminal"] = False
        kwargs["color_system"] = None
        original_init(self, *args, **kwargs)

    session_mocker.patch("rich.console.Console.__init__", new=new_init)
    yield


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backends() -> FakeBackends:
    return FakeBackends()


@pytest_asyncio.fixture
async def coordinator(
    backends: FakeBackends, clock: FakeClock
) -> AsyncGenerator[Coordinator, None]:
    """创建连接到假服务商的协调器，并确保其在测试后关闭。"""
    client = httpx.AsyncClient(transport=backends.transport())
    config = ChatTranslatorConfig(cache=CacheConfig(maxsize=100, ttl=300.0))
    coord = Coordinator(config, client=client, timer=clock)
    await coord.initialize()
    yield coord
    await coord.close()
    await client.aclose()
