# tests/helpers/fakes.py
"""
提供假时钟与假服务商，用于构造确定性的缓存、限流与并发场景。
"""

from __future__ import annotations

import asyncio
from typing import Callable, Union

import httpx

GOOGLE_HOST = "translate.googleapis.com"
GEMINI_HOST = "generativelanguage.googleapis.com"
DEEPL_FREE_HOST = "api-free.deepl.com"
DEEPL_PRO_HOST = "api.deepl.com"

Reply = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeClock:
    """可手动推进的单调时钟。"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def google_reply(*segments: str) -> httpx.Response:
    return httpx.Response(
        200, json=[[[segment, "src", None, None] for segment in segments], None, "en"]
    )


def gemini_reply(text: str) -> httpx.Response:
    return httpx.Response(
        200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]}
    )


def deepl_reply(text: str) -> httpx.Response:
    return httpx.Response(
        200, json={"translations": [{"detected_source_language": "EN", "text": text}]}
    )


class FakeBackends:
    """
    按主机名分派的假服务商。记录每一次请求，并可通过 `gate`
    让请求停留在"进行中"状态，以便构造并发场景。
    """

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.replies: dict[str, Reply] = {
            GOOGLE_HOST: google_reply("グーグル訳"),
            GEMINI_HOST: gemini_reply("ジェミニ訳"),
            DEEPL_FREE_HOST: deepl_reply("ディープエル訳"),
            DEEPL_PRO_HOST: deepl_reply("ディープエル訳"),
        }
        self.gate: asyncio.Event | None = None
        self.first_call = asyncio.Event()

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [request for request in self.calls if request.url.host == host]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        self.first_call.set()
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies[request.url.host]
        if isinstance(reply, httpx.Response):
            # 每次返回新的副本，避免同一个响应对象被多次读取
            return httpx.Response(
                reply.status_code, headers=reply.headers, content=reply.content
            )
        return reply(request)
