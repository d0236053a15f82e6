# chat_translator/rate_limiter.py
"""本模块提供一个基于滑动时间窗口的准入控制器。"""

import time
from collections import deque
from collections.abc import Callable


class SlidingWindowRateLimiter:
    """
    记录窗口内每次调用的时间戳，准入前惰性剪除过期的时间戳。

    这是一个粗粒度的近似实现，并不等价于精确的令牌桶：
    它只回答"此刻窗口内的调用数是否已达上限"，从不等待。
    """

    def __init__(
        self,
        per_credential_limit: int = 15,
        window_seconds: float = 60.0,
        timer: Callable[[], float] = time.monotonic,
    ):
        if per_credential_limit <= 0 or window_seconds <= 0:
            raise ValueError("速率上限和窗口长度必须为正数")
        self.per_credential_limit = per_credential_limit
        self.window_seconds = window_seconds
        self._timer = timer
        self._timestamps: deque[float] = deque()

    def __len__(self) -> int:
        return len(self._timestamps)

    def limit_for(self, credential_count: int) -> int:
        """允许的调用数随有效凭证数线性增长。"""
        return self.per_credential_limit * max(credential_count, 1)

    def prune(self) -> None:
        """剪除早于窗口起点的时间戳。"""
        cutoff = self._timer() - self.window_seconds
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()

    def try_acquire(self, credential_count: int) -> bool:
        """
        剪除后判断是否还有余量；有则记录一次调用并返回 True。
        被拒绝的请求不会占用任何配额。
        """
        self.prune()
        if len(self._timestamps) >= self.limit_for(credential_count):
            return False
        self._timestamps.append(self._timer())
        return True
