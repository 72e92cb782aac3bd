# src/locale_hub/application/single_flight.py
"""
进程内的 single-flight：同一个键的并发调用只执行一次，其余调用方等待同一结果。
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

import structlog

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class SingleFlight(Generic[T]):
    def __init__(self) -> None:
        self._inflight: dict[Hashable, asyncio.Future[T]] = {}

    def in_flight(self, key: Hashable) -> bool:
        return key in self._inflight

    async def run(self, key: Hashable, func: Callable[[], Awaitable[T]]) -> T:
        """
        执行 `func`，或等待同键上正在执行的那一次。

        等待方用 `asyncio.shield` 包裹共享的 Future，某个等待方被取消不会影响
        正在进行的执行和其他等待方。执行方的异常会原样传给所有等待方。
        """
        existing = self._inflight.get(key)
        if existing is not None:
            logger.debug("合并到进行中的调用", key=key)
            return await asyncio.shield(existing)

        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            result = await func()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except BaseException as exc:
            future.set_exception(exc)
            # 没有等待方时也标记为已读取，避免 "exception was never retrieved"
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            self._inflight.pop(key, None)
