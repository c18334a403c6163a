"""Deadline - 요청 단위 시간 예산

Fast 경로의 협력적 취소(cooperative abort)를 위한 명시적 마감 시각.
모든 suspend 가능한 호출에 인자로 전달되며, 만료 시 asyncio.wait_for가
진행 중인 코루틴을 취소합니다.

    deadline = Deadline.start(min(budget_ms, ceiling_ms))
    html = await deadline.run(client.get(url, timeout_s=deadline.remaining_s()))
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Deadline:
    """마감 시각 (monotonic 기준)"""

    budget_ms: int
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def start(cls, budget_ms: int, ceiling_ms: Optional[int] = None) -> "Deadline":
        """예산과 상한 중 작은 값으로 시작"""
        if ceiling_ms is not None:
            budget_ms = min(budget_ms, ceiling_ms)
        return cls(budget_ms=max(0, int(budget_ms)))

    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started_at) * 1000

    def remaining_ms(self) -> float:
        return max(0.0, self.budget_ms - self.elapsed_ms())

    def remaining_s(self) -> float:
        return self.remaining_ms() / 1000.0

    def expired(self) -> bool:
        return self.remaining_ms() <= 0

    async def run(self, aw: Awaitable[T]) -> T:
        """남은 예산 안에서 실행. 만료 시 asyncio.TimeoutError"""
        remaining = self.remaining_s()
        if remaining <= 0:
            # 이미 만료: 코루틴을 시작하지 않고 닫아 경고를 막습니다.
            close = getattr(aw, "close", None)
            if close is not None:
                close()
            raise asyncio.TimeoutError()
        return await asyncio.wait_for(aw, timeout=remaining)


class Stopwatch:
    """엔진별 소요 시간 측정"""

    def __init__(self) -> None:
        self._start = time.monotonic()

    def elapsed_ms(self) -> float:
        return (time.monotonic() - self._start) * 1000
