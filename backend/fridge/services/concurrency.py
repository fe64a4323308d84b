# fridge/services/concurrency.py
# 단계별 fan-out/fan-in 공용 헬퍼

from __future__ import annotations
import asyncio
from typing import Awaitable, Iterable, List, TypeVar

T = TypeVar("T")


async def barrier(aws: Iterable[Awaitable[T]]) -> List[T]:
    """
    전부 동시에 돌리고 모두 끝날 때까지 대기. 결과는 입력 순서.
    하나라도 실패(또는 취소)되면 나머지를 취소하고 예외를 그대로 올린다.
    """
    tasks = [asyncio.ensure_future(a) for a in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
