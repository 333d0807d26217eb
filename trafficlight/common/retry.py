"""
Retry utilities for trafficlight.

This module provides retry and backoff utilities
for the HTTP collaborators of the evaluation core.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar

from trafficlight.observability.logging_setup import get_logger

T = TypeVar('T')

log = get_logger("trafficlight.retry")

def backoff_delay(attempt: int, base: float, max_delay: float) -> float:
    """
    지수 백오프 지연 시간을 계산합니다.

    Args:
        attempt: 현재 시도 횟수 (1부터 시작)
        base: 기본 지연 시간 (초)
        max_delay: 최대 지연 시간 (초)
    """
    return min(max_delay, base * (2 ** max(0, attempt - 1)))

async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    jitter: bool = True,
    retry_if: Optional[Callable[[Exception], bool]] = None,
) -> T:
    """
    지수 백오프와 함께 함수를 재시도합니다.

    Args:
        func: 재시도할 비동기 함수
        max_retries: 최대 재시도 횟수
        base_delay: 기본 지연 시간 (초)
        max_delay: 최대 지연 시간 (초)
        jitter: 지터 적용 여부
        retry_if: 재시도할 예외인지 판단하는 함수 (None이면 모든 예외)

    Returns:
        함수 실행 결과

    Raises:
        마지막 시도에서 발생한 예외
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await func()
        except Exception as e:
            if attempt > max_retries or (retry_if is not None and not retry_if(e)):
                raise

            delay = backoff_delay(attempt, base_delay, max_delay)
            if jitter:
                delay = delay * (0.5 + random.random() * 0.5)

            log.debug(f"재시도 대기 attempt:{attempt} delay:{delay:.2f}s error:{e}")
            await asyncio.sleep(delay)
