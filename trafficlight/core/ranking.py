"""
Worst-offender ranking for trafficlight.

Two distinct comparators are provided: severity sources rank by the
descending tuple of per-dimension counts, pipeline sources rank by
ascending success rate.
"""

from typing import Mapping, Optional, Sequence, Tuple, List

from .models import Offender
from .normalize import to_number

DEFAULT_LIMIT = 5


def rank_offenders(
    rows: Sequence[Tuple[str, Mapping[str, float]]],
    dimensions: Sequence[str],
    limit: int = DEFAULT_LIMIT,
) -> List[Offender]:
    """
    심각도 우선순위 튜플 내림차순으로 상위 엔티티를 고릅니다.

    Args:
        rows: (엔티티 이름, 차원별 값) 목록
        dimensions: 우선순위 순서의 차원 이름
        limit: 최대 반환 개수

    Returns:
        문제 있는 엔티티만, 동점이면 입력 순서 유지
    """
    candidates = []
    for name, counts in rows:
        values = tuple(to_number(counts.get(d)) for d in dimensions)
        if any(v > 0 for v in values):
            candidates.append((name, values))

    # sorted()는 안정 정렬이므로 동점은 입력 순서를 유지한다
    candidates = sorted(candidates, key=lambda c: tuple(-v for v in c[1]))
    return [
        Offender(name=name, counts=dict(zip(dimensions, values)))
        for name, values in candidates[:max(0, limit)]
    ]


def rank_lowest_success(
    rows: Sequence[Tuple[str, float, bool]],
    limit: int = DEFAULT_LIMIT,
    *,
    failure_runs: Optional[Mapping[str, int]] = None,
) -> List[Offender]:
    """
    성공률 오름차순으로 상위 엔티티를 고릅니다.

    Args:
        rows: (엔티티 이름, 성공률, 체크 실패 여부) 목록
        limit: 최대 반환 개수
        failure_runs: 엔티티별 실패 실행 수 (실패가 있는 엔티티를 포함)

    Returns:
        실패 실행이 있거나 체크에 실패한 엔티티만
    """
    failure_runs = failure_runs or {}
    candidates = [
        (name, rate)
        for name, rate, failed in rows
        if failed or failure_runs.get(name, 0) > 0
    ]
    candidates = sorted(candidates, key=lambda c: c[1])
    return [
        Offender(name=name, success_rate=rate)
        for name, rate in candidates[:max(0, limit)]
    ]
