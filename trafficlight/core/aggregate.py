"""
Aggregation functions for trafficlight.

This module reduces per-entity fact records, check sets and pipeline
run counts into system-level totals. All functions are pure.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .models import PipelineFacts, PipelineMetrics, Verdict
from .normalize import is_failing, to_number
from .sources import MetricSource


@dataclass
class SeverityAggregate:
    """심각도 집계 결과"""
    totals: Dict[str, float] = field(default_factory=dict)
    contributors: Dict[str, List[str]] = field(default_factory=dict)
    record_count: int = 0


def aggregate_severity(
    records: Sequence[Tuple[str, Mapping[str, float]]],
    dimensions: Sequence[str],
) -> SeverityAggregate:
    """
    엔티티별 심각도 레코드를 합산합니다.

    Args:
        records: (엔티티 이름, 레코드) 목록 (입력 순서 유지)
        dimensions: 집계할 심각도 버킷 이름

    Returns:
        버킷별 합계와 기여 엔티티 목록
    """
    agg = SeverityAggregate(
        totals={d: 0 for d in dimensions},
        contributors={d: [] for d in dimensions},
    )
    for name, record in records:
        agg.record_count += 1
        for dim in dimensions:
            value = to_number(record.get(dim)) if isinstance(record, Mapping) else 0.0
            if value > 0:
                agg.totals[dim] += int(value) if value.is_integer() else value
                agg.contributors[dim].append(name)
    return agg


def count_failing_checks(
    source: MetricSource,
    check_sets: Sequence[Tuple[str, Mapping[str, bool]]],
) -> SeverityAggregate:
    """
    엔티티별 체크 결과를 차원별 실패 엔티티 수로 집계합니다.

    심각도/critical-first 규칙의 입력이 됩니다.
    """
    records = [
        (name, {dim: 1 if is_failing(source, checks, dim) else 0 for dim in source.checks})
        for name, checks in check_sets
    ]
    return aggregate_severity(records, list(source.checks))


def success_rate(success: int, total: int) -> float:
    """성공률(%)을 소수점 둘째 자리로 반올림합니다. 실행이 없으면 0."""
    if total <= 0:
        return 0.0
    return round(success / total * 100, 2)


def aggregate_pipeline(records: Sequence[PipelineFacts]) -> PipelineMetrics:
    """
    엔티티별 실행 횟수를 합산해 파이프라인 지표를 계산합니다.

    Args:
        records: 엔티티별 실행 횟수

    Returns:
        전체 성공/실패/실행 수와 성공률
    """
    total_success = sum(max(0, r.success_runs) for r in records)
    total_failure = sum(max(0, r.failure_runs) for r in records)
    total_runs = total_success + total_failure
    return PipelineMetrics(
        total_success=total_success,
        total_failure=total_failure,
        total_runs=total_runs,
        success_rate=success_rate(total_success, total_runs),
    )


def count_failed_entities(failed_flags: Sequence[bool]) -> int:
    """체크에 실패한 엔티티 수 (성공률과 별개로 계산)"""
    return sum(1 for flag in failed_flags if flag)


def build_pipeline_summary(verdict: Verdict, configured_count: Optional[int] = None) -> str:
    """
    파이프라인 다이얼로그용 요약 문구를 만듭니다.

    Args:
        verdict: 비율 규칙 평가 결과
        configured_count: 허용 목록으로 설정된 저장소 수

    Returns:
        요약 문자열
    """
    summary = verdict.reason
    if verdict.color == "red":
        summary += " Critical attention required."
    elif verdict.color == "yellow":
        summary += " Issues should be addressed before release."
    elif verdict.color == "green":
        summary += " Code quality is good."
    if configured_count:
        summary += f" (Based on {configured_count} configured repositories)"
    return summary
