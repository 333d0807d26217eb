"""
Normalization functions for trafficlight.

This module contains pure functions for converting raw tech-insights
payloads into fact records and check sets. Missing or malformed fields
coerce to zero values instead of raising.
"""

import math
from typing import Any, Dict, Iterable, Mapping, Optional

from .models import PipelineFacts
from .sources import Dimension, MetricSource
from trafficlight.observability.logging_setup import get_logger

log = get_logger("trafficlight.normalize")


def to_number(value: Any) -> float:
    """
    임의 값을 숫자로 변환합니다. 변환할 수 없으면 0.

    Args:
        value: 원시 팩트 값

    Returns:
        유한한 float 값
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _dimension_value(dim: Dimension, facts: Mapping[str, Any]) -> float:
    raw = facts.get(dim.fact)
    if dim.passing_value is not None:
        # 상태 문자열 팩트: 통과 값이 아니면 1건으로 센다
        if raw is None:
            return 1.0
        return 0.0 if str(raw) == dim.passing_value else 1.0
    return to_number(raw)


def extract_facts(source: MetricSource, response: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """tech-insights 응답에서 소스 리트리버의 facts 객체를 꺼냅니다."""
    if not isinstance(response, Mapping):
        return {}
    container = response.get(source.retriever)
    if not isinstance(container, Mapping):
        return {}
    facts = container.get("facts")
    return dict(facts) if isinstance(facts, Mapping) else {}


def to_fact_record(source: MetricSource, facts: Optional[Mapping[str, Any]]) -> Dict[str, float]:
    """
    원시 facts를 소스 차원 순서의 팩트 레코드로 변환합니다.

    Args:
        source: 메트릭 소스 정의
        facts: 리트리버 facts 객체 (없으면 모두 0)

    Returns:
        차원 이름 -> 값 (차원 순서 유지)
    """
    facts = facts or {}
    if source.shape == "pipeline":
        pf = to_pipeline_facts(source, facts)
        return {"success_runs": float(pf.success_runs), "failure_runs": float(pf.failure_runs)}
    return {dim.name: _dimension_value(dim, facts) for dim in source.dimensions}


def to_pipeline_facts(source: MetricSource, facts: Optional[Mapping[str, Any]]) -> PipelineFacts:
    """원시 facts를 파이프라인 실행 횟수로 변환합니다."""
    facts = facts or {}
    success = int(max(0.0, to_number(facts.get(source.success_fact))))
    failure = int(max(0.0, to_number(facts.get(source.failure_fact))))
    return PipelineFacts(success_runs=success, failure_runs=failure)


def to_check_set(source: MetricSource, check_results: Optional[Iterable[Any]]) -> Dict[str, bool]:
    """
    체크 실행 결과 목록을 체크 ID -> 결과 맵으로 변환합니다.

    결과 항목은 {"check": {"id": ...}, "result": ...} 또는
    {"id": ..., "result": ...} 형태를 모두 허용합니다.
    소스에 정의되지 않은 체크는 버립니다.
    """
    wanted = set(source.checks.values())
    checks: Dict[str, bool] = {}
    for item in check_results or []:
        if not isinstance(item, Mapping):
            continue
        check = item.get("check")
        check_id = check.get("id") if isinstance(check, Mapping) else item.get("id")
        if check_id in wanted:
            checks[check_id] = item.get("result") is True
    if not checks:
        log.debug(f"{source.key} 체크 결과 없음")
    return checks


def is_failing(source: MetricSource, checks: Mapping[str, bool], dimension: str) -> bool:
    """
    엔티티의 특정 차원 체크가 실패했는지 판단합니다.

    체크 결과가 없으면 실패로 보지 않습니다.
    """
    check_id = source.checks.get(dimension)
    if check_id is None or check_id not in checks:
        return False
    return checks[check_id] is source.failing_result


def entity_failed(source: MetricSource, checks: Mapping[str, bool]) -> bool:
    """엔티티가 소스의 체크 중 하나라도 실패했는지 판단합니다."""
    return any(is_failing(source, checks, dim) for dim in source.checks)
