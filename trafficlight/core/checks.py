"""
Dynamic threshold checks for trafficlight.

A check compares one fact value with a threshold and an operator that
are both read from system annotations. Unknown operators, missing
thresholds and mismatched value types make the check return False.
"""

import math
from typing import Any, Dict, Mapping, Optional, Sequence, Union
from pydantic import BaseModel

from trafficlight.observability.logging_setup import get_logger

log = get_logger("trafficlight.checks")

OPERATORS = (
    "greaterThan",
    "greaterThanInclusive",
    "lessThan",
    "lessThanInclusive",
    "equal",
    "notEqual",
)


class ThresholdCheck(BaseModel):
    """어노테이션 기반 동적 임계값 체크 정의"""
    id: str
    fact: str
    threshold_key: str
    operator_key: str
    description: str = ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def compare(value: Any, operator: Optional[str], threshold: Union[float, str, None]) -> bool:
    """
    팩트 값을 연산자와 임계값으로 비교합니다.

    Args:
        value: 팩트 값
        operator: 비교 연산자 이름
        threshold: 임계값 (숫자 또는 문자열)

    Returns:
        비교 결과 (판단 불가면 False)
    """
    if value is None or threshold is None:
        return False
    if operator in ("greaterThan", "greaterThanInclusive", "lessThan", "lessThanInclusive"):
        if not (_is_number(value) and _is_number(threshold)):
            return False
        if operator == "greaterThan":
            return value > threshold
        if operator == "greaterThanInclusive":
            return value >= threshold
        if operator == "lessThan":
            return value < threshold
        return value <= threshold
    if operator == "equal":
        return (_is_number(value) or isinstance(value, str)) and value == threshold
    if operator == "notEqual":
        return (_is_number(value) or isinstance(value, str)) and value != threshold
    return False


def _threshold_value(raw: Optional[str]) -> Union[float, str, None]:
    # 숫자로 읽히면 숫자, 아니면 원문 문자열
    if raw is None:
        return None
    try:
        number = float(raw)
    except ValueError:
        return raw
    return number if math.isfinite(number) else raw


def run_checks(
    facts: Mapping[str, Any],
    checks: Sequence[ThresholdCheck],
    annotations: Mapping[str, str],
) -> Dict[str, bool]:
    """
    팩트에 대해 동적 임계값 체크를 실행합니다.

    Args:
        facts: 엔티티의 원시 팩트
        checks: 실행할 체크 정의
        annotations: 임계값/연산자를 담은 시스템 어노테이션

    Returns:
        체크 ID -> 결과
    """
    results: Dict[str, bool] = {}
    for check in checks:
        threshold = _threshold_value(annotations.get(check.threshold_key))
        if threshold is None:
            log.warning(f"임계값 누락 check:{check.id} key:{check.threshold_key}")
            results[check.id] = False
            continue
        operator = annotations.get(check.operator_key)
        results[check.id] = compare(facts.get(check.fact), operator, threshold)
    return results
