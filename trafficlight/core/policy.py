"""
Status evaluation rules for trafficlight.

This module contains pure functions that turn aggregated failure
counts into a traffic light colour and a human-readable reason.
Three rule families exist, selected per metric source by RuleKind.
"""

from typing import Mapping, Optional

from .models import RatioThresholds, RuleKind, SeverityThresholds, Verdict

NO_ENTITIES_REASON = "No entities selected"
NO_SECURITY_DATA_REASON = "No security data available"

# 빨강 조건 차원 (집계 키, 임계값 필드, 문구 라벨)
RED_DIMENSIONS = (
    ("critical", "critical_red", "Critical severity issues"),
    ("secret", "secrets_red", "Secret scanning issues"),
    ("high", "high_red", "High severity issues"),
    ("medium", "medium_red", "Medium severity issues"),
)

# 노랑 조건 차원
YELLOW_DIMENSIONS = (
    ("medium", "medium_yellow", "Medium severity issues"),
    ("low", "low_yellow", "Low severity issues"),
)


def _noun(count: int) -> str:
    return "entity" if count == 1 else "entities"


def _fmt(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def evaluate_ratio(failure_count: int, total_entities: int, ratio_threshold: float) -> Verdict:
    """
    실패 엔티티 비율로 색상을 결정합니다.

    Args:
        failure_count: 체크에 실패한 엔티티 수
        total_entities: 평가한 엔티티 수
        ratio_threshold: 빨강 비율 임계값 (0~1)

    Returns:
        평가 결과 (실패 수가 한계와 같으면 노랑)
    """
    red_limit = ratio_threshold * total_entities
    pct = f"{ratio_threshold * 100:.1f}%"

    if failure_count == 0:
        return Verdict(
            color="green",
            reason=f"All {total_entities} {_noun(total_entities)} passed (threshold: {pct}).",
        )

    reason = f"{failure_count} out of {total_entities} {_noun(total_entities)} failed (threshold: {pct})."
    if failure_count > red_limit:
        return Verdict(color="red", reason=reason)
    return Verdict(color="yellow", reason=reason)


def _exceeded(count: float, threshold: Optional[float]) -> bool:
    # 정의되지 않은 임계값은 비교하지 않는다
    return threshold is not None and count > threshold


def _reason(
    totals: Mapping[str, float],
    thresholds: SeverityThresholds,
    dimensions,
    fallback: str,
) -> str:
    parts = []
    for key, field, label in dimensions:
        count = totals.get(key, 0)
        threshold = getattr(thresholds, field)
        if _exceeded(count, threshold):
            parts.append(
                f"{label} are exceeded by {_fmt(count)} repos, the threshold for this system is: {_fmt(threshold)}"
            )
    return "\n".join(parts) or fallback


def evaluate_severity(
    totals: Mapping[str, float],
    thresholds: SeverityThresholds,
    *,
    entity_count: int,
    record_count: Optional[int] = None,
) -> Verdict:
    """
    심각도별 실패 수를 임계값과 비교해 색상을 결정합니다.

    Args:
        totals: 심각도별 실패 엔티티 수 (critical/high/medium/low/secret)
        thresholds: 시스템 임계값
        entity_count: 선택된 엔티티 수
        record_count: 수신한 보안 데이터 건수 (None이면 entity_count)

    Returns:
        평가 결과
    """
    if entity_count <= 0:
        return Verdict(color="gray", reason=NO_ENTITIES_REASON)
    if (entity_count if record_count is None else record_count) <= 0:
        return Verdict(color="gray", reason=NO_SECURITY_DATA_REASON)

    is_red = any(
        _exceeded(totals.get(key, 0), getattr(thresholds, field))
        for key, field, _ in RED_DIMENSIONS
    )
    if is_red:
        return Verdict(
            color="red",
            reason=_reason(totals, thresholds, RED_DIMENSIONS, "Threshold for red traffic light exceeded."),
        )

    is_yellow = any(
        _exceeded(totals.get(key, 0), getattr(thresholds, field))
        for key, field, _ in YELLOW_DIMENSIONS
    )
    if is_yellow:
        return Verdict(
            color="yellow",
            reason=_reason(totals, thresholds, YELLOW_DIMENSIONS, "Threshold for yellow traffic light exceeded."),
        )

    return Verdict(color="green", reason="All security checks passed for all entities")


def evaluate_critical_first(totals: Mapping[str, float], label: str = "Dependabot") -> Verdict:
    """
    critical 우선 규칙: critical이 하나라도 있으면 빨강,
    없고 high가 있으면 노랑, 둘 다 없으면 초록.
    """
    critical = totals.get("critical", 0)
    high = totals.get("high", 0)
    if critical > 0:
        return Verdict(color="red", reason=f"Critical alerts exceed threshold ({_fmt(critical)} > 0)")
    if high > 0:
        return Verdict(color="yellow", reason=f"{_fmt(high)} high severity {label} alerts, no critical alerts")
    return Verdict(color="green", reason=f"All {label} checks passed")


def evaluate_rule(
    kind: RuleKind,
    totals: Mapping[str, float],
    *,
    entity_count: int,
    failure_count: int = 0,
    ratio: Optional[RatioThresholds] = None,
    severity: Optional[SeverityThresholds] = None,
    label: str = "",
) -> Verdict:
    """
    규칙 종류에 따라 평가 함수를 선택합니다.

    Args:
        kind: 규칙 종류
        totals: 차원별 실패 수
        entity_count: 평가한 엔티티 수
        failure_count: 비율 규칙용 실패 엔티티 수
        ratio: 비율 규칙 임계값
        severity: 심각도 규칙 임계값
        label: 소스 표시 이름

    Returns:
        평가 결과
    """
    if kind is RuleKind.RATIO:
        ratio = ratio or RatioThresholds()
        return evaluate_ratio(failure_count, entity_count, ratio.ratio_threshold)
    if kind is RuleKind.SEVERITY:
        return evaluate_severity(totals, severity or SeverityThresholds(), entity_count=entity_count)
    if kind is RuleKind.CRITICAL_FIRST:
        return evaluate_critical_first(totals, label or "Dependabot")
    raise ValueError(f"unknown rule kind: {kind}")
