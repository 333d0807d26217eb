"""
Threshold resolution for trafficlight.

Thresholds live as annotations on the system entity that owns the
evaluated repositories. Resolution never raises: a missing system,
a failed lookup or a malformed value all fall back to the source's
documented defaults.
"""

import math
from typing import Dict, List, Mapping, Optional

from .errors import ErrorKind, attempt
from .models import RatioThresholds, RuleKind, SeverityThresholds, SystemRef, ThresholdConfig
from .sources import SEVERITY_FIELDS, MetricSource
from trafficlight.ports.config import ConfigSourcePort
from trafficlight.observability import metrics
from trafficlight.observability.logging_setup import get_logger

log = get_logger("trafficlight.thresholds")


def parse_threshold(raw: Optional[str], default: float) -> float:
    """
    어노테이션 문자열을 임계값으로 변환합니다.

    Args:
        raw: 어노테이션 값 (없을 수 있음)
        default: 누락/공백/파싱 불가/비유한 값일 때 사용할 기본값

    Returns:
        임계값
    """
    if raw is None:
        return default
    text = str(raw).strip()
    if not text:
        return default
    try:
        value = float(text)
    except ValueError:
        log.warning(f"숫자가 아닌 임계값 무시 raw:{raw!r} default:{default}")
        return default
    if not math.isfinite(value):
        return default
    return value


def parse_allowlist(raw: Optional[str]) -> List[str]:
    """쉼표로 구분된 저장소 허용 목록을 파싱합니다."""
    if not raw:
        return []
    return [name.strip() for name in str(raw).split(",") if name.strip()]


async def fetch_annotations(config: ConfigSourcePort, system: Optional[SystemRef]) -> Dict[str, str]:
    """
    시스템 설정(어노테이션)을 조회합니다.

    조회 실패는 "설정 없음"으로 처리하며 예외를 전파하지 않습니다.

    Args:
        config: 설정 소스 포트
        system: 대상 시스템 (None이면 빈 설정)

    Returns:
        어노테이션 맵
    """
    if system is None:
        return {}
    outcome = await attempt(config.get_system_config(system), ErrorKind.CONFIG_UNAVAILABLE, str(system))
    if not outcome.ok:
        metrics.config_fallbacks.inc()
        log.warning(f"시스템 설정 조회 실패, 기본값 사용 error:{outcome.error.message}")
        return {}
    annotations = outcome.value
    if not isinstance(annotations, Mapping):
        metrics.config_fallbacks.inc()
        return {}
    return {str(k): str(v) for k, v in annotations.items() if v is not None}


def resolve_allowlist(annotations: Mapping[str, str], source: MetricSource) -> List[str]:
    """소스의 저장소 허용 목록을 반환합니다. 키가 없으면 빈 목록."""
    if not source.allowlist_key:
        return []
    return parse_allowlist(annotations.get(source.allowlist_key))


def resolve_ratio(annotations: Mapping[str, str], source: MetricSource) -> RatioThresholds:
    """
    비율 규칙 임계값을 해석합니다.

    퍼센트 단위 어노테이션은 100으로 나누고, [0, 1] 범위를 벗어나면
    기본값을 사용합니다.
    """
    scale = 100.0 if source.ratio_is_percentage else 1.0
    default = source.ratio_default / scale
    raw = annotations.get(source.ratio_key) if source.ratio_key else None
    value = parse_threshold(raw, source.ratio_default) / scale
    if not 0.0 <= value <= 1.0:
        log.warning(f"범위를 벗어난 비율 임계값 무시 source:{source.key} value:{value}")
        value = default
    return RatioThresholds(ratio_threshold=value)


def resolve_severity(annotations: Mapping[str, str], source: MetricSource, entity_count: int) -> SeverityThresholds:
    """
    심각도 규칙 임계값을 해석합니다.

    rate_fields에 속한 필드는 엔티티 수를 곱한 값이 됩니다.
    entity_count는 허용 목록 필터링 이후의 수여야 합니다.
    """
    count = max(0, entity_count)
    values: Dict[str, Optional[float]] = {}
    for field in SEVERITY_FIELDS:
        if field not in source.severity_defaults:
            values[field] = None
            continue
        key = source.severity_keys.get(field)
        value = parse_threshold(annotations.get(key) if key else None, source.severity_defaults[field])
        if value < 0:
            value = source.severity_defaults[field]
        if field in source.rate_fields:
            value = value * count
        values[field] = value
    return SeverityThresholds(**values)


def thresholds_from_annotations(
    annotations: Mapping[str, str],
    source: MetricSource,
    entity_count: int,
) -> ThresholdConfig:
    """어노테이션 맵에서 소스 규칙에 맞는 임계값 설정을 만듭니다."""
    allowlist = resolve_allowlist(annotations, source)
    if source.rule is RuleKind.SEVERITY:
        return ThresholdConfig(severity=resolve_severity(annotations, source, entity_count), allowlist=allowlist)
    if source.rule is RuleKind.RATIO:
        return ThresholdConfig(ratio=resolve_ratio(annotations, source), allowlist=allowlist)
    return ThresholdConfig(allowlist=allowlist)


async def resolve(
    config: ConfigSourcePort,
    system: Optional[SystemRef],
    source: MetricSource,
    entity_count: int,
) -> ThresholdConfig:
    """
    시스템 설정을 조회해 임계값 설정을 해석합니다. 예외를 던지지 않습니다.

    Args:
        config: 설정 소스 포트
        system: 임계값을 소유한 시스템
        source: 메트릭 소스 정의
        entity_count: (필터링된) 엔티티 수

    Returns:
        임계값 설정
    """
    annotations = await fetch_annotations(config, system)
    return thresholds_from_annotations(annotations, source, entity_count)
