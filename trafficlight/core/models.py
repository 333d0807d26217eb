"""
Core domain models for trafficlight.

This module defines the core domain models using Pydantic v2
for type safety and validation.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

# 신호등 색상 정의
Color = Literal["green", "yellow", "red", "gray"]

# 색상 심각도 순서 (gray는 평가 불가 상태로 순서에 포함하지 않음)
COLOR_ORDER = {
    "green": 0,
    "yellow": 1,
    "red": 2,
}


class RuleKind(str, Enum):
    """메트릭 소스별 평가 규칙 종류"""
    RATIO = "ratio"
    SEVERITY = "severity"
    CRITICAL_FIRST = "critical_first"


class EntityRef(BaseModel):
    """모니터링 대상 엔티티(저장소/컴포넌트) 참조"""
    model_config = ConfigDict(frozen=True)

    kind: str = "Component"
    namespace: str = "default"
    name: str

    def __str__(self) -> str:
        return f"{self.kind.lower()}:{self.namespace}/{self.name}"


class SystemRef(BaseModel):
    """임계값 설정을 소유하는 시스템 참조"""
    model_config = ConfigDict(frozen=True)

    namespace: str = "default"
    name: str

    def __str__(self) -> str:
        return f"system:{self.namespace}/{self.name}"


class PipelineFacts(BaseModel):
    """엔티티별 CI 실행 횟수"""
    success_runs: int = 0
    failure_runs: int = 0

    @property
    def total_runs(self) -> int:
        return self.success_runs + self.failure_runs


class RatioThresholds(BaseModel):
    """비율 규칙 임계값"""
    ratio_threshold: float = Field(default=0.33, ge=0.0)


class SeverityThresholds(BaseModel):
    """심각도 규칙 임계값 (None은 정의되지 않은 임계값)"""
    critical_red: Optional[float] = 0.0
    high_red: Optional[float] = 0.0
    secrets_red: Optional[float] = 0.0
    medium_red: Optional[float] = None
    medium_yellow: Optional[float] = None
    low_yellow: Optional[float] = None


class ThresholdConfig(BaseModel):
    """시스템 단위로 해석된 임계값 설정"""
    ratio: Optional[RatioThresholds] = None
    severity: Optional[SeverityThresholds] = None
    allowlist: List[str] = Field(default_factory=list)


class Verdict(BaseModel):
    """규칙 평가 결과 모델"""
    color: Color
    reason: str


class Offender(BaseModel):
    """드릴다운 표시용 상위 문제 엔티티"""
    name: str
    counts: Dict[str, float] = Field(default_factory=dict)
    success_rate: Optional[float] = None


class PipelineMetrics(BaseModel):
    """파이프라인 실행 집계 결과"""
    total_success: int = 0
    total_failure: int = 0
    total_runs: int = 0
    success_rate: float = 0.0


class EvaluationResult(BaseModel):
    """한 메트릭 소스에 대한 최종 평가 결과"""
    source: str
    color: Color
    reason: str
    summary: str = ""
    aggregated_metrics: Dict[str, Any] = Field(default_factory=dict)
    ranked_offenders: List[Offender] = Field(default_factory=list, max_length=5)
    entity_count: int = 0
