"""
Metric source registry for trafficlight.

Each third-party tool is described by one declarative MetricSource record:
which fact retriever and check ids it uses, which rule family colours it,
and which system annotations carry its thresholds.
"""

from typing import Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from .models import RuleKind

SEVERITY_FIELDS = ("critical_red", "high_red", "secrets_red", "medium_red", "medium_yellow", "low_yellow")


class Dimension(BaseModel):
    """팩트 레코드의 한 차원 (심각도 버킷)"""
    model_config = ConfigDict(frozen=True)

    name: str
    fact: str
    # 문자열 상태값 팩트(예: 품질 게이트)는 이 값일 때 0, 아니면 1로 센다
    passing_value: Optional[str] = None


class MetricSource(BaseModel):
    """메트릭 소스 정의"""
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    rule: RuleKind
    shape: Literal["severity", "pipeline"] = "severity"
    retriever: str
    dimensions: Tuple[Dimension, ...] = ()
    # 차원 이름 -> 체크 ID
    checks: Dict[str, str] = Field(default_factory=dict)
    # 이 값을 반환한 체크를 실패로 본다
    failing_result: bool = False

    # 비율 규칙
    ratio_key: Optional[str] = None
    ratio_default: float = 0.33
    ratio_is_percentage: bool = False

    # 심각도 규칙
    severity_keys: Dict[str, str] = Field(default_factory=dict)
    severity_defaults: Dict[str, float] = Field(default_factory=dict)
    rate_fields: Tuple[str, ...] = ()

    allowlist_key: Optional[str] = None

    # 파이프라인 팩트 필드
    success_fact: str = "successWorkflowRunsCount"
    failure_fact: str = "failureWorkflowRunsCount"

    @property
    def dimension_names(self) -> List[str]:
        return [d.name for d in self.dimensions]


DEPENDABOT = MetricSource(
    key="dependabot",
    label="Dependabot",
    rule=RuleKind.CRITICAL_FIRST,
    retriever="dependabotFactRetriever",
    dimensions=(
        Dimension(name="critical", fact="critical"),
        Dimension(name="high", fact="high"),
        Dimension(name="medium", fact="medium"),
    ),
    checks={
        "critical": "dependabot-critical-alerts",
        "high": "dependabot-high-alerts",
        "medium": "dependabot-medium-alerts",
    },
    failing_result=False,
)

BLACKDUCK = MetricSource(
    key="blackduck",
    label="BlackDuck",
    rule=RuleKind.RATIO,
    retriever="blackduck-fact-retriever",
    dimensions=(
        Dimension(name="critical", fact="security_risks_critical"),
        Dimension(name="high", fact="security_risks_high"),
        Dimension(name="medium", fact="security_risks_medium"),
    ),
    checks={
        "critical": "blackduck-critical-security-risk",
        "high": "blackduck-high-security-risk",
        "medium": "blackduck-medium-security-risk",
    },
    failing_result=False,
    ratio_key="tech-insights.io/blackduck-critical-check-percentage",
    ratio_default=33.0,
    ratio_is_percentage=True,
)

GITHUB_ADVANCED_SECURITY = MetricSource(
    key="github-advanced-security",
    label="GitHub Security",
    rule=RuleKind.SEVERITY,
    retriever="githubAdvancedSecurityFactRetriever",
    dimensions=(
        Dimension(name="critical", fact="criticalCount"),
        Dimension(name="high", fact="highCount"),
        Dimension(name="medium", fact="mediumCount"),
        Dimension(name="low", fact="lowCount"),
        Dimension(name="secret", fact="openSecretScanningAlertCount"),
    ),
    checks={
        "critical": "critical-count",
        "high": "high-count",
        "medium": "medium-count",
        "low": "low-count",
        "secret": "open-secret-scanning-alert-count",
    },
    failing_result=True,
    severity_keys={
        "critical_red": "github-advanced-security-system-critical-threshold-red",
        "high_red": "github-advanced-security-system-high-threshold-red",
        "secrets_red": "github-advanced-security-system-secrets-threshold-red",
        "medium_red": "github-advanced-security-system-medium-threshold-red",
        "medium_yellow": "github-advanced-security-system-medium-threshold-yellow",
        "low_yellow": "github-advanced-security-system-low-threshold-yellow",
    },
    severity_defaults={
        "critical_red": 0.0,
        "high_red": 0.0,
        "secrets_red": 0.0,
        "medium_red": 0.5,
        "medium_yellow": 0.1,
        "low_yellow": 0.2,
    },
    rate_fields=("medium_red", "medium_yellow", "low_yellow"),
)

SONARQUBE = MetricSource(
    key="sonarqube",
    label="SonarQube",
    rule=RuleKind.RATIO,
    retriever="sonarcloud-fact-retriever",
    dimensions=(
        Dimension(name="quality_gate", fact="quality_gate", passing_value="OK"),
        Dimension(name="vulnerabilities", fact="vulnerabilities"),
        Dimension(name="bugs", fact="bugs"),
        Dimension(name="code_smells", fact="code_smells"),
    ),
    checks={"quality_gate": "sonarcloud-quality-gate"},
    failing_result=False,
    ratio_key="tech-insights.io/sonarcloud-quality-gate-red-threshold-percentage",
    ratio_default=50.0,
    ratio_is_percentage=True,
)

AZURE_DEVOPS = MetricSource(
    key="azure-devops",
    label="Azure DevOps",
    rule=RuleKind.RATIO,
    retriever="azure-devops-bugs-retriever",
    dimensions=(Dimension(name="bugs", fact="azure_bug_count"),),
    checks={"bugs": "azure-bugs"},
    failing_result=False,
    ratio_key="azure-bugs-check-threshold-red",
)

FOUNDATION = MetricSource(
    key="foundation",
    label="Foundation pipeline",
    rule=RuleKind.RATIO,
    shape="pipeline",
    retriever="foundationPipelineStatusFactRetriever",
    checks={"success_rate": "foundation-success-rate"},
    failing_result=False,
    ratio_key="foundation-check-threshold-red",
    allowlist_key="foundation-configured-repositories",
)

PREPRODUCTION = MetricSource(
    key="preproduction",
    label="Preproduction pipeline",
    rule=RuleKind.RATIO,
    shape="pipeline",
    retriever="githubPipelineStatusFactRetriever",
    checks={"success_rate": "preproduction-success-rate"},
    failing_result=False,
    ratio_key="preproduction-check-threshold-red",
    allowlist_key="preproduction-configured-repositories",
)

REPORTING = MetricSource(
    key="reporting",
    label="Reporting pipeline",
    rule=RuleKind.RATIO,
    shape="pipeline",
    retriever="reportingPipelineStatusFactRetriever",
    checks={"success_rate": "reporting-success-rate"},
    failing_result=False,
    ratio_key="reporting-check-threshold-red",
    success_fact="successfulRuns",
    failure_fact="failedRuns",
)

SOURCES: Dict[str, MetricSource] = {
    s.key: s
    for s in (
        DEPENDABOT,
        BLACKDUCK,
        GITHUB_ADVANCED_SECURITY,
        SONARQUBE,
        AZURE_DEVOPS,
        FOUNDATION,
        PREPRODUCTION,
        REPORTING,
    )
}


def get_source(key: str) -> MetricSource:
    """키로 메트릭 소스를 조회합니다. 없으면 KeyError."""
    try:
        return SOURCES[key]
    except KeyError:
        raise KeyError(f"unknown metric source: {key}") from None
