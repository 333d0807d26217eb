"""
hypothesis를 활용한 models 모듈 테스트
"""

import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError

from trafficlight.core.models import (
    EntityRef, SystemRef, EvaluationResult, Offender, PipelineFacts, RatioThresholds,
    SeverityThresholds,
)
from trafficlight.core.sources import SOURCES, get_source, RuleKind


class TestRefs:
    """엔티티/시스템 참조 테스트"""

    def test_entity_ref_string(self):
        assert str(EntityRef(name="api")) == "component:default/api"
        assert str(EntityRef(kind="Resource", namespace="team", name="db")) == "resource:team/db"

    def test_system_ref_string(self):
        assert str(SystemRef(name="payments")) == "system:default/payments"

    def test_refs_are_frozen(self):
        ref = EntityRef(name="api")
        with pytest.raises(ValidationError):
            ref.name = "web"

    @given(st.text(min_size=1, max_size=30))
    def test_refs_hashable(self, name):
        assert len({EntityRef(name=name), EntityRef(name=name)}) == 1


class TestThresholdModels:
    """임계값 모델 테스트"""

    def test_severity_defaults(self):
        t = SeverityThresholds()
        assert t.critical_red == 0.0
        assert t.medium_red is None

    def test_ratio_rejects_negative(self):
        with pytest.raises(ValidationError):
            RatioThresholds(ratio_threshold=-0.1)

    @given(st.integers(min_value=0, max_value=10_000), st.integers(min_value=0, max_value=10_000))
    def test_pipeline_total(self, success, failure):
        assert PipelineFacts(success_runs=success, failure_runs=failure).total_runs == success + failure


class TestEvaluationResult:
    """평가 결과 모델 테스트"""

    def test_offender_limit(self):
        with pytest.raises(ValidationError):
            EvaluationResult(
                source="x", color="red", reason="r",
                ranked_offenders=[Offender(name=str(i)) for i in range(6)],
            )

    def test_invalid_color(self):
        with pytest.raises(ValidationError):
            EvaluationResult(source="x", color="blue", reason="r")


class TestSourceRegistry:
    """메트릭 소스 레지스트리 테스트"""

    def test_all_sources_registered(self):
        assert set(SOURCES) == {
            "dependabot", "blackduck", "github-advanced-security", "sonarqube",
            "azure-devops", "foundation", "preproduction", "reporting",
        }

    def test_get_source_unknown(self):
        with pytest.raises(KeyError):
            get_source("snyk")

    @pytest.mark.parametrize("key", list(SOURCES))
    def test_rule_has_thresholds(self, key):
        source = get_source(key)
        if source.rule is RuleKind.RATIO:
            assert source.ratio_key
        if source.rule is RuleKind.SEVERITY:
            assert source.severity_defaults
        assert source.checks
