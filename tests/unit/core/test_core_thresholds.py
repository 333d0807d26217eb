"""
임계값 해석 모듈 테스트

시스템 어노테이션 파싱, 기본값 대체, 엔티티 수 비례 임계값을 검증합니다.
"""

import pytest
from unittest.mock import AsyncMock
from hypothesis import given, strategies as st
from prometheus_client import REGISTRY

from trafficlight.core import thresholds
from trafficlight.core.models import SystemRef
from trafficlight.core.sources import (
    AZURE_DEVOPS, BLACKDUCK, DEPENDABOT, FOUNDATION, GITHUB_ADVANCED_SECURITY, SONARQUBE,
)
from trafficlight.adapters.memory import StaticCatalog

SYSTEM = SystemRef(name="payments")


def _fallbacks() -> float:
    return REGISTRY.get_sample_value("trafficlight_config_fallbacks_total") or 0.0


class TestParseThreshold:
    """임계값 문자열 파싱 테스트"""

    @pytest.mark.parametrize("raw,expected", [
        ("0.25", 0.25),
        (" 3 ", 3.0),
        ("0", 0.0),
        ("-2", -2.0),
    ])
    def test_valid(self, raw, expected):
        assert thresholds.parse_threshold(raw, 9.0) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "1,5", "nan", "inf", "-inf"])
    def test_invalid_uses_default(self, raw):
        assert thresholds.parse_threshold(raw, 0.33) == 0.33

    @given(st.floats(allow_nan=False, allow_infinity=False))
    def test_roundtrip_finite(self, value):
        """유한한 숫자 문자열은 그대로 해석"""
        assert thresholds.parse_threshold(repr(value), -1.0) == value


class TestAllowlist:
    """허용 목록 파싱 테스트"""

    def test_parse_trims_and_drops_empty(self):
        assert thresholds.parse_allowlist(" api, web ,,worker ") == ["api", "web", "worker"]

    def test_parse_empty(self):
        assert thresholds.parse_allowlist(None) == []
        assert thresholds.parse_allowlist("") == []

    def test_source_without_allowlist_key(self):
        annotations = {"foundation-configured-repositories": "api"}
        assert thresholds.resolve_allowlist(annotations, GITHUB_ADVANCED_SECURITY) == []
        assert thresholds.resolve_allowlist(annotations, FOUNDATION) == ["api"]


class TestResolveSeverity:
    """심각도 임계값 해석 테스트"""

    def test_defaults_scale_with_entity_count(self):
        """비율 필드는 엔티티 수를 곱함 (medium 0.5 * 10 = 5)"""
        result = thresholds.resolve_severity({}, GITHUB_ADVANCED_SECURITY, 10)
        assert result.critical_red == 0.0
        assert result.high_red == 0.0
        assert result.secrets_red == 0.0
        assert result.medium_red == pytest.approx(5.0)
        assert result.medium_yellow == pytest.approx(1.0)
        assert result.low_yellow == pytest.approx(2.0)

    def test_four_entities(self):
        result = thresholds.resolve_severity({}, GITHUB_ADVANCED_SECURITY, 4)
        assert result.medium_red == pytest.approx(2.0)

    def test_annotation_overrides(self):
        annotations = {
            "github-advanced-security-system-critical-threshold-red": "2",
            "github-advanced-security-system-medium-threshold-red": "0.3",
        }
        result = thresholds.resolve_severity(annotations, GITHUB_ADVANCED_SECURITY, 10)
        assert result.critical_red == 2.0
        assert result.medium_red == pytest.approx(3.0)

    def test_malformed_and_negative_use_defaults(self):
        annotations = {
            "github-advanced-security-system-high-threshold-red": "lots",
            "github-advanced-security-system-low-threshold-yellow": "-1",
        }
        result = thresholds.resolve_severity(annotations, GITHUB_ADVANCED_SECURITY, 10)
        assert result.high_red == 0.0
        assert result.low_yellow == pytest.approx(2.0)

    def test_source_without_severity_defaults(self):
        """심각도 기본값이 없는 소스는 모든 임계값이 정의되지 않음"""
        result = thresholds.resolve_severity({}, DEPENDABOT, 10)
        assert result.critical_red is None
        assert result.medium_red is None


class TestResolveRatio:
    """비율 임계값 해석 테스트"""

    def test_default(self):
        assert thresholds.resolve_ratio({}, AZURE_DEVOPS).ratio_threshold == pytest.approx(0.33)

    def test_percentage_annotation(self):
        annotations = {"tech-insights.io/blackduck-critical-check-percentage": "50"}
        assert thresholds.resolve_ratio(annotations, BLACKDUCK).ratio_threshold == pytest.approx(0.5)

    def test_percentage_default(self):
        assert thresholds.resolve_ratio({}, SONARQUBE).ratio_threshold == pytest.approx(0.5)

    def test_out_of_range_uses_default(self):
        annotations = {"azure-bugs-check-threshold-red": "5"}
        assert thresholds.resolve_ratio(annotations, AZURE_DEVOPS).ratio_threshold == pytest.approx(0.33)

    def test_fraction_annotation(self):
        annotations = {"azure-bugs-check-threshold-red": "0.2"}
        assert thresholds.resolve_ratio(annotations, AZURE_DEVOPS).ratio_threshold == pytest.approx(0.2)


class TestResolve:
    """설정 조회 포함 해석 테스트"""

    @pytest.mark.asyncio
    async def test_resolve_from_catalog(self):
        catalog = StaticCatalog(systems={"payments": {"azure-bugs-check-threshold-red": "0.6"}})
        config = await thresholds.resolve(catalog, SYSTEM, AZURE_DEVOPS, 3)
        assert config.ratio.ratio_threshold == pytest.approx(0.6)
        assert config.severity is None

    @pytest.mark.asyncio
    async def test_config_failure_falls_back_to_defaults(self):
        """설정 조회 실패는 기본값으로 대체되고 카운터가 증가"""
        before = _fallbacks()
        catalog = StaticCatalog(unavailable=True)

        config = await thresholds.resolve(catalog, SYSTEM, GITHUB_ADVANCED_SECURITY, 10)

        assert config.severity.medium_red == pytest.approx(5.0)
        assert _fallbacks() == before + 1

    @pytest.mark.asyncio
    async def test_unknown_system_falls_back(self):
        catalog = StaticCatalog(systems={})
        annotations = await thresholds.fetch_annotations(catalog, SYSTEM)
        assert annotations == {}

    @pytest.mark.asyncio
    async def test_no_system(self):
        config_source = AsyncMock()
        annotations = await thresholds.fetch_annotations(config_source, None)
        assert annotations == {}
        config_source.get_system_config.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_mapping_response(self):
        config_source = AsyncMock()
        config_source.get_system_config.return_value = ["not", "a", "map"]
        assert await thresholds.fetch_annotations(config_source, SYSTEM) == {}

    def test_critical_first_has_no_thresholds(self):
        config = thresholds.thresholds_from_annotations({}, DEPENDABOT, 5)
        assert config.ratio is None
        assert config.severity is None
        assert config.allowlist == []
