"""
설정 및 진입점 테스트
"""

import pytest

from trafficlight.main import build_settings, parse_entity
from trafficlight.core.models import EntityRef
from trafficlight.core.sources import SOURCES


def test_defaults(monkeypatch):
    for name in ("BACKSTAGE_BASE_URL", "OFFENDER_LIMIT", "ENABLED_SOURCES", "LOG_JSON", "SERVICE_NAME"):
        monkeypatch.delenv(name, raising=False)
    s = build_settings()
    assert s.backstage.catalog_url == "http://localhost:7007/api/catalog"
    assert s.backstage.techinsights_url == "http://localhost:7007/api/tech-insights"
    assert s.evaluation.offender_limit == 5
    assert s.observability.service_name == "trafficlight"
    assert s.evaluation.enabled_sources == list(SOURCES)
    assert s.observability.json_logs is False


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("BACKSTAGE_BASE_URL", "https://backstage.example.com/api/")
    monkeypatch.setenv("BACKSTAGE_TOKEN", "tok")
    monkeypatch.setenv("BACKSTAGE_TIMEOUT_SEC", "12")
    monkeypatch.setenv("OFFENDER_LIMIT", "9")
    monkeypatch.setenv("ENABLED_SOURCES", "sonarqube, dependabot")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_JSON", "true")
    monkeypatch.setenv("SERVICE_NAME", "trafficlight-ci")

    s = build_settings()

    assert s.backstage.catalog_url == "https://backstage.example.com/api/catalog"
    assert s.backstage.token == "tok"
    assert s.backstage.timeout_sec == 12
    assert s.evaluation.offender_limit == 5
    assert s.evaluation.enabled_sources == ["sonarqube", "dependabot"]
    assert s.observability.log_level == "DEBUG"
    assert s.observability.json_logs is True
    assert s.observability.service_name == "trafficlight-ci"


def test_sample_settings_fixture(sample_settings):
    assert sample_settings.observability.service_name == "test-service"


@pytest.mark.parametrize("text,expected", [
    ("api", EntityRef(name="api")),
    ("team/api", EntityRef(namespace="team", name="api")),
    ("Resource:team/db", EntityRef(kind="Resource", namespace="team", name="db")),
])
def test_parse_entity(text, expected):
    assert parse_entity(text) == expected
