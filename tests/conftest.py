"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import pytest

from trafficlight.settings import Settings
from trafficlight.core.models import EntityRef
from trafficlight.adapters.memory import InMemoryFactSource, StaticCatalog
from trafficlight.orchestrators import Collaborators


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.log_level = "INFO"
    return settings


@pytest.fixture
def make_entities():
    """이름 목록으로 엔티티 참조 목록을 만드는 팩토리"""
    def _make(*names: str):
        return [EntityRef(name=n) for n in names]
    return _make


@pytest.fixture
def make_catalog():
    """모든 엔티티가 한 시스템에 속한 카탈로그 팩토리"""
    def _make(entities, annotations=None, system="payments", **kwargs):
        return StaticCatalog(
            systems={system: annotations or {}},
            parents={e.name: system for e in entities},
            **kwargs,
        )
    return _make


@pytest.fixture
def make_collaborators():
    """팩트 소스와 카탈로그로 협력자 묶음을 만드는 팩토리"""
    def _make(facts_source, catalog):
        return Collaborators(facts=facts_source, config=catalog, resolver=catalog)
    return _make


@pytest.fixture
def empty_facts():
    """데이터가 없는 팩트 소스"""
    return InMemoryFactSource()
