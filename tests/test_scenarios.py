"""
신호등 대시보드 시나리오 테스트

인메모리 협력자로 한 시스템의 여러 메트릭 소스를 끝까지 평가합니다.
"""

import pytest

from trafficlight.adapters.memory import InMemoryFactSource, StaticCatalog
from trafficlight.core.models import EntityRef
from trafficlight.core.sources import SOURCES, get_source
from trafficlight.orchestrators import Collaborators, evaluate, evaluate_dashboard

REPOS = ["checkout", "cart", "search", "profile"]


@pytest.fixture
def entities():
    return [EntityRef(name=n) for n in REPOS]


@pytest.fixture
def catalog():
    """payments 시스템 (임계값 일부 재정의)"""
    return StaticCatalog(
        systems={"payments": {
            "tech-insights.io/blackduck-critical-check-percentage": "50",
            "github-advanced-security-system-high-threshold-red": "1",
            "preproduction-configured-repositories": "checkout,cart",
        }},
        parents={n: "payments" for n in REPOS},
    )


@pytest.fixture
def facts():
    return InMemoryFactSource(
        facts={
            "blackduck": {
                "checkout": {"security_risks_critical": 1},
                "cart": {"security_risks_high": 3},
            },
            "github-advanced-security": {
                "checkout": {"highCount": 2, "lowCount": 1},
                "search": {"highCount": 1},
            },
            "preproduction": {
                "checkout": {"successWorkflowRunsCount": 9, "failureWorkflowRunsCount": 1},
                "cart": {"successWorkflowRunsCount": 5, "failureWorkflowRunsCount": 5},
            },
        },
        checks={
            "blackduck": {
                "checkout": [{"id": "blackduck-critical-security-risk", "result": False}],
                "cart": [{"id": "blackduck-high-security-risk", "result": False}],
            },
            "github-advanced-security": {
                "checkout": [{"id": "high-count", "result": True}, {"id": "low-count", "result": True}],
                "search": [{"id": "high-count", "result": True}],
            },
            "preproduction": {
                "checkout": [{"id": "preproduction-success-rate", "result": True}],
                "cart": [{"id": "preproduction-success-rate", "result": False}],
            },
        },
    )


@pytest.mark.asyncio
async def test_full_dashboard(entities, catalog, facts):
    """모든 소스 평가"""
    results = await evaluate_dashboard(
        list(SOURCES.values()), entities, Collaborators(facts=facts, config=catalog, resolver=catalog)
    )

    assert set(results) == set(SOURCES)

    # 4개 중 2개 실패, 비율 50% 한계와 같으므로 노랑
    blackduck = results["blackduck"]
    assert blackduck.color == "yellow"
    assert blackduck.reason == "2 out of 4 entities failed (threshold: 50.0%)."
    assert [o.name for o in blackduck.ranked_offenders] == ["checkout", "cart"]

    # high 실패 2건 > 재정의된 한계 1
    ghas = results["github-advanced-security"]
    assert ghas.color == "red"
    assert ghas.reason == "High severity issues are exceeded by 2 repos, the threshold for this system is: 1"

    pre = results["preproduction"]
    assert pre.entity_count == 2
    assert pre.color == "red"
    assert pre.summary.endswith("(Based on 2 configured repositories)")
    assert [o.name for o in pre.ranked_offenders] == ["cart", "checkout"]

    assert results["dependabot"].color == "green"
    assert results["foundation"].color == "green"


@pytest.mark.asyncio
async def test_results_are_not_cached(entities, catalog, facts):
    """같은 입력의 재평가는 협력자를 다시 호출"""
    collaborators = Collaborators(facts=facts, config=catalog, resolver=catalog)
    source = get_source("github-advanced-security")

    first = await evaluate(source, entities, collaborators)
    calls = len(facts.calls)
    second = await evaluate(source, entities, collaborators)

    assert first == second
    assert len(facts.calls) == 2 * calls


@pytest.mark.asyncio
async def test_outage_isolated_per_evaluation(entities, catalog):
    """한 엔티티 장애는 해당 평가만 gray로 만듦"""
    facts = InMemoryFactSource(failing={"profile"})
    collaborators = Collaborators(facts=facts, config=catalog, resolver=catalog)

    results = await evaluate_dashboard(
        [get_source("sonarqube"), get_source("preproduction")], entities, collaborators
    )

    assert results["sonarqube"].color == "gray"
    assert results["sonarqube"].reason == "Failed to load SonarQube data."
    # profile은 허용 목록에 없어 조회되지 않음
    assert results["preproduction"].color == "green"
