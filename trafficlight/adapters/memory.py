"""
In-memory collaborators for trafficlight.

These adapters implement the fact, configuration and entity resolution
ports over plain dictionaries. They back the test-suite and local demos.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from trafficlight.core.checks import ThresholdCheck, run_checks
from trafficlight.core.models import EntityRef, SystemRef
from trafficlight.core.normalize import to_check_set, to_fact_record
from trafficlight.core.sources import MetricSource


class InMemoryFactSource:
    """딕셔너리 기반 팩트 소스"""

    def __init__(self,
                 facts: Optional[Mapping[str, Mapping[str, Mapping[str, Any]]]] = None,
                 checks: Optional[Mapping[str, Mapping[str, Iterable[Any]]]] = None,
                 *,
                 derived_checks: Optional[Mapping[str, Sequence[ThresholdCheck]]] = None,
                 annotations: Optional[Mapping[str, str]] = None,
                 failing: Iterable[str] = ()):
        """
        초기화합니다.

        Args:
            facts: 소스 키 -> 엔티티 이름 -> 원시 facts
            checks: 소스 키 -> 엔티티 이름 -> 체크 결과 목록
            derived_checks: 소스 키 -> facts로부터 계산할 동적 체크
            annotations: 동적 체크의 임계값/연산자 어노테이션
            failing: 조회 시 예외를 던질 엔티티 이름
        """
        self.facts = {k: dict(v) for k, v in (facts or {}).items()}
        self.checks = {k: dict(v) for k, v in (checks or {}).items()}
        self.derived_checks = dict(derived_checks or {})
        self.annotations = dict(annotations or {})
        self.failing = set(failing)
        self.calls: List[str] = []

    def _guard(self, ref: EntityRef) -> None:
        self.calls.append(ref.name)
        if ref.name in self.failing:
            raise ConnectionError(f"tech-insights unavailable for {ref}")

    async def fetch_facts(self, source: MetricSource, ref: EntityRef) -> Dict[str, float]:
        """엔티티 팩트 레코드를 반환합니다. 데이터가 없으면 0 레코드."""
        self._guard(ref)
        raw = self.facts.get(source.key, {}).get(ref.name)
        return to_fact_record(source, raw)

    async def fetch_checks(self, source: MetricSource, ref: EntityRef) -> Dict[str, bool]:
        """엔티티 체크 결과를 반환합니다."""
        self._guard(ref)
        if source.key in self.derived_checks:
            raw = self.facts.get(source.key, {}).get(ref.name) or {}
            return run_checks(raw, self.derived_checks[source.key], self.annotations)
        results = self.checks.get(source.key, {}).get(ref.name)
        return to_check_set(source, results)


class StaticCatalog:
    """딕셔너리 기반 카탈로그 (시스템 설정 + 엔티티 소속)"""

    def __init__(self,
                 systems: Optional[Mapping[str, Mapping[str, str]]] = None,
                 parents: Optional[Mapping[str, str]] = None,
                 *,
                 namespace: str = "default",
                 unavailable: bool = False):
        """
        초기화합니다.

        Args:
            systems: 시스템 이름 -> 어노테이션
            parents: 엔티티 이름 -> 시스템 이름
            namespace: 시스템 네임스페이스
            unavailable: True면 설정 조회가 실패
        """
        self.systems = {k: dict(v) for k, v in (systems or {}).items()}
        self.parents = dict(parents or {})
        self.namespace = namespace
        self.unavailable = unavailable

    async def get_system_config(self, system: SystemRef) -> Dict[str, str]:
        """시스템 어노테이션을 반환합니다. 없는 시스템은 LookupError."""
        if self.unavailable:
            raise ConnectionError("catalog unavailable")
        if system.name not in self.systems:
            raise LookupError(f"system not found: {system}")
        return dict(self.systems[system.name])

    async def resolve_parent_system(self, ref: EntityRef) -> Optional[SystemRef]:
        """엔티티의 시스템을 반환합니다. 미지정이면 None."""
        name = self.parents.get(ref.name)
        if not name:
            return None
        return SystemRef(namespace=ref.namespace or self.namespace, name=name)
