"""
Tech Insights API client for trafficlight.

This module implements the fact source port over the Backstage
tech-insights backend: latest facts per retriever and check runs.
"""

from typing import Dict
from urllib.parse import quote

from trafficlight.core.models import EntityRef
from trafficlight.core.normalize import extract_facts, to_check_set, to_fact_record
from trafficlight.core.sources import MetricSource
from .http import BackstageHTTPClient, log


class TechInsightsClient(BackstageHTTPClient):
    """tech-insights 팩트/체크 조회 클라이언트"""

    async def get_latest_facts(self, source: MetricSource, ref: EntityRef) -> Dict:
        """소스 리트리버의 최신 facts 원본을 조회합니다."""
        data = await self._make_request(
            "GET",
            "/facts/latest",
            params=[("entity", str(ref)), ("ids[]", source.retriever)],
        )
        return extract_facts(source, data)

    async def fetch_facts(self, source: MetricSource, ref: EntityRef) -> Dict[str, float]:
        """
        엔티티의 정규화된 팩트 레코드를 조회합니다.

        Args:
            source: 메트릭 소스 정의
            ref: 대상 엔티티

        Returns:
            팩트 레코드 (데이터가 없으면 0 레코드)
        """
        facts = await self.get_latest_facts(source, ref)
        if not facts:
            log.info(f"팩트 없음 source:{source.key} entity:{ref}")
        return to_fact_record(source, facts)

    async def fetch_checks(self, source: MetricSource, ref: EntityRef) -> Dict[str, bool]:
        """
        소스 체크를 실행하고 결과를 조회합니다.

        Args:
            source: 메트릭 소스 정의
            ref: 대상 엔티티

        Returns:
            체크 ID -> 결과
        """
        endpoint = "/checks/run/{}/{}/{}".format(
            quote(ref.namespace, safe=""),
            quote(ref.kind.lower(), safe=""),
            quote(ref.name, safe=""),
        )
        data = await self._make_request("POST", endpoint, json={"checks": list(source.checks.values())})
        return to_check_set(source, data if isinstance(data, list) else [])
