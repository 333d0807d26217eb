"""
Fact source port interface.

This module defines the protocol for per-entity fact and check retrieval.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Protocol

if TYPE_CHECKING:
    from trafficlight.core.models import EntityRef
    from trafficlight.core.sources import MetricSource

class FactSourcePort(Protocol):
    """팩트/체크 조회 포트 인터페이스"""
    
    async def fetch_facts(self, source: MetricSource, ref: EntityRef) -> Dict[str, float]:
        """
        엔티티의 정규화된 팩트 레코드를 조회합니다.
        
        Args:
            source: 메트릭 소스 정의
            ref: 대상 엔티티
            
        Returns:
            차원 이름 -> 값. 업스트림 데이터가 없으면 0으로 채운 레코드.
            
        Raises:
            전송/접근 실패 시에만 예외
        """
        ...
    
    async def fetch_checks(self, source: MetricSource, ref: EntityRef) -> Dict[str, bool]:
        """
        엔티티의 체크 결과를 조회합니다.
        
        Args:
            source: 메트릭 소스 정의
            ref: 대상 엔티티
            
        Returns:
            체크 ID -> 결과. 결과가 없으면 빈 맵.
        """
        ...
