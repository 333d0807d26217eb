"""
Configuration source port interface.

This module defines the protocol for system-level configuration lookup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Protocol

if TYPE_CHECKING:
    from trafficlight.core.models import SystemRef

class ConfigSourcePort(Protocol):
    """시스템 설정 조회 포트 인터페이스"""
    
    async def get_system_config(self, system: SystemRef) -> Dict[str, str]:
        """
        시스템 엔티티의 어노테이션을 조회합니다.
        
        Args:
            system: 대상 시스템
            
        Returns:
            어노테이션 맵 (키가 없으면 기본값 사용)
        """
        ...
