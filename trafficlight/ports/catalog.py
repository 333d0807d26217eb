"""
Entity resolution port interface.

This module defines the protocol for resolving an entity's parent system.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from trafficlight.core.models import EntityRef, SystemRef

class EntityResolverPort(Protocol):
    """엔티티 -> 시스템 해석 포트 인터페이스"""
    
    async def resolve_parent_system(self, ref: EntityRef) -> Optional[SystemRef]:
        """
        엔티티가 속한 시스템을 조회합니다.
        
        Args:
            ref: 대상 엔티티
            
        Returns:
            시스템 참조 또는 None (시스템 미지정/미발견)
        """
        ...
