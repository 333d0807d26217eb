"""
Catalog API client for trafficlight.

This module implements the configuration source and entity resolution
ports over the Backstage catalog backend.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

from trafficlight.core.models import EntityRef, SystemRef
from .http import BackstageHTTPClient, log


class CatalogClient(BackstageHTTPClient):
    """카탈로그 엔티티 조회 클라이언트"""

    async def get_entity(self, kind: str, namespace: str, name: str) -> Optional[Dict[str, Any]]:
        """
        이름으로 엔티티를 조회합니다.

        Returns:
            엔티티 JSON 또는 None (404)
        """
        endpoint = "/entities/by-name/{}/{}/{}".format(
            quote(kind.lower(), safe=""),
            quote(namespace, safe=""),
            quote(name, safe=""),
        )
        return await self._make_request("GET", endpoint)

    async def get_system_config(self, system: SystemRef) -> Dict[str, str]:
        """
        시스템 엔티티의 어노테이션을 조회합니다.

        Raises:
            LookupError: 시스템 엔티티가 없는 경우
        """
        entity = await self.get_entity("system", system.namespace, system.name)
        if entity is None:
            raise LookupError(f"system not found: {system}")
        annotations = (entity.get("metadata") or {}).get("annotations") or {}
        return {str(k): str(v) for k, v in annotations.items()}

    async def resolve_parent_system(self, ref: EntityRef) -> Optional[SystemRef]:
        """
        엔티티 spec.system으로 상위 시스템을 해석합니다.

        Returns:
            시스템 참조 또는 None (엔티티/시스템 미지정)
        """
        entity = await self.get_entity(ref.kind, ref.namespace, ref.name)
        if entity is None:
            log.warning(f"엔티티를 찾을 수 없음 entity:{ref}")
            return None
        system = (entity.get("spec") or {}).get("system")
        if not system:
            return None
        namespace = (entity.get("metadata") or {}).get("namespace") or ref.namespace
        return SystemRef(namespace=namespace, name=str(system))
