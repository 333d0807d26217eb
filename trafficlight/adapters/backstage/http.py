"""
Shared aiohttp plumbing for the Backstage API clients.

This module provides the session lifecycle and the retrying request
helper used by the catalog and tech-insights clients.
"""

import asyncio
from typing import Any, Optional

import aiohttp

from trafficlight.common.retry import retry_with_backoff
from trafficlight.observability.logging_setup import get_logger

log = get_logger("trafficlight.backstage")


def is_retryable(error: Exception) -> bool:
    """5xx 응답과 연결/타임아웃 오류만 재시도합니다."""
    if isinstance(error, aiohttp.ClientResponseError):
        return error.status >= 500
    return isinstance(error, (aiohttp.ClientError, asyncio.TimeoutError))


class BackstageHTTPClient:
    """Backstage 백엔드 API 공통 클라이언트"""

    def __init__(self,
                 base_url: str,
                 token: str = "",
                 timeout: int = 30,
                 max_retries: int = 3):
        """
        초기화합니다.

        Args:
            base_url: 플러그인 API 기본 URL (예: http://backstage/api/catalog)
            token: 서비스 토큰 (비어 있으면 인증 헤더 생략)
            timeout: 요청 타임아웃 (초)
            max_retries: 최대 재시도 횟수
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.max_retries = max_retries
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self.session = aiohttp.ClientSession(
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        if self.session:
            await self.session.close()
            self.session = None

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Optional[Any]:
        """
        API 요청을 수행합니다.

        Args:
            method: HTTP 메서드
            endpoint: API 엔드포인트
            **kwargs: 추가 요청 매개변수

        Returns:
            응답 JSON, 404이면 None

        Raises:
            RuntimeError: 세션이 열리지 않은 경우
            aiohttp.ClientError: 전송 실패 또는 404 외 오류 응답
        """
        if not self.session:
            raise RuntimeError("세션이 초기화되지 않았습니다. async with를 사용하세요.")

        url = f"{self.base_url}{endpoint}"

        async def _request():
            async with self.session.request(method, url, **kwargs) as response:
                if response.status == 404:
                    return None
                response.raise_for_status()
                return await response.json()

        return await retry_with_backoff(_request, max_retries=self.max_retries, retry_if=is_retryable)
