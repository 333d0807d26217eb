# trafficlight/settings.py
from __future__ import annotations
from pydantic import BaseModel, Field

from trafficlight.core.sources import SOURCES

class Backstage(BaseModel):
    base_url: str = "http://localhost:7007/api"
    token: str = ""
    timeout_sec: int = 30
    max_retries: int = 3

    @property
    def catalog_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/catalog"

    @property
    def techinsights_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/tech-insights"

class Evaluation(BaseModel):
    offender_limit: int = Field(default=5, ge=0, le=5)
    enabled_sources: list[str] = Field(default_factory=lambda: list(SOURCES))

class Observability(BaseModel):
    service_name: str = "trafficlight"
    log_level: str = "INFO"
    json_logs: bool = False

class Settings(BaseModel):
    # 하위 섹션 (기본값/팩토리로 누락 방지)
    backstage: Backstage = Field(default_factory=Backstage)
    evaluation: Evaluation = Field(default_factory=Evaluation)
    observability: Observability = Field(default_factory=Observability)
