# trafficlight/main.py
import os, sys, json, asyncio
from typing import List, Optional

from trafficlight.settings import Settings
from trafficlight.core.models import EntityRef
from trafficlight.core.sources import get_source
from trafficlight.adapters.backstage import CatalogClient, TechInsightsClient
from trafficlight.orchestrators import Collaborators, evaluate_dashboard
from trafficlight.observability.logging_setup import setup_logging, get_logger

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def build_settings() -> Settings:
    s = Settings()

    # BACKSTAGE
    s.backstage.base_url = os.getenv("BACKSTAGE_BASE_URL", s.backstage.base_url)
    s.backstage.token = os.getenv("BACKSTAGE_TOKEN", s.backstage.token)
    s.backstage.timeout_sec = int(os.getenv("BACKSTAGE_TIMEOUT_SEC", s.backstage.timeout_sec))

    # EVALUATION
    s.evaluation.offender_limit = max(0, min(5, int(os.getenv("OFFENDER_LIMIT", s.evaluation.offender_limit))))
    raw_sources = os.getenv("ENABLED_SOURCES")
    if raw_sources:
        s.evaluation.enabled_sources = [k.strip() for k in raw_sources.split(",") if k.strip()]

    # OBSERVABILITY
    s.observability.service_name = os.getenv("SERVICE_NAME", s.observability.service_name)
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level).upper()
    s.observability.json_logs = _b("LOG_JSON", s.observability.json_logs)
    return s

def parse_entity(text: str) -> EntityRef:
    """'kind:namespace/name', 'namespace/name' 또는 'name' 형식을 파싱합니다."""
    kind = "Component"
    if ":" in text:
        kind, text = text.split(":", 1)
    namespace = "default"
    if "/" in text:
        namespace, text = text.split("/", 1)
    return EntityRef(kind=kind, namespace=namespace, name=text)

async def run(settings: Settings, entity_args: List[str]) -> dict:
    log = get_logger("trafficlight.main")
    sources = [get_source(k) for k in settings.evaluation.enabled_sources]
    entities = [parse_entity(a) for a in entity_args]
    log.info(f"평가 시작 sources:{len(sources)} entities:{len(entities)}")

    bs = settings.backstage
    async with CatalogClient(bs.catalog_url, bs.token, bs.timeout_sec, bs.max_retries) as catalog, \
            TechInsightsClient(bs.techinsights_url, bs.token, bs.timeout_sec, bs.max_retries) as insights:
        collaborators = Collaborators(facts=insights, config=catalog, resolver=catalog)
        results = await evaluate_dashboard(
            sources, entities, collaborators, limit=settings.evaluation.offender_limit
        )
    return {key: result.model_dump() for key, result in results.items()}

def main(argv: Optional[List[str]] = None) -> int:
    s = build_settings()
    setup_logging(
        s.observability.log_level,
        json_logs=s.observability.json_logs,
        service_name=s.observability.service_name,
    )
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("usage: trafficlight ENTITY [ENTITY ...]", file=sys.stderr)
        return 2
    results = asyncio.run(run(s, args))
    print(json.dumps(results, indent=2, ensure_ascii=False))
    return 0

if __name__ == "__main__":
    sys.exit(main())
