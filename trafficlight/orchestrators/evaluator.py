"""
Traffic light evaluation pipeline for trafficlight.

This module coordinates one evaluation: parent system lookup,
threshold resolution, the parallel fact/check fan-out, aggregation,
rule evaluation and worst-offender ranking. Collaborators are passed
in on every call; nothing is cached between evaluations.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from trafficlight.core import thresholds as threshold_resolver
from trafficlight.core.aggregate import (
    aggregate_pipeline, aggregate_severity, build_pipeline_summary,
    count_failed_entities, count_failing_checks, success_rate,
)
from trafficlight.core.errors import ErrorKind, EvalError, Outcome, attempt
from trafficlight.core.models import (
    EntityRef, EvaluationResult, PipelineFacts, RuleKind, SystemRef, ThresholdConfig, Verdict,
)
from trafficlight.core.normalize import entity_failed
from trafficlight.core.policy import NO_ENTITIES_REASON, evaluate_rule
from trafficlight.core.ranking import DEFAULT_LIMIT, rank_lowest_success, rank_offenders
from trafficlight.core.sources import MetricSource
from trafficlight.ports import ConfigSourcePort, EntityResolverPort, FactSourcePort
from trafficlight.observability import metrics
from trafficlight.observability.logging_setup import get_logger

log = get_logger("trafficlight.evaluator")

NO_SYSTEM_REASON = "No system found for the selected entities"


@dataclass(frozen=True)
class Collaborators:
    """평가 한 번에 주입되는 협력자 묶음"""
    facts: FactSourcePort
    config: ConfigSourcePort
    resolver: EntityResolverPort


def failed_to_load(source: MetricSource) -> str:
    """협력자 실패 시 표시 문구"""
    return f"Failed to load {source.label} data."


def no_configured_entities(source: MetricSource) -> str:
    """허용 목록 필터 후 엔티티가 없을 때 표시 문구"""
    return f"No configured repositories found for {source.label} checks"


def _gray(source: MetricSource, error: EvalError, entity_count: int = 0) -> EvaluationResult:
    return EvaluationResult(
        source=source.key,
        color="gray",
        reason=error.message,
        summary=error.message,
        entity_count=entity_count,
    )


def _first_error(results: list) -> list:
    # 모든 결과를 회수한 뒤 첫 번째 예외를 다시 던진다
    for item in results:
        if isinstance(item, BaseException):
            raise item
    return list(results)


async def _fetch_one(
    facts_port: FactSourcePort,
    source: MetricSource,
    ref: EntityRef,
) -> Tuple[Dict[str, float], Dict[str, bool]]:
    facts, checks = _first_error(await asyncio.gather(
        facts_port.fetch_facts(source, ref),
        facts_port.fetch_checks(source, ref),
        return_exceptions=True,
    ))
    return facts or {}, checks or {}


async def fan_out(
    facts_port: FactSourcePort,
    source: MetricSource,
    entities: Sequence[EntityRef],
) -> List[Tuple[Dict[str, float], Dict[str, bool]]]:
    """
    모든 엔티티의 팩트와 체크를 병렬로 조회합니다.

    하나라도 실패하면 예외가 그대로 전파됩니다 (부분 집계 없음).
    결과 순서는 entities 순서와 같습니다.
    """
    return _first_error(await asyncio.gather(
        *(_fetch_one(facts_port, source, ref) for ref in entities),
        return_exceptions=True,
    ))


def apply_allowlist(entities: Sequence[EntityRef], allowlist: Sequence[str]) -> List[EntityRef]:
    """허용 목록이 있으면 이름이 포함된 엔티티만 남깁니다."""
    if not allowlist:
        return list(entities)
    allowed = set(allowlist)
    return [e for e in entities if e.name in allowed]


def _evaluate_pipeline(
    source: MetricSource,
    entities: Sequence[EntityRef],
    fetched: Sequence[Tuple[Dict[str, float], Dict[str, bool]]],
    config: ThresholdConfig,
    limit: int,
) -> EvaluationResult:
    records = []
    rows = []
    failure_runs = {}
    failed_flags = []
    for ref, (facts, checks) in zip(entities, fetched):
        record = PipelineFacts(
            success_runs=int(facts.get("success_runs", 0)),
            failure_runs=int(facts.get("failure_runs", 0)),
        )
        failed = entity_failed(source, checks)
        records.append(record)
        failed_flags.append(failed)
        failure_runs[ref.name] = record.failure_runs
        rows.append((ref.name, success_rate(record.success_runs, record.total_runs), failed))

    pipeline = aggregate_pipeline(records)
    failures = count_failed_entities(failed_flags)
    verdict = evaluate_rule(
        RuleKind.RATIO, {},
        entity_count=len(entities),
        failure_count=failures,
        ratio=config.ratio,
    )
    return EvaluationResult(
        source=source.key,
        color=verdict.color,
        reason=verdict.reason,
        summary=build_pipeline_summary(verdict, len(entities) if config.allowlist else None),
        aggregated_metrics={**pipeline.model_dump(), "failed_checks": failures},
        ranked_offenders=rank_lowest_success(rows, limit, failure_runs=failure_runs),
        entity_count=len(entities),
    )


def _evaluate_severity_source(
    source: MetricSource,
    entities: Sequence[EntityRef],
    fetched: Sequence[Tuple[Dict[str, float], Dict[str, bool]]],
    config: ThresholdConfig,
    limit: int,
) -> EvaluationResult:
    names = [ref.name for ref in entities]
    fact_rows = [(name, facts) for name, (facts, _) in zip(names, fetched)]
    check_rows = [(name, checks) for name, (_, checks) in zip(names, fetched)]

    fact_totals = aggregate_severity(fact_rows, source.dimension_names)
    failing = count_failing_checks(source, check_rows)
    failed_entities = sum(1 for _, checks in check_rows if entity_failed(source, checks))

    verdict: Verdict = evaluate_rule(
        source.rule,
        failing.totals,
        entity_count=len(entities),
        failure_count=failed_entities,
        ratio=config.ratio,
        severity=config.severity,
        label=source.label,
    )
    return EvaluationResult(
        source=source.key,
        color=verdict.color,
        reason=verdict.reason,
        summary=verdict.reason,
        aggregated_metrics={
            "totals": fact_totals.totals,
            "contributors": fact_totals.contributors,
            "failing_checks": failing.totals,
            "failing_entities": failing.contributors,
            "failed_entities": failed_entities,
        },
        ranked_offenders=rank_offenders(fact_rows, source.dimension_names, limit),
        entity_count=len(entities),
    )


async def _run(
    source: MetricSource,
    entities: Sequence[EntityRef],
    collaborators: Collaborators,
    limit: int,
) -> EvaluationResult:
    if not entities:
        return _gray(source, EvalError(ErrorKind.NO_ENTITIES, NO_ENTITIES_REASON))

    # 첫 번째 엔티티의 시스템이 임계값을 결정한다
    system_outcome: Outcome[Optional[SystemRef]] = await attempt(
        collaborators.resolver.resolve_parent_system(entities[0]),
        ErrorKind.FETCH_FAILED,
        "resolve parent system",
    )
    if not system_outcome.ok:
        metrics.collaborator_failures.labels(source=source.key, stage="resolve").inc()
        log.error(f"시스템 해석 실패 source:{source.key} error:{system_outcome.error.message}")
        return _gray(source, EvalError(ErrorKind.FETCH_FAILED, failed_to_load(source)), len(entities))
    system = system_outcome.value
    if system is None:
        return _gray(source, EvalError(ErrorKind.UNRESOLVED_SYSTEM, NO_SYSTEM_REASON), len(entities))

    # 허용 목록 필터 후 필터링된 수로 임계값을 계산한다
    annotations = await threshold_resolver.fetch_annotations(collaborators.config, system)
    allowlist = threshold_resolver.resolve_allowlist(annotations, source)
    selected = apply_allowlist(entities, allowlist)
    if not selected:
        return _gray(
            source,
            EvalError(ErrorKind.NO_CONFIGURED_ENTITIES, no_configured_entities(source)),
            len(entities),
        )
    config = threshold_resolver.thresholds_from_annotations(annotations, source, len(selected))

    fetched = await attempt(fan_out(collaborators.facts, source, selected), ErrorKind.FETCH_FAILED, source.key)
    if not fetched.ok:
        metrics.collaborator_failures.labels(source=source.key, stage="facts").inc()
        log.error(f"팩트 조회 실패 source:{source.key} system:{system} error:{fetched.error.message}")
        return _gray(source, EvalError(ErrorKind.FETCH_FAILED, failed_to_load(source)), len(selected))

    if source.shape == "pipeline":
        return _evaluate_pipeline(source, selected, fetched.value, config, limit)
    return _evaluate_severity_source(source, selected, fetched.value, config, limit)


async def evaluate(
    source: MetricSource,
    entities: Sequence[EntityRef],
    collaborators: Collaborators,
    *,
    limit: int = DEFAULT_LIMIT,
) -> EvaluationResult:
    """
    한 메트릭 소스에 대해 신호등을 평가합니다.

    정상 동작에서는 예외를 던지지 않고 항상 결과 객체를 반환합니다.

    Args:
        source: 메트릭 소스 정의
        entities: 평가할 엔티티 목록
        collaborators: 팩트/설정/엔티티 해석 협력자
        limit: 상위 문제 엔티티 최대 개수 (5 이하)

    Returns:
        평가 결과
    """
    limit = max(0, min(limit, DEFAULT_LIMIT))
    started = time.perf_counter()
    with log.contextualize(source=source.key):
        result = await _run(source, list(entities), collaborators, limit)
    metrics.evaluation_seconds.labels(source=source.key).observe(time.perf_counter() - started)
    metrics.evaluations_total.labels(source=source.key, color=result.color).inc()
    log.info(f"평가 완료 source:{source.key} color:{result.color} entities:{result.entity_count}")
    return result


async def evaluate_dashboard(
    sources: Sequence[MetricSource],
    entities: Sequence[EntityRef],
    collaborators: Collaborators,
    *,
    limit: int = DEFAULT_LIMIT,
) -> Dict[str, EvaluationResult]:
    """
    여러 메트릭 소스를 동시에 평가합니다.

    Returns:
        소스 키 -> 평가 결과
    """
    results = await asyncio.gather(
        *(evaluate(source, entities, collaborators, limit=limit) for source in sources)
    )
    return {source.key: result for source, result in zip(sources, results)}
