"""
Core domain models and pure functions for trafficlight.

This module contains the domain models and pure business logic
that are independent of external I/O and infrastructure concerns.
"""

from .models import (
    Color, EntityRef, SystemRef, RuleKind, Verdict, Offender,
    PipelineFacts, PipelineMetrics, RatioThresholds, SeverityThresholds,
    ThresholdConfig, EvaluationResult,
)
from .sources import MetricSource, Dimension, SOURCES, get_source
from .aggregate import aggregate_severity, aggregate_pipeline, count_failing_checks
from .policy import evaluate_ratio, evaluate_severity, evaluate_critical_first, evaluate_rule
from .ranking import rank_offenders, rank_lowest_success
from .thresholds import resolve

__all__ = [
    "Color", "EntityRef", "SystemRef", "RuleKind", "Verdict", "Offender",
    "PipelineFacts", "PipelineMetrics", "RatioThresholds", "SeverityThresholds",
    "ThresholdConfig", "EvaluationResult", "MetricSource", "Dimension", "SOURCES",
    "get_source", "aggregate_severity", "aggregate_pipeline", "count_failing_checks",
    "evaluate_ratio", "evaluate_severity", "evaluate_critical_first", "evaluate_rule",
    "rank_offenders", "rank_lowest_success", "resolve",
]
