"""
Metrics definitions for trafficlight.

This module defines Prometheus metrics for monitoring
traffic light evaluations and their collaborators.
"""

from prometheus_client import Counter, Histogram

# 카운터 메트릭
evaluations_total = Counter(
    "trafficlight_evaluations_total",
    "Number of completed traffic light evaluations",
    ["source", "color"]
)

collaborator_failures = Counter(
    "trafficlight_collaborator_failures_total",
    "Collaborator calls that failed during an evaluation",
    ["source", "stage"]
)

config_fallbacks = Counter(
    "trafficlight_config_fallbacks_total",
    "System configuration lookups that fell back to defaults"
)

# 히스토그램 메트릭
evaluation_seconds = Histogram(
    "trafficlight_evaluation_duration_seconds",
    "Time spent on one source evaluation including fan-out",
    ["source"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0]
)
