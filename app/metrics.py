"""Prometheus metrics for monitoring.

Tracks scoring latency, recommendation volume, live template fetch
outcomes and skill extraction task outcomes.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram, Info

# Application info
APP_INFO = Info("sks_app", "Skill Scope application info")

# Scoring metrics
SCORING_DURATION = Histogram(
    "sks_scoring_duration_seconds",
    "Scoring duration per component",
    ["component"],
)

PORTFOLIO_RANKS_ASSIGNED = Counter(
    "sks_portfolio_ranks_assigned_total",
    "Portfolio ranks assigned",
    ["rank"],
)

JOB_MATCHES_COMPUTED = Counter(
    "sks_job_matches_computed_total",
    "Job match computations",
)

SKILL_GAP_ANALYSES = Counter(
    "sks_skill_gap_analyses_total",
    "Skill gap analyses",
    ["role"],
)

# Recommendation metrics
RECOMMENDATIONS_GENERATED = Counter(
    "sks_recommendations_generated_total",
    "Project recommendations generated",
    ["priority"],
)

LIVE_TEMPLATE_FETCHES = Counter(
    "sks_live_template_fetches_total",
    "Live template fetch attempts",
    ["status"],
)

LIVE_TEMPLATE_FETCH_DURATION = Histogram(
    "sks_live_template_fetch_duration_seconds",
    "Live template fetch duration",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# Skill extraction metrics
EXTRACTION_TASKS = Counter(
    "sks_extraction_tasks_total",
    "Per-project skill extraction tasks",
    ["outcome"],
)
