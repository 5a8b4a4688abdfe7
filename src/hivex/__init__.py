"""HiveX: aggregation of decentralized vulnerability reports.

This module turns a tree of per-project report records into a project index,
per-project result bundles and a points-based contributor leaderboard.
"""

__version__ = "0.1.0"

# Core components
from hivex.types import Project, Report, Severity, validate_project, validate_report
from hivex.scoring import DEFAULT_SCORING, ScoringTable, score
from hivex.loader import RecordLoader
from hivex.aggregate import AggregateResult, ContributorLedger, aggregate
from hivex.pipelines import AggregationPipeline

__all__ = [
    "Project",
    "Report",
    "Severity",
    "validate_project",
    "validate_report",
    "ScoringTable",
    "DEFAULT_SCORING",
    "score",
    "RecordLoader",
    "ContributorLedger",
    "AggregateResult",
    "aggregate",
    "AggregationPipeline",
]
