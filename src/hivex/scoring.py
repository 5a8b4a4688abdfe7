"""Scoring functions for HiveX reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from hivex.types import Report, Severity

SEVERITY_SCORES: Mapping[str, int] = MappingProxyType({
    Severity.CRITICAL.value: 10,
    Severity.HIGH.value: 6,
    Severity.MEDIUM.value: 3,
    Severity.LOW.value: 1,
})

FIRST_REPORT_BONUS = 2
QUALITY_BONUS = 1


@dataclass(frozen=True)
class ScoringTable:
    """Point values used to score reports.

    ``first_report_bonus`` is published in the leaderboard metadata but
    :func:`score` does not award it.

    Attributes:
        severity_weights: Base points per severity name
        first_report_bonus: Declared bonus for a contributor's first report
        quality_bonus: Points for each non-empty ``steps`` / ``repro_cmds``
    """
    severity_weights: Mapping[str, int] = field(default_factory=lambda: SEVERITY_SCORES)
    first_report_bonus: int = FIRST_REPORT_BONUS
    quality_bonus: int = QUALITY_BONUS

    def __post_init__(self):
        object.__setattr__(self, 'severity_weights', MappingProxyType(dict(self.severity_weights)))

    def weight(self, severity: str) -> int:
        return self.severity_weights.get(severity, 0)

    def to_metadata(self) -> Dict[str, Any]:
        """Scoring block written into ``leaderboard.json``."""
        meta: Dict[str, Any] = dict(self.severity_weights)
        meta['first_report_bonus'] = self.first_report_bonus
        meta['quality_bonus'] = self.quality_bonus
        return meta


DEFAULT_SCORING = ScoringTable()


def quality_bonus(report: Report, table: Optional[ScoringTable] = None) -> int:
    """Bonus points for non-empty ``steps`` and ``repro_cmds`` (a string or a list)."""
    table = table or DEFAULT_SCORING
    bonus = 0
    if report.steps:
        bonus += table.quality_bonus
    if report.repro_cmds:
        bonus += table.quality_bonus
    return bonus


def score(report: Report, table: Optional[ScoringTable] = None) -> int:
    """Score a single report.

    Args:
        report: Validated report
        table: Point values; defaults to :data:`DEFAULT_SCORING`

    Returns:
        Severity weight (0 for an unrecognized severity) plus quality bonuses
    """
    table = table or DEFAULT_SCORING
    return table.weight(report.severity) + quality_bonus(report, table)
