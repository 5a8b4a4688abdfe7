"""Aggregation of scored reports into the project index, per-project bundles
and the contributor leaderboard.

Everything here is a pure function of its inputs. The contributor
accumulator is an immutable :class:`ContributorLedger`; crediting a report
returns a new ledger, and :func:`fold_contributors` reduces the whole report
stream into one.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import reduce
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from hivex.config import HivexConfig
from hivex.scoring import ScoringTable, quality_bonus, score
from hivex.types import Project, Report, Severity

SEVERITIES: Tuple[str, ...] = tuple(Severity.names())

ProjectReports = Tuple[Project, Sequence[Report]]


def format_timestamp(dt: datetime) -> str:
    """UTC ISO 8601 with millisecond precision and a ``Z`` suffix."""
    return dt.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def severity_breakdown(reports: Iterable[Report]) -> Dict[str, int]:
    """Count reports per known severity; unknown severities are not counted."""
    breakdown = {name: 0 for name in SEVERITIES}
    for report in reports:
        if report.severity in breakdown:
            breakdown[report.severity] += 1
    return breakdown


def project_stats(reports: Sequence[Report]) -> Dict[str, Any]:
    return {
        'total_results': len(reports),
        'by_severity': severity_breakdown(reports),
    }


# === Contributor accumulator ===

@dataclass(frozen=True)
class ContributorStat:
    """Running totals for one contributor handle.

    Attributes:
        github: Contributor handle
        points: Sum of full report scores credited to the handle
        reports: Number of reports credited
        by_severity: Counts aligned with :data:`SEVERITIES`
        projects: Distinct project slugs, in first-contribution order
        quality_points: Share of ``points`` that came from quality bonuses
    """
    github: str
    points: int = 0
    reports: int = 0
    by_severity: Tuple[int, ...] = (0,) * len(SEVERITIES)
    projects: Tuple[str, ...] = ()
    quality_points: int = 0

    def credit(self, report: Report, points: int, bonus: int, slug: str) -> 'ContributorStat':
        by_severity = self.by_severity
        if report.severity in SEVERITIES:
            i = SEVERITIES.index(report.severity)
            by_severity = by_severity[:i] + (by_severity[i] + 1,) + by_severity[i + 1:]
        projects = self.projects if slug in self.projects else self.projects + (slug,)
        return dataclasses.replace(
            self,
            points=self.points + points,
            reports=self.reports + 1,
            by_severity=by_severity,
            projects=projects,
            quality_points=self.quality_points + bonus,
        )

    def severity_dict(self) -> Dict[str, int]:
        return dict(zip(SEVERITIES, self.by_severity))


@dataclass(frozen=True)
class ContributorLedger:
    """Immutable map of handle -> :class:`ContributorStat` plus report total."""
    contributors: Mapping[str, ContributorStat] = field(default_factory=lambda: MappingProxyType({}))
    report_count: int = 0

    def credit(self, slug: str, report: Report, table: ScoringTable) -> 'ContributorLedger':
        """Credit the full score of *report* to its author and every co-author."""
        points = score(report, table)
        bonus = quality_bonus(report, table)
        updated = dict(self.contributors)
        for handle in report.contributors:
            current = updated.get(handle) or ContributorStat(github=handle)
            updated[handle] = current.credit(report, points, bonus, slug)
        return ContributorLedger(
            contributors=MappingProxyType(updated),
            report_count=self.report_count + 1,
        )

    @property
    def total_points(self) -> int:
        return sum(stat.points for stat in self.contributors.values())

    def ranked(self) -> List[ContributorStat]:
        """Contributors by points descending, then handle ascending."""
        return sorted(self.contributors.values(), key=lambda s: (-s.points, s.github))


def fold_contributors(
    project_reports: Iterable[ProjectReports],
    table: ScoringTable,
    ledger: Optional[ContributorLedger] = None,
) -> ContributorLedger:
    """Reduce every report of every project into a ledger."""
    stream = ((project.slug, report) for project, reports in project_reports for report in reports)
    return reduce(
        lambda acc, item: acc.credit(item[0], item[1], table),
        stream,
        ledger or ContributorLedger(),
    )


# === Output views ===

def build_project_bundle(
    project: Project,
    reports: Sequence[Report],
    table: ScoringTable,
) -> Optional[Dict[str, Any]]:
    """Per-project results document, or None when there are no reports.

    *reports* must already be in chronological order.
    """
    if not reports:
        return None
    stats = project_stats(reports)
    stats['total_points'] = sum(score(r, table) for r in reports)
    return {
        'project': {
            'slug': project.slug,
            'title': project.title,
            'status': project.status,
            'target_url': project.target_url,
            'branch': project.branch,
            'commit': project.commit,
            'last_updated': reports[-1].submitted_at,
        },
        'stats': stats,
        'results': [r.to_dict() for r in reports],
    }


def build_index_entry(project: Project, reports: Sequence[Report], config: HivexConfig) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        'slug': project.slug,
        'title': project.title,
        'status': project.status,
        'branch': project.branch,
    }
    entry.update(config.urls.render(project.slug, project.branch))
    entry['stats'] = project_stats(reports)
    return entry


def build_index(
    project_reports: Sequence[ProjectReports],
    config: HivexConfig,
    generated_at: datetime,
) -> Dict[str, Any]:
    entries = [build_index_entry(p, reports, config) for p, reports in project_reports]
    return {
        'version': config.output.index_version,
        'last_updated': format_timestamp(generated_at),
        'projects': entries,
        'summary': {
            'total_projects': len(entries),
            'active_projects': sum(1 for p, _ in project_reports if p.status == 'active'),
            'total_results': sum(len(reports) for _, reports in project_reports),
        },
    }


def leaderboard_entry(stat: ContributorStat) -> Dict[str, Any]:
    return {
        'github': stat.github,
        'display': stat.github,
        'points': stat.points,
        'reports': stat.reports,
        'avg_score': round(stat.points / stat.reports, 2) if stat.reports else 0.0,
        'by_severity': stat.severity_dict(),
        'bonuses': {
            'quality': stat.quality_points,
            'first_report': 0,
        },
        'by_project': list(stat.projects),
    }


def build_leaderboard(
    ledger: ContributorLedger,
    config: HivexConfig,
    generated_at: datetime,
) -> Dict[str, Any]:
    contributors = [leaderboard_entry(stat) for stat in ledger.ranked()]
    return {
        'last_updated': format_timestamp(generated_at),
        'period': config.output.period,
        'scoring': config.scoring.to_table().to_metadata(),
        'contributors': contributors,
        'totals': {
            'contributors': len(contributors),
            'reports': ledger.report_count,
            'points': ledger.total_points,
        },
    }


@dataclass
class AggregateResult:
    """The three output views of one aggregation run."""
    index: Dict[str, Any]
    bundles: Dict[str, Dict[str, Any]]
    leaderboard: Dict[str, Any]
    ledger: ContributorLedger


def aggregate(
    project_reports: Sequence[ProjectReports],
    config: Optional[HivexConfig] = None,
    generated_at: Optional[datetime] = None,
) -> AggregateResult:
    """Fold validated projects and their sorted reports into output documents.

    Args:
        project_reports: ``(project, reports)`` pairs in processing order
        config: Configuration; defaults to :class:`HivexConfig`
        generated_at: Timestamp stamped on the index and leaderboard

    Returns:
        AggregateResult with the index, a bundle per project that has
        reports (keyed by slug), and the leaderboard
    """
    config = config or HivexConfig()
    generated_at = generated_at or datetime.now(timezone.utc)
    table = config.scoring.to_table()

    bundles = {}
    for project, reports in project_reports:
        bundle = build_project_bundle(project, reports, table)
        if bundle is not None:
            bundles[project.slug] = bundle

    ledger = fold_contributors(project_reports, table)
    return AggregateResult(
        index=build_index(project_reports, config, generated_at),
        bundles=bundles,
        leaderboard=build_leaderboard(ledger, config, generated_at),
        ledger=ledger,
    )
