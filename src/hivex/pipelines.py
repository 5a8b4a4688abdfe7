"""Aggregation pipeline: load records, score and fold them, produce documents."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from tqdm import tqdm

from hivex.aggregate import AggregateResult, ProjectReports, aggregate
from hivex.config import HivexConfig
from hivex.loader import LoadStats, RecordLoader

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """What a run processed, for reporting to the user."""
    projects: int
    reports: int
    contributors: int
    projects_skipped: int
    reports_skipped: int

    def lines(self) -> List[str]:
        lines = [
            f"Generated data for {self.projects} projects",
            f"Total results: {self.reports}",
            f"Contributors: {self.contributors}",
        ]
        if self.projects_skipped or self.reports_skipped:
            lines.append(
                f"Skipped {self.projects_skipped} projects and {self.reports_skipped} results"
            )
        return lines


class AggregationPipeline:
    """Runs the loader and aggregator over a project tree."""

    def __init__(self, config: Optional[HivexConfig] = None):
        """Initialize the pipeline with configuration."""
        self.config = config or HivexConfig()
        self.load_stats = LoadStats()

    def collect(self, loader: RecordLoader, progress: bool = True) -> List[ProjectReports]:
        """Load every valid project with its chronologically sorted reports.

        Args:
            loader: Source of project and report records
            progress: Whether to show a progress bar

        Returns:
            ``(project, reports)`` pairs in discovery order
        """
        projects = loader.discover_projects()
        logger.info("Found %d projects", len(projects))

        collected = []
        for project in tqdm(projects, desc="Projects", disable=not progress):
            reports = loader.get_reports(project.slug)
            logger.info("Processing project %s: %d results", project.slug, len(reports))
            collected.append((project, reports))
        self.load_stats = loader.stats
        return collected

    def run(
        self,
        project_dir: Optional[Union[str, Path]] = None,
        progress: bool = True,
        generated_at: Optional[datetime] = None,
    ) -> AggregateResult:
        """Aggregate the tree at *project_dir* (default: ``config.paths.project_dir``)."""
        loader = RecordLoader(project_dir or self.config.paths.project_dir)
        collected = self.collect(loader, progress=progress)
        return aggregate(collected, self.config, generated_at)

    def summarize(self, result: AggregateResult) -> RunSummary:
        return RunSummary(
            projects=len(result.index['projects']),
            reports=result.ledger.report_count,
            contributors=len(result.ledger.contributors),
            projects_skipped=self.load_stats.projects_skipped,
            reports_skipped=self.load_stats.reports_skipped,
        )
