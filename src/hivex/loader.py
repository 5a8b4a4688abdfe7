"""Discovery and parsing of project and report records on disk.

Expected layout::

    <root>/<slug>/project.json
    <root>/<slug>/results/<report-id>/result.json

Anything unreadable or malformed is logged and skipped; the loader never
raises for a bad record.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, List, Tuple, Union

from hivex.types import ParseResult, Project, Report, parse_project, parse_report, report_sort_key

logger = logging.getLogger(__name__)

PROJECT_FILE = 'project.json'
RESULTS_DIR = 'results'
RESULT_FILE = 'result.json'


@dataclass
class LoadStats:
    """Counts of records read and skipped during a load."""
    projects_loaded: int = 0
    projects_skipped: int = 0
    reports_loaded: int = 0
    reports_skipped: int = 0


class RecordLoader:
    """Reads project descriptors and reports from a project directory tree."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.stats = LoadStats()

    def discover_projects(self) -> List[Project]:
        """Return every valid project descriptor under the root.

        Directories without a ``project.json`` are ignored. Descriptors that
        cannot be read or fail validation are logged and counted as skipped.
        """
        projects, skipped = self._load(self.root, PROJECT_FILE, parse_project)
        self.stats.projects_loaded += len(projects)
        self.stats.projects_skipped += skipped
        return projects

    def get_reports(self, project_slug: str) -> List[Report]:
        """Return the valid reports of a project sorted by ``submitted_at``."""
        results_dir = self.root / project_slug / RESULTS_DIR
        reports, skipped = self._load(results_dir, RESULT_FILE, parse_report)
        self.stats.reports_loaded += len(reports)
        self.stats.reports_skipped += skipped
        return sorted(reports, key=report_sort_key)

    def _load(
        self,
        parent: Path,
        filename: str,
        parse: Callable[[Any], ParseResult],
    ) -> Tuple[list, int]:
        values = []
        skipped = 0
        for path in self._iter_paths(parent, filename):
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, ValueError) as exc:
                logger.warning("Could not read %s: %s", path, exc)
                skipped += 1
                continue
            parsed = parse(data)
            if not parsed.ok:
                logger.warning("Invalid %s: %s", path, "; ".join(parsed.errors))
                skipped += 1
                continue
            values.append(parsed.value)
        return values, skipped

    @staticmethod
    def _iter_paths(parent: Path, filename: str) -> Iterator[Path]:
        """Yield ``<parent>/<child>/<filename>`` for each child directory, by name."""
        if not parent.is_dir():
            logger.debug("No directory at %s", parent)
            return
        for child in sorted(parent.iterdir()):
            path = child / filename
            if child.is_dir() and path.is_file():
                yield path
