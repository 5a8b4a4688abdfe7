"""Pytest configuration and fixtures for HiveX tests."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

from hivex.types import Project, Report


def make_project(slug: str = "demo", **overrides) -> Dict[str, Any]:
    data = {"slug": slug, "title": slug.title(), "status": "active", "branch": "main"}
    data.update(overrides)
    return data


def make_report(report_id: str = "r1", **overrides) -> Dict[str, Any]:
    data = {
        "id": report_id,
        "author_github": "alice",
        "type": "bug",
        "severity": "Low",
        "impact": "minor",
        "submitted_at": "2024-01-01T00:00:00Z",
    }
    data.update(overrides)
    return data


class ProjectTree:
    """Builds a ``project/<slug>/...`` tree under a temporary directory."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def add_project(self, slug: str = "demo", data: Optional[Any] = None, dirname: Optional[str] = None, **overrides) -> Path:
        project_dir = self.root / (dirname or slug)
        project_dir.mkdir(parents=True, exist_ok=True)
        payload = data if data is not None else make_project(slug, **overrides)
        (project_dir / "project.json").write_text(json.dumps(payload))
        return project_dir

    def add_report(self, slug: str, report_id: str = "r1", data: Optional[Any] = None, **overrides) -> Path:
        report_dir = self.root / slug / "results" / report_id
        report_dir.mkdir(parents=True, exist_ok=True)
        payload = data if data is not None else make_report(report_id, **overrides)
        (report_dir / "result.json").write_text(json.dumps(payload))
        return report_dir

    def add_raw(self, relative: str, text: str) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path


@pytest.fixture
def tree(tmp_path) -> ProjectTree:
    """An empty project tree rooted at ``tmp_path / "project"``."""
    return ProjectTree(tmp_path / "project")


@pytest.fixture
def demo_tree(tree) -> ProjectTree:
    """The two-report ``demo`` project used throughout the docs."""
    tree.add_project("demo")
    tree.add_report(
        "demo", "r2",
        severity="Critical",
        submitted_at="2024-01-02T00:00:00Z",
        co_authors=["bob"],
    )
    tree.add_report(
        "demo", "r1",
        severity="High",
        submitted_at="2024-01-01T00:00:00Z",
        steps=["a"],
    )
    return tree


@pytest.fixture
def project_factory():
    def _make(slug: str = "demo", **overrides) -> Project:
        return Project.model_validate(make_project(slug, **overrides))
    return _make


@pytest.fixture
def report_factory():
    def _make(report_id: str = "r1", **overrides) -> Report:
        return Report.model_validate(make_report(report_id, **overrides))
    return _make
