"""End-to-end tests for the aggregation pipeline and output writer."""

import json
from datetime import datetime, timezone

import pytest

from hivex.config import HivexConfig
from hivex.pipelines import AggregationPipeline
from hivex.writer import OutputError, save_results

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_pipeline_on_demo_tree(demo_tree):
    pipeline = AggregationPipeline()
    result = pipeline.run(demo_tree.root, progress=False, generated_at=NOW)
    bundle = result.bundles["demo"]
    assert [r["id"] for r in bundle["results"]] == ["r1", "r2"]
    assert bundle["project"]["last_updated"] == "2024-01-02T00:00:00Z"
    board = {c["github"]: c["points"] for c in result.leaderboard["contributors"]}
    assert board == {"alice": 17, "bob": 10}


def test_pipeline_skips_invalid_records(tree):
    tree.add_project("demo")
    tree.add_report("demo", "r1", severity="Medium", submitted_at="2024-01-01T00:00:00Z")
    tree.add_report("demo", "late", data={"id": "late", "author_github": "eve", "type": "bug",
                                          "severity": "Critical", "impact": "big"})
    tree.add_project("nobranch", data={"slug": "nobranch", "title": "t", "status": "active"})
    tree.add_report("nobranch", "r1", severity="Critical")

    pipeline = AggregationPipeline()
    result = pipeline.run(tree.root, progress=False, generated_at=NOW)

    assert [p["slug"] for p in result.index["projects"]] == ["demo"]
    assert result.bundles["demo"]["project"]["last_updated"] == "2024-01-01T00:00:00Z"
    assert [c["github"] for c in result.leaderboard["contributors"]] == ["alice"]

    summary = pipeline.summarize(result)
    assert summary.projects == 1
    assert summary.reports == 1
    assert summary.contributors == 1
    assert summary.projects_skipped == 1
    assert summary.reports_skipped == 1
    assert "Skipped 1 projects and 1 results" in summary.lines()


def test_pipeline_uses_configured_project_dir(demo_tree):
    config = HivexConfig()
    config.paths.project_dir = str(demo_tree.root)
    result = AggregationPipeline(config).run(progress=False, generated_at=NOW)
    assert list(result.bundles) == ["demo"]


def test_save_results(demo_tree, tmp_path):
    result = AggregationPipeline().run(demo_tree.root, progress=False, generated_at=NOW)
    out = tmp_path / "out"
    written = save_results(result, out)
    assert sorted(p.name for p in written) == ["index.json", "leaderboard.json", "results-demo.json"]

    index = json.loads((out / "index.json").read_text())
    assert index["projects"][0]["stats"]["total_results"] == 2
    board = json.loads((out / "leaderboard.json").read_text())
    assert board["totals"] == {"contributors": 2, "reports": 2, "points": 27}
    bundle = json.loads((out / "results-demo.json").read_text())
    assert bundle["stats"]["by_severity"]["Critical"] == 1


def test_save_results_unwritable_target(demo_tree, tmp_path):
    result = AggregationPipeline().run(demo_tree.root, progress=False, generated_at=NOW)
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    with pytest.raises(OutputError):
        save_results(result, blocker / "out")


def test_pipeline_rejects_path_like_slug(tree, tmp_path):
    tree.add_project("safe")
    tree.add_project("sneaky", data={"slug": "../elsewhere", "title": "t", "status": "active", "branch": "main"})
    outside = tmp_path / "elsewhere" / "results" / "r1"
    outside.mkdir(parents=True)
    (outside / "result.json").write_text(json.dumps({
        "id": "r1", "author_github": "eve", "type": "bug", "severity": "Critical",
        "impact": "i", "submitted_at": "2024-01-01T00:00:00Z",
    }))

    pipeline = AggregationPipeline()
    result = pipeline.run(tree.root, progress=False, generated_at=NOW)
    assert [p["slug"] for p in result.index["projects"]] == ["safe"]
    assert result.leaderboard["contributors"] == []
    assert pipeline.load_stats.projects_skipped == 1
    save_results(result, tmp_path / "out")
