from pathlib import Path

from hivex.config import HivexConfig, get_default_config


def test_yaml_roundtrip(tmp_path: Path):
    cfg = get_default_config()
    cfg.scoring.severity_weights["Critical"] = 20
    cfg.urls.repository = "acme/bounties"
    path = tmp_path / "cfg.yaml"
    cfg.to_yaml(path)
    loaded = HivexConfig.from_yaml(path)
    assert loaded == cfg
    assert loaded.scoring.to_table().weight("Critical") == 20


def test_from_dict_defaults_and_ignores_unknown_keys():
    cfg = HivexConfig.from_dict({"output": {"indent": 4, "colour": "blue"}, "extra": 1})
    assert cfg.output.indent == 4
    assert cfg.paths.project_dir == "project"
    assert cfg.scoring.quality_bonus == 1


def test_default_config_is_a_copy():
    a = get_default_config()
    a.scoring.severity_weights["Low"] = 99
    assert get_default_config().scoring.severity_weights["Low"] == 1


def test_url_render():
    urls = HivexConfig().urls
    rendered = urls.render("demo", "feature/x")
    assert rendered["github_branch_url"] == "https://github.com/hivex-sec/hivex/tree/feature/x/project/demo"
    assert rendered["results_url"] == "data/results-demo.json"
