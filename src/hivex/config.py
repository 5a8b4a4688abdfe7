"""Configuration management for HiveX."""

import copy
import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Union

import yaml

from hivex.scoring import FIRST_REPORT_BONUS, QUALITY_BONUS, SEVERITY_SCORES, ScoringTable


@dataclass
class PathsConfig:
    """Where records are read from and artifacts are written to."""
    project_dir: str = "project"
    output_dir: str = "data_out"


@dataclass
class ScoringConfig:
    """Configuration for report scoring."""
    severity_weights: Dict[str, int] = field(default_factory=lambda: dict(SEVERITY_SCORES))
    first_report_bonus: int = FIRST_REPORT_BONUS  # declared, never awarded
    quality_bonus: int = QUALITY_BONUS

    def to_table(self) -> ScoringTable:
        return ScoringTable(
            severity_weights=self.severity_weights,
            first_report_bonus=self.first_report_bonus,
            quality_bonus=self.quality_bonus,
        )


@dataclass
class UrlConfig:
    """URL templates for the project index.

    Templates are formatted with ``repository``, ``branch`` and ``slug``.
    """
    repository: str = "hivex-sec/hivex"
    github_branch_url: str = "https://github.com/{repository}/tree/{branch}/project/{slug}"
    readme_raw_url: str = "https://raw.githubusercontent.com/{repository}/{branch}/project/{slug}/README.md"
    results_url: str = "data/results-{slug}.json"

    def render(self, slug: str, branch: str) -> Dict[str, str]:
        values = {'repository': self.repository, 'branch': branch, 'slug': slug}
        return {
            'github_branch_url': self.github_branch_url.format(**values),
            'readme_raw_url': self.readme_raw_url.format(**values),
            'results_url': self.results_url.format(**values),
        }


@dataclass
class OutputConfig:
    """Configuration for the generated documents."""
    index_version: str = "1.0"
    indent: int = 2
    period: str = "all-time"


@dataclass
class HivexConfig:
    """Top-level HiveX configuration."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    urls: UrlConfig = field(default_factory=UrlConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'HivexConfig':
        """Load configuration from a YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> 'HivexConfig':
        """Create a HivexConfig from a dictionary."""
        def create_instance(klass, d):
            if d is None:
                return klass()
            fields = {f.name for f in dataclasses.fields(klass) if f.init}
            filtered = {k: v for k, v in d.items() if k in fields}
            return klass(**filtered)

        return cls(
            paths=create_instance(PathsConfig, data.get('paths')),
            scoring=create_instance(ScoringConfig, data.get('scoring')),
            urls=create_instance(UrlConfig, data.get('urls')),
            output=create_instance(OutputConfig, data.get('output')),
        )

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary."""
        return dataclasses.asdict(self)

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save the configuration to a YAML file."""
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


# Default configuration
default_config = HivexConfig()


def get_default_config() -> HivexConfig:
    """Get a deep copy of the default configuration."""
    return copy.deepcopy(default_config)
