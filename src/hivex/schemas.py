from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Type

from pydantic import TypeAdapter

from .config import HivexConfig
from .types import Project, Report

SCHEMA_FILES = {
    "project.schema.json": Project,
    "report.schema.json": Report,
    "config.schema.json": HivexConfig,
}


def _schema_for(cls: Type) -> dict:
    """Generate a JSON schema for a model or dataclass using Pydantic type adapters."""
    return TypeAdapter(cls).json_schema()


def all_schemas() -> Dict[str, dict]:
    return {name: _schema_for(cls) for name, cls in SCHEMA_FILES.items()}


def export(output_dir: Path) -> List[Path]:
    """Export JSON schemas for the input records and the config to *output_dir*."""
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for name, schema in all_schemas().items():
        path = output_dir / name
        with open(path, "w", encoding="utf-8") as f:
            json.dump(schema, f, indent=2)
        written.append(path)
    return written


if __name__ == "__main__":  # pragma: no cover - manual execution
    export(Path("docs/schemas"))
