"""Writes aggregation results to an output directory."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from hivex.aggregate import AggregateResult

logger = logging.getLogger(__name__)

INDEX_FILE = 'index.json'
LEADERBOARD_FILE = 'leaderboard.json'


class OutputError(RuntimeError):
    """An output document could not be written."""


def results_filename(slug: str) -> str:
    return f"results-{slug}.json"


def write_json(path: Path, data: Any, indent: int = 2) -> None:
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent)
            f.write('\n')
    except (OSError, TypeError, ValueError) as exc:
        raise OutputError(f"Could not write {path}: {exc}") from exc


def save_results(result: AggregateResult, output_dir: Union[str, Path], indent: int = 2) -> List[Path]:
    """Write ``index.json``, one ``results-<slug>.json`` per bundle and
    ``leaderboard.json``.

    Returns:
        Paths written, in write order

    Raises:
        OutputError: If the directory cannot be created or a file cannot be written
    """
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(f"Could not create output directory {output_dir}: {exc}") from exc

    written = []
    for slug, bundle in result.bundles.items():
        path = output_dir / results_filename(slug)
        write_json(path, bundle, indent)
        written.append(path)

    for name, document in ((INDEX_FILE, result.index), (LEADERBOARD_FILE, result.leaderboard)):
        path = output_dir / name
        write_json(path, document, indent)
        written.append(path)

    logger.info("Wrote %d documents to %s", len(written), output_dir)
    return written
