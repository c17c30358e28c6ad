"""JSON persistence of exported sample aggregates."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Sequence, Union

from benchrank.errors import InvalidState
from benchrank.samples import SampleAggregate

logger = logging.getLogger(__name__)

RECORDS_VERSION = 1


def save_records(path: Union[str, Path], aggregates: Sequence[SampleAggregate]) -> Path:
    """
    Write sample aggregates to a JSON file.

    Parameters
    ----------
    path : Path
        Output path (.json)
    aggregates : Sequence[SampleAggregate]
        Aggregates to export, written in order

    Returns
    -------
    path : Path
        The written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "version": RECORDS_VERSION,
        "samples": [agg.export() for agg in aggregates],
    }
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)

    logger.info(f"Saved {len(aggregates)} sample set(s) to {path}")
    return path


def load_records(path: Union[str, Path]) -> List[SampleAggregate]:
    """
    Load sample aggregates written by ``save_records``.

    A bare list of records is accepted as well.

    Raises
    ------
    InvalidState
        The file is not valid JSON or a record fails validation
    """
    path = Path(path)
    try:
        with open(path) as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidState(f"{path} is not valid JSON: {e}") from e

    if isinstance(payload, dict):
        version = payload.get("version", RECORDS_VERSION)
        if version != RECORDS_VERSION:
            raise InvalidState(f"Unsupported records version {version!r} in {path}")
        records = payload.get("samples")
    else:
        records = payload

    if not isinstance(records, list):
        raise InvalidState(f"{path} does not contain a list of sample records")

    aggregates = [SampleAggregate.restore(rec) for rec in records]
    logger.info(f"Loaded {len(aggregates)} sample set(s) from {path}")
    return aggregates
