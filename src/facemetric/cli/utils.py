"""Shared helpers for the facemetric CLI."""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from facemetric.measurement.output import FacialMeasurement

BOLD = "\033[1m"
DIM = "\033[2m"
ITALIC = "\033[3m"
RESET = "\033[0m"


def parse_measurement_map(data: Dict[str, Any]) -> Dict[str, FacialMeasurement]:
    """Parse ``{metric_id: {value, confidence, ...}}`` into measurements.

    The ``metric_id`` field may be omitted inside each entry; the key is used.
    """
    return {
        metric_id: FacialMeasurement.from_dict({"metric_id": metric_id, **entry})
        for metric_id, entry in data.items()
    }


def load_measurement_map(path: Union[str, Path]) -> Dict[str, FacialMeasurement]:
    with open(path, "r") as f:
        return parse_measurement_map(json.load(f))


def load_history(path: Union[str, Path]) -> List[Dict[str, FacialMeasurement]]:
    """Load a JSON list of per-capture measurement maps.

    Raises:
        ValueError: If the top-level JSON value is not a list.
    """
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of measurement maps")
    return [parse_measurement_map(entry) for entry in data]
