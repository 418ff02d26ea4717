"""Configuration classes for the facemetric engine.

Every stage takes its own dataclass config with documented defaults.
``EngineConfig`` bundles them and can be loaded from a dict or YAML file.

Example:
    >>> from facemetric.config import EngineConfig, GateConfig
    >>> config = EngineConfig(gate=GateConfig(max_pose_angle=10.0))
    >>> config = EngineConfig.from_yaml("facemetric.yaml")
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FACEMETRIC_CONFIG"


@dataclass(frozen=True)
class GateConfig:
    """Quality gate thresholds.

    Attributes:
        min_face_width_ratio: Minimum face box width / image width.
        max_face_width_ratio: Maximum face box width / image width.
        max_pose_angle: Maximum absolute pitch, yaw and roll in degrees.
        max_lighting_asymmetry: Maximum |L-R|/max(L,R) between face halves.
    """

    min_face_width_ratio: float = 0.3
    max_face_width_ratio: float = 0.8
    max_pose_angle: float = 15.0
    max_lighting_asymmetry: float = 0.3

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_face_width_ratio <= self.max_face_width_ratio:
            raise ValueError("gate.min_face_width_ratio must be in [0, max_face_width_ratio]")
        if self.max_pose_angle < 0:
            raise ValueError("gate.max_pose_angle must be >= 0")
        if not 0.0 <= self.max_lighting_asymmetry <= 1.0:
            raise ValueError("gate.max_lighting_asymmetry must be in [0, 1]")


@dataclass(frozen=True)
class CaptureConfig:
    """Capture sequence settings.

    Attributes:
        target_frame_count: Frames to collect before the sequence completes.
        require_gate_pass: Reject frames whose quality gate failed.
        single_frame_uncertainty: Uncertainty reported with fewer than 2 frames.
        min_face_confidence: Detections below this score 0 in burst selection.
    """

    target_frame_count: int = 10
    require_gate_pass: bool = True
    single_frame_uncertainty: float = 3.0
    min_face_confidence: float = 0.7

    def __post_init__(self) -> None:
        if self.target_frame_count < 1:
            raise ValueError("capture.target_frame_count must be >= 1")
        if self.single_frame_uncertainty < 0:
            raise ValueError("capture.single_frame_uncertainty must be >= 0")
        if not 0.0 <= self.min_face_confidence <= 1.0:
            raise ValueError("capture.min_face_confidence must be in [0, 1]")


@dataclass(frozen=True)
class MeasurementConfig:
    """Scaling applied to the proxy metrics (jaw, cheekbone).

    Attributes:
        proxy_confidence_multiplier: Fraction of base confidence kept (0.7-0.8).
        proxy_min_uncertainty: Floor on the proxy metrics' uncertainty.
    """

    proxy_confidence_multiplier: float = 0.8
    proxy_min_uncertainty: float = 5.0

    def __post_init__(self) -> None:
        if not 0.7 <= self.proxy_confidence_multiplier <= 0.8:
            raise ValueError("measurement.proxy_confidence_multiplier must be in [0.7, 0.8]")


@dataclass(frozen=True)
class TrendConfig:
    """Trend classification settings.

    Attributes:
        stable_threshold: |change| below this is stable.
        harmony_stable_threshold: Distance-to-zero delta below this is stable
            for metrics where proximity to zero is preferred.
        baseline_confidence_discount: Multiplier on max input confidence.
        legacy_harmony_stable: Report proportionalHarmony as always stable.
    """

    stable_threshold: float = 1.0
    harmony_stable_threshold: float = 0.5
    baseline_confidence_discount: float = 0.9
    legacy_harmony_stable: bool = False


def _section(cls, data: Optional[Dict[str, Any]]):
    """Build a config dataclass from a dict, ignoring unknown keys."""
    data = data or {}
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        logger.warning("Ignoring unknown %s keys: %s", cls.__name__, sorted(unknown))
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class EngineConfig:
    """Complete engine configuration."""

    gate: GateConfig = field(default_factory=GateConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    measurement: MeasurementConfig = field(default_factory=MeasurementConfig)
    trend: TrendConfig = field(default_factory=TrendConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create EngineConfig from a dictionary (e.g., loaded from YAML).

        Example:
            >>> config = EngineConfig.from_dict({"gate": {"max_pose_angle": 10}})
        """
        return cls(
            gate=_section(GateConfig, data.get("gate")),
            capture=_section(CaptureConfig, data.get("capture")),
            measurement=_section(MeasurementConfig, data.get("measurement")),
            trend=_section(TrendConfig, data.get("trend")),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "EngineConfig":
        """Load EngineConfig from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """Resolve the engine configuration.

    Resolution order:
        1. Explicit ``path`` argument.
        2. ``FACEMETRIC_CONFIG`` environment variable.
        3. Built-in defaults.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return EngineConfig()
    logger.info("Loading config from %s", path)
    return EngineConfig.from_yaml(path)


__all__ = [
    "CONFIG_ENV_VAR",
    "GateConfig",
    "CaptureConfig",
    "MeasurementConfig",
    "TrendConfig",
    "EngineConfig",
    "load_config",
]
