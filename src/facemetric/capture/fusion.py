"""Multi-frame landmark fusion and frame-derived uncertainty/confidence.

Two independent signals come out of a capture:

- confidence: a step function of how many frames were observed.
- uncertainty: the sample standard deviation of a metric computed per frame.

Both are reported; neither is folded into the other.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

import numpy as np

from facemetric.geometry import Point
from facemetric.landmarks import LANDMARK_GROUPS, FrameSample, LandmarkSet, PoseAngles

logger = logging.getLogger(__name__)

DEFAULT_SINGLE_FRAME_UNCERTAINTY = 3.0

# (min frame count, confidence), checked top-down
_CONFIDENCE_STEPS = (
    (10, 0.95),
    (7, 0.90),
    (5, 0.85),
    (3, 0.75),
)
_MIN_CONFIDENCE = 0.60


def confidence_from_frame_count(frame_count: int) -> float:
    """Evidence confidence from the number of frames observed."""
    for min_frames, confidence in _CONFIDENCE_STEPS:
        if frame_count >= min_frames:
            return confidence
    return _MIN_CONFIDENCE


def frame_uncertainty(
    values: Sequence[float],
    default: float = DEFAULT_SINGLE_FRAME_UNCERTAINTY,
) -> float:
    """Unbiased sample standard deviation (ddof=1) of per-frame values.

    Fewer than two values yields ``default``.
    """
    if len(values) < 2:
        return default
    return float(np.std(np.asarray(values, dtype=np.float64), ddof=1))


@dataclass
class MultiFrameBuffer:
    """Ordered frame samples bounded by ``target_frame_count``."""

    target_frame_count: int = 10
    samples: List[FrameSample] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.target_frame_count < 1:
            raise ValueError("target_frame_count must be >= 1")

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[FrameSample]:
        return iter(self.samples)

    @property
    def frame_count(self) -> int:
        return len(self.samples)

    @property
    def is_full(self) -> bool:
        return len(self.samples) >= self.target_frame_count

    def append(self, sample: FrameSample) -> bool:
        """Append a sample. Returns False (and drops it) when full."""
        if self.is_full:
            return False
        self.samples.append(sample)
        return True

    def clear(self) -> None:
        self.samples.clear()

    @property
    def landmark_sets(self) -> List[LandmarkSet]:
        return [s.landmarks for s in self.samples]

    def mean_pose(self) -> PoseAngles:
        if not self.samples:
            return PoseAngles()
        n = len(self.samples)
        return PoseAngles(
            pitch=sum(s.pose.pitch for s in self.samples) / n,
            yaw=sum(s.pose.yaw for s in self.samples) / n,
            roll=sum(s.pose.roll for s in self.samples) / n,
        )

    def fused_landmarks(self, align_by_nearest: bool = False) -> Optional[LandmarkSet]:
        if not self.samples:
            return None
        return fuse_landmarks(self.landmark_sets, align_by_nearest=align_by_nearest)

    @property
    def confidence(self) -> float:
        return confidence_from_frame_count(self.frame_count)


def _align_nearest(reference: np.ndarray, points: np.ndarray) -> np.ndarray:
    """Reorder ``points`` to match ``reference`` one-to-one.

    Pairs are assigned greedily from the closest pair up, each point used
    at most once. Reference positions left without a partner are NaN so
    the frame drops out of their mean.
    """
    # (R, 1, 2) - (1, P, 2) -> (R, P)
    dists = np.linalg.norm(reference[:, None, :] - points[None, :, :], axis=2)
    aligned = np.full(reference.shape, np.nan)
    used_ref = np.zeros(len(reference), dtype=bool)
    used_pts = np.zeros(len(points), dtype=bool)
    remaining = min(len(reference), len(points))

    for flat in np.argsort(dists, axis=None, kind="stable"):
        r, p = np.unravel_index(flat, dists.shape)
        if used_ref[r] or used_pts[p]:
            continue
        aligned[r] = points[p]
        used_ref[r] = used_pts[p] = True
        remaining -= 1
        if remaining == 0:
            break
    return aligned


def _fuse_group(groups: List[Sequence[Point]], align_by_nearest: bool) -> List[Point]:
    present = [g for g in groups if g]
    if not present:
        return []

    # Most common group length is the reference; first frame with it wins.
    ref_len = Counter(len(g) for g in present).most_common(1)[0][0]
    reference = next(g for g in present if len(g) == ref_len)
    ref_arr = np.array([(p.x, p.y) for p in reference], dtype=np.float64)

    stacked = []
    for g in present:
        arr = np.array([(p.x, p.y) for p in g], dtype=np.float64)
        if len(g) != ref_len or align_by_nearest:
            arr = _align_nearest(ref_arr, arr)
        stacked.append(arr)

    # The reference frame itself covers every position, so no column is all-NaN.
    mean = np.nanmean(np.stack(stacked), axis=0)
    return [Point(float(x), float(y)) for x, y in mean]


def fuse_landmarks(
    frames: Sequence[LandmarkSet],
    align_by_nearest: bool = False,
) -> LandmarkSet:
    """Average each named point across the frames that contain its group.

    Points are averaged positionally, assuming the detector returns each
    group in a consistent order. Frames whose group length differs from
    the most common length are aligned by one-to-one nearest-point
    matching first, and contribute only to the points they matched;
    ``align_by_nearest`` forces alignment for every frame.
    """
    if not frames:
        return LandmarkSet.empty()
    if len(frames) == 1:
        return frames[0]

    fused: Dict[str, List[Point]] = {}
    for name in LANDMARK_GROUPS:
        fused[name] = _fuse_group([f.group(name) for f in frames], align_by_nearest)

    logger.debug("Fused %d frames into %d points", len(frames), sum(len(v) for v in fused.values()))
    return LandmarkSet.from_groups(fused)


__all__ = [
    "DEFAULT_SINGLE_FRAME_UNCERTAINTY",
    "confidence_from_frame_count",
    "frame_uncertainty",
    "MultiFrameBuffer",
    "fuse_landmarks",
]
