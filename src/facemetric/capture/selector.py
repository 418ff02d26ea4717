"""Single-best-frame selection.

Used when only independent single-shot frames are available. Frames are
ranked by a heuristic that prefers frontal pose, larger faces and richer
landmark output.

Example:
    >>> best = select_best_frame(faces)
    >>> print(score_frame(best))
"""

from __future__ import annotations

import logging
from typing import Sequence

from facemetric.detection.backends.base import DetectedFace
from facemetric.errors import NoUsableFaceDataError

logger = logging.getLogger(__name__)


def score_frame(face: DetectedFace) -> float:
    """Heuristic frame score.

    ``100 - (|pitch|+|yaw|+|roll|) + bbox_area/1000
    + landmark_count*5 + contour_group_count*3``
    """
    score = 100.0 - face.pose.total_abs
    score += face.box.area / 1000.0
    score += len(face.landmarks) * 5
    score += len(face.contours) * 3
    return score


def select_best_frame(faces: Sequence[DetectedFace]) -> DetectedFace:
    """Return the highest-scoring face; the first wins ties.

    Raises:
        NoUsableFaceDataError: If ``faces`` is empty.
    """
    if not faces:
        raise NoUsableFaceDataError("selection", attempted_frames=0)

    best = faces[0]
    best_score = score_frame(best)
    for face in faces[1:]:
        score = score_frame(face)
        if score > best_score:
            best, best_score = face, score

    logger.debug("Selected best frame (score=%.2f) from %d candidates", best_score, len(faces))
    return best


__all__ = ["score_frame", "select_best_frame"]
