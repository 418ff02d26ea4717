"""Pixel sampling: average brightness of a rectangular image region."""

from __future__ import annotations

from typing import Protocol

import cv2
import numpy as np

from facemetric.geometry import BoundingBox

# Returned for regions with no pixels.
NEUTRAL_BRIGHTNESS = 127.5


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Single-channel view of a BGR, BGRA or already-gray image."""
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    if image.ndim == 3 and image.shape[2] == 1:
        return image[:, :, 0]
    return image


class BrightnessSampler(Protocol):
    """Protocol for brightness sampling collaborators."""

    def average_brightness(self, image: np.ndarray, rect: BoundingBox) -> float:
        """Mean brightness of ``rect`` in [0, 255]."""
        ...


class ImageBrightnessSampler:
    """Brightness sampler over decoded BGR or grayscale numpy images.

    The rectangle is clipped to the image bounds. Degenerate regions
    (zero area after clipping) return ``NEUTRAL_BRIGHTNESS``.
    """

    def average_brightness(self, image: np.ndarray, rect: BoundingBox) -> float:
        h, w = image.shape[:2]
        x1 = max(0, int(round(rect.x)))
        y1 = max(0, int(round(rect.y)))
        x2 = min(w, int(round(rect.x + rect.width)))
        y2 = min(h, int(round(rect.y + rect.height)))
        if x2 <= x1 or y2 <= y1:
            return NEUTRAL_BRIGHTNESS

        region = to_grayscale(image[y1:y2, x1:x2])
        return float(np.clip(np.mean(region), 0.0, 255.0))


__all__ = ["NEUTRAL_BRIGHTNESS", "to_grayscale", "BrightnessSampler", "ImageBrightnessSampler"]
