from __future__ import annotations

import numpy as np

from .errors import ShapeMismatchError
from .scores import PACKED_HEADER


def decode_corner_boxes(boxes: np.ndarray, num_anchors: int) -> np.ndarray:
    """
    Boxes that are already normalized `(y1, x1, y2, x2)`; returns a fresh `(A, 4)` float32 copy.
    """

    flat = np.asarray(boxes).reshape(-1)
    if flat.size != num_anchors * 4:
        raise ShapeMismatchError(f"corner boxes: expected {num_anchors} x 4 values, got {flat.size}.")
    return np.array(flat.reshape(num_anchors, 4), dtype=np.float32, copy=True)


def decode_center_boxes(preds: np.ndarray, num_anchors: int, num_classes: int, scale: float) -> np.ndarray:
    """
    Decode the `(cx, cy, w, h)` head of each packed row into normalized corners.

    Coordinates are in network-input pixels; dividing by `scale` (the square input
    side) normalizes them. Output order is `(y1, x1, y2, x2)` to match the dense layout.
    """

    if not scale > 0:
        raise ValueError(f"scale must be > 0, got {scale!r}")

    flat = np.asarray(preds).reshape(-1)
    width = num_classes + PACKED_HEADER
    if flat.size != num_anchors * width:
        raise ShapeMismatchError(
            f"packed predictions: expected {num_anchors} x {width} values, got {flat.size}."
        )
    rows = flat.reshape(num_anchors, width).astype(np.float32)

    cx, cy, w_box, h_box = rows[:, 0], rows[:, 1], rows[:, 2], rows[:, 3]
    x1 = (cx - w_box / 2) / scale
    y1 = (cy - h_box / 2) / scale
    x2 = (cx + w_box / 2) / scale
    y2 = (cy + h_box / 2) / scale
    return np.stack([y1, x1, y2, x2], axis=1).astype(np.float32)
