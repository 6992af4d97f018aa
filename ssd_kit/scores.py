"""
Per-anchor score extraction for the two supported output layouts.

Dense:  scores buffer `[A, C]`, class scores of anchor `i` at `[i*C, i*C + C)`.
Packed: one buffer `[A, C + 5]`, row `i` is `[cx, cy, w, h, conf, s_0 .. s_{C-1}]`,
        so class scores of anchor `i` start at `i*(C + 5) + 5`.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .errors import ShapeMismatchError

# Box fields + objectness in a packed row.
PACKED_HEADER = 5
CONFIDENCE_FIELD = 4


def _as_rows(buf: np.ndarray, num_anchors: int, row_width: int, what: str) -> np.ndarray:
    flat = np.asarray(buf).reshape(-1)
    expected = num_anchors * row_width
    if num_anchors < 0 or row_width < 0 or flat.size != expected:
        raise ShapeMismatchError(
            f"{what}: expected {num_anchors} x {row_width} = {expected} values, got {flat.size}."
        )
    return flat.reshape(num_anchors, row_width)


def _argmax_rows(class_scores: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Row-wise max and argmax.

    The running max starts at -inf and only a strictly greater value replaces it,
    so the lowest class index wins ties and a row with no real score (all -inf/NaN,
    or zero classes) yields class -1 with score -inf.
    """

    num_anchors = class_scores.shape[0]
    if class_scores.shape[1] == 0:
        return (
            np.full((num_anchors,), -np.inf, dtype=np.float32),
            np.full((num_anchors,), -1, dtype=np.int64),
        )

    s = np.where(np.isnan(class_scores), -np.inf, class_scores).astype(np.float32, copy=False)
    class_ids = np.argmax(s, axis=1).astype(np.int64)
    max_scores = s[np.arange(num_anchors), class_ids].astype(np.float32)
    empty = ~(max_scores > -np.inf)
    class_ids[empty] = -1
    return max_scores, class_ids


def max_scores_dense(scores: np.ndarray, num_anchors: int, num_classes: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Highest class score and its class index for every anchor of a dense score buffer.

    Returns:
        (max_scores float32[A], class_ids int64[A])
    """

    rows = _as_rows(scores, num_anchors, num_classes, "dense scores")
    return _argmax_rows(rows)


def max_scores_packed(preds: np.ndarray, num_anchors: int, num_classes: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Highest class score and its class index for every row of a packed buffer.

    Rows are indexed by the full stride `num_classes + 5`, never by `num_classes` alone.
    """

    rows = _as_rows(preds, num_anchors, num_classes + PACKED_HEADER, "packed predictions")
    return _argmax_rows(rows[:, PACKED_HEADER:])


def packed_confidence(preds: np.ndarray, num_anchors: int, num_classes: int) -> np.ndarray:
    """Objectness confidence (5th field) of every packed row, as float32[A]."""

    rows = _as_rows(preds, num_anchors, num_classes + PACKED_HEADER, "packed predictions")
    return rows[:, CONFIDENCE_FIELD].astype(np.float32)
