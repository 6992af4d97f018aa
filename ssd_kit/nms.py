from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Callable, Optional

import numpy as np


@dataclass(frozen=True)
class NMSConfig:
    iou_threshold: float = 0.5
    max_detections: int = 20
    min_score: float = 0.5

    def __post_init__(self) -> None:
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be in [0, 1]")
        if not 0.0 <= self.min_score <= 1.0:
            raise ValueError("min_score must be in [0, 1]")


def _corners(boxes: np.ndarray):
    return boxes[:, 0], boxes[:, 1], boxes[:, 2], boxes[:, 3]


def _valid(y1, x1, y2, x2) -> np.ndarray:
    # Inverted corners on either axis make a box degenerate.
    return (y2 > y1) & (x2 > x1)


def box_iou(a: np.ndarray, b: np.ndarray) -> float:
    """IoU of two `(y1, x1, y2, x2)` boxes. Zero-area or inverted boxes overlap nothing."""

    pair = np.asarray([a, b], dtype=np.float64).reshape(2, 4)
    y1, x1, y2, x2 = _corners(pair)
    if not _valid(y1, x1, y2, x2).all():
        return 0.0
    areas = (y2 - y1) * (x2 - x1)
    h = max(0.0, min(y2[0], y2[1]) - max(y1[0], y1[1]))
    w = max(0.0, min(x2[0], x2[1]) - max(x1[0], x1[1]))
    inter = h * w
    return float(inter / (areas[0] + areas[1] - inter))


def nms(boxes: np.ndarray, scores: np.ndarray, cfg: NMSConfig) -> np.ndarray:
    """
    Greedy NMS on NumPy arrays. Expects boxes shape (N,4) as (y1, x1, y2, x2) and
    scores shape (N,). Returns indices of kept boxes, highest score first.

    Candidates below `cfg.min_score` and boxes with zero or negative extent
    (including inverted corners) are never selected and never suppress.
    Equal scores are visited in ascending index order, so the output is
    deterministic for a given input.
    """

    boxes = np.asarray(boxes, dtype=np.float32).reshape(-1, 4)
    scores = np.asarray(scores, dtype=np.float32).reshape(-1)
    if boxes.shape[0] != scores.shape[0]:
        raise ValueError(f"Got {boxes.shape[0]} boxes but {scores.shape[0]} scores.")
    if boxes.size == 0 or cfg.max_detections <= 0:
        return np.empty((0,), dtype=np.int64)

    y1, x1, y2, x2 = _corners(boxes)
    areas = (y2 - y1) * (x2 - x1)

    candidates = np.where((scores >= cfg.min_score) & _valid(y1, x1, y2, x2))[0]
    if candidates.size == 0:
        return np.empty((0,), dtype=np.int64)

    # Stable sort on the negated score keeps lower indices first among ties.
    order = candidates[np.argsort(-scores[candidates], kind="stable")]
    keep = []

    while order.size > 0 and len(keep) < cfg.max_detections:
        i = order[0]
        keep.append(i)

        rest = order[1:]
        yy1 = np.maximum(y1[i], y1[rest])
        xx1 = np.maximum(x1[i], x1[rest])
        yy2 = np.minimum(y2[i], y2[rest])
        xx2 = np.minimum(x2[i], x2[rest])

        h = np.maximum(0.0, yy2 - yy1)
        w = np.maximum(0.0, xx2 - xx1)
        inter = h * w
        union = areas[i] + areas[rest] - inter
        iou = inter / np.maximum(union, 1e-12)

        order = rest[iou <= cfg.iou_threshold]

    return np.array(keep, dtype=np.int64)


class SuppressionContext(ABC):
    """
    Where suppression runs. The postprocessor hands the NMS call to its context
    instead of switching any global compute backend.
    """

    @abstractmethod
    def run(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Run `fn(*args)` and return its result."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


class InlineContext(SuppressionContext):
    """Runs suppression on the calling thread."""

    def run(self, fn: Callable[..., Any], *args: Any) -> Any:
        return fn(*args)


class ExecutorContext(SuppressionContext):
    """
    Runs suppression on a `concurrent.futures` executor (e.g. a dedicated CPU
    worker while inference owns an accelerator). Blocks until the result is ready.
    """

    def __init__(self, executor: Executor, timeout: Optional[float] = None):
        self.executor = executor
        self.timeout = timeout

    def run(self, fn: Callable[..., Any], *args: Any) -> Any:
        return self.executor.submit(fn, *args).result(timeout=self.timeout)
