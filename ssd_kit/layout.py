"""
Per-layout strategies.

Each `LayoutStrategy` bundles what differs between detector families: how raw
outputs become (boxes, ranking scores, class ids), the class-table offset, and
the default class table. Everything after decoding is layout-agnostic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

import numpy as np

from .boxes import decode_center_boxes, decode_corner_boxes
from .classes import COCO80_CLASSES, COCO_SSD_CLASSES, ClassTable
from .config import LayoutMode, PostConfig
from .errors import ShapeMismatchError
from .scores import PACKED_HEADER, max_scores_dense, max_scores_packed, packed_confidence
from .types import RawOutput


@dataclass(frozen=True)
class DecodedAnchors:
    boxes: np.ndarray  # (A, 4) normalized (y1, x1, y2, x2)
    scores: np.ndarray  # (A,) ranking score fed to NMS
    class_ids: np.ndarray  # (A,)

    @property
    def num_anchors(self) -> int:
        return int(self.boxes.shape[0])


def _drop_batch(shape: Tuple[int, ...], rank: int, what: str) -> Tuple[int, ...]:
    """Strip a leading batch dim of 1 so `shape` has `rank` dims."""

    if len(shape) == rank + 1:
        if shape[0] != 1:
            raise ShapeMismatchError(f"Batch > 1 is not supported ({what} shape {shape}). Pass one image at a time.")
        return tuple(shape[1:])
    if len(shape) != rank:
        raise ShapeMismatchError(f"Unsupported {what} shape {shape}.")
    return tuple(shape)


def decode_dense(raw: RawOutput, cfg: PostConfig) -> DecodedAnchors:
    needed = max(cfg.score_index, cfg.box_index) + 1
    if len(raw) < needed:
        raise ShapeMismatchError(f"Dense layout needs {needed} outputs, got {len(raw)}.")

    num_anchors, num_classes = _drop_batch(raw.shapes[cfg.score_index], 2, "scores")

    box_shape = tuple(raw.shapes[cfg.box_index])
    # [1, A, 1, 4] from the SSD graph; [1, A, 4] and [A, 4] are accepted too.
    if len(box_shape) == 4 and box_shape[2] == 1:
        box_shape = (box_shape[0], box_shape[1], box_shape[3])
    box_anchors, box_fields = _drop_batch(box_shape, 2, "boxes")
    if box_fields != 4:
        raise ShapeMismatchError(f"Boxes must have 4 coordinates, got shape {raw.shapes[cfg.box_index]}.")
    if box_anchors != num_anchors:
        raise ShapeMismatchError(f"Scores cover {num_anchors} anchors but boxes cover {box_anchors}.")

    max_scores, class_ids = max_scores_dense(raw.buffers[cfg.score_index], num_anchors, num_classes)
    boxes = decode_corner_boxes(raw.buffers[cfg.box_index], num_anchors)
    return DecodedAnchors(boxes=boxes, scores=max_scores, class_ids=class_ids)


def decode_packed(raw: RawOutput, cfg: PostConfig) -> DecodedAnchors:
    if len(raw) <= cfg.output_index:
        raise ShapeMismatchError(f"Packed layout reads output {cfg.output_index}, got {len(raw)} outputs.")

    num_anchors, row_width = _drop_batch(raw.shapes[cfg.output_index], 2, "predictions")
    num_classes = row_width - PACKED_HEADER
    if num_classes < 1:
        raise ShapeMismatchError(f"Packed rows need at least {PACKED_HEADER + 1} fields, got {row_width}.")

    preds = raw.buffers[cfg.output_index]
    _, class_ids = max_scores_packed(preds, num_anchors, num_classes)
    confidence = packed_confidence(preds, num_anchors, num_classes)
    boxes = decode_center_boxes(preds, num_anchors, num_classes, float(cfg.input_size))
    return DecodedAnchors(boxes=boxes, scores=confidence, class_ids=class_ids)


@dataclass(frozen=True)
class LayoutStrategy:
    mode: LayoutMode
    decode: Callable[[RawOutput, PostConfig], DecodedAnchors]
    class_offset: int
    default_classes: ClassTable


DENSE_STRATEGY = LayoutStrategy(
    mode=LayoutMode.DENSE,
    decode=decode_dense,
    # Class 0 of the SSD graph is background; scores start at category id 1.
    class_offset=1,
    default_classes=COCO_SSD_CLASSES,
)

PACKED_STRATEGY = LayoutStrategy(
    mode=LayoutMode.PACKED,
    decode=decode_packed,
    class_offset=0,
    default_classes=COCO80_CLASSES,
)

_STRATEGIES: Dict[LayoutMode, LayoutStrategy] = {
    LayoutMode.DENSE: DENSE_STRATEGY,
    LayoutMode.PACKED: PACKED_STRATEGY,
}


def strategy_for(mode: LayoutMode) -> LayoutStrategy:
    return _STRATEGIES[LayoutMode(mode)]
