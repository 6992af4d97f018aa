from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .assemble import build_detected_objects
from .classes import ClassTable
from .config import PostConfig
from .layout import DecodedAnchors, LayoutStrategy, strategy_for
from .nms import InlineContext, NMSConfig, SuppressionContext, nms
from .types import DetectedObject, RawOutput

LOGGER = logging.getLogger(__name__)


class DetectionPostprocessor:
    """
    Turns raw detector outputs for a single image into `DetectedObject`s.

    Supported layouts (per image):
    - dense:  scores `[1, A, C]` + boxes `[1, A, 1, 4]` as normalized (y1, x1, y2, x2)
    - packed: `[1, A, C + 5]` rows of `[cx, cy, w, h, conf, class_scores...]` in input pixels

    The class table and the suppression context are injected; nothing is global.
    Instances hold no per-call state and can be shared between threads.
    """

    def __init__(
        self,
        cfg: PostConfig = PostConfig(),
        class_table: Optional[ClassTable] = None,
        context: Optional[SuppressionContext] = None,
    ):
        self.cfg = cfg
        self.strategy: LayoutStrategy = strategy_for(cfg.layout)
        self.class_table = class_table if class_table is not None else self.strategy.default_classes
        self.context = context if context is not None else InlineContext()
        self.nms_cfg = NMSConfig(
            iou_threshold=cfg.iou_threshold,
            max_detections=cfg.max_num_boxes,
            min_score=cfg.min_score,
        )

    def process(self, raw: RawOutput, image_size: Tuple[int, int]) -> List[DetectedObject]:
        """
        Arg:
            raw: engine outputs for one image
            image_size: (width, height) of the image the boxes are reported in
        """

        anchors = self.decode(raw)
        kept = self.suppress(anchors)
        LOGGER.debug(
            "%s layout: %d anchors, %d kept after NMS (%s)",
            self.strategy.mode.value,
            anchors.num_anchors,
            kept.size,
            self.context.name,
        )
        return build_detected_objects(
            kept,
            anchors.boxes,
            anchors.scores,
            anchors.class_ids,
            image_size,
            self.class_table,
            self.strategy.class_offset,
        )

    def process_arrays(self, outputs: Sequence[np.ndarray], image_size: Tuple[int, int]) -> List[DetectedObject]:
        """Same as `process` for engine outputs that are already shaped NumPy arrays."""

        return self.process(RawOutput.from_arrays(outputs), image_size)

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #
    def decode(self, raw: RawOutput) -> DecodedAnchors:
        return self.strategy.decode(raw, self.cfg)

    def suppress(self, anchors: DecodedAnchors) -> np.ndarray:
        return self.context.run(nms, anchors.boxes, anchors.scores, self.nms_cfg)
