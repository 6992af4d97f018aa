from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from .classes import ClassTable
from .config import PostConfig
from .nms import SuppressionContext
from .postprocess import DetectionPostprocessor
from .preprocess import prepare_input
from .types import DetectedObject, RawOutput

LOGGER = logging.getLogger(__name__)

EngineOutput = Union[np.ndarray, Sequence[np.ndarray], RawOutput]


class DetectionPipeline:
    """
    Plug-and-play pipeline: preprocess -> inference -> postprocess.

    The inference engine is any callable taking the `(1, H, W, 3)` blob and
    returning the raw output tensor(s). The pipeline expects RGB images as
    `np.ndarray` and returns `DetectedObject`s in original image pixels.
    """

    def __init__(
        self,
        infer_fn: Callable[[np.ndarray], EngineOutput],
        *,
        post_cfg: PostConfig = PostConfig(),
        class_table: Optional[ClassTable] = None,
        context: Optional[SuppressionContext] = None,
    ):
        self._infer_fn = infer_fn
        self.post_cfg = post_cfg
        self.post = DetectionPostprocessor(post_cfg, class_table=class_table, context=context)

    def preprocess(self, image_rgb: np.ndarray) -> np.ndarray:
        return prepare_input(image_rgb, self.post_cfg)

    def __call__(self, image_rgb: np.ndarray) -> List[DetectedObject]:
        blob = self.preprocess(image_rgb)
        orig_h, orig_w = image_rgb.shape[:2]
        raw = _as_raw_output(self._infer_fn(blob))
        detections = self.post.process(raw, image_size=(orig_w, orig_h))
        LOGGER.debug("Detected %d objects in %dx%d image", len(detections), orig_w, orig_h)
        return detections


def _as_raw_output(outputs: EngineOutput) -> RawOutput:
    if isinstance(outputs, RawOutput):
        return outputs
    if isinstance(outputs, np.ndarray):
        return RawOutput.from_arrays([outputs])
    return RawOutput.from_arrays(list(outputs))
