"""
Post-processing for single-shot object detectors.

Turns raw detector outputs (NumPy arrays from any inference engine) into
ranked `DetectedObject`s: score/class extraction, box decoding, greedy NMS and
mapping back to image pixels. Two output layouts are supported: SSD-style dense
score/box tensors and YOLO-style packed rows. Only NumPy is needed for
post-processing; OpenCV is used to resize packed-layout inputs.
"""

from .types import DetectedObject, RawOutput
from .errors import ClassIndexError, PostprocessError, ShapeMismatchError
from .config import LayoutMode, PostConfig, load_post_config
from .classes import COCO80_CLASSES, COCO_SSD_CLASSES, ClassTable, load_class_names, load_class_table
from .scores import max_scores_dense, max_scores_packed, packed_confidence
from .boxes import decode_center_boxes, decode_corner_boxes
from .nms import ExecutorContext, InlineContext, NMSConfig, SuppressionContext, box_iou, nms
from .assemble import build_detected_objects
from .postprocess import DetectionPostprocessor
from .preprocess import prepare_input
from .runtime import DetectionPipeline

__all__ = [
    "DetectedObject",
    "RawOutput",
    "ClassIndexError",
    "PostprocessError",
    "ShapeMismatchError",
    "LayoutMode",
    "PostConfig",
    "load_post_config",
    "COCO80_CLASSES",
    "COCO_SSD_CLASSES",
    "ClassTable",
    "load_class_names",
    "load_class_table",
    "max_scores_dense",
    "max_scores_packed",
    "packed_confidence",
    "decode_center_boxes",
    "decode_corner_boxes",
    "ExecutorContext",
    "InlineContext",
    "NMSConfig",
    "SuppressionContext",
    "box_iou",
    "nms",
    "build_detected_objects",
    "DetectionPostprocessor",
    "prepare_input",
    "DetectionPipeline",
]
