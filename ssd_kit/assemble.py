from __future__ import annotations

from typing import List, Tuple

import numpy as np

from .classes import ClassTable
from .errors import ShapeMismatchError
from .types import DetectedObject


def build_detected_objects(
    kept: np.ndarray,
    boxes: np.ndarray,
    scores: np.ndarray,
    class_ids: np.ndarray,
    image_size: Tuple[int, int],
    class_table: ClassTable,
    class_offset: int = 0,
) -> List[DetectedObject]:
    """
    Map kept anchors to `DetectedObject`s, in the order of `kept`.

    Args:
        kept: anchor indices surviving NMS
        boxes: (A, 4) normalized (y1, x1, y2, x2)
        scores: ranking score per anchor
        class_ids: class index per anchor (before `class_offset`)
        image_size: (width, height) to scale boxes into
        class_offset: added to every class index before the table lookup
    """

    width, height = image_size
    boxes = np.asarray(boxes).reshape(-1, 4)
    num_anchors = boxes.shape[0]
    if len(scores) != num_anchors or len(class_ids) != num_anchors:
        raise ShapeMismatchError(
            f"boxes/scores/classes disagree: {num_anchors}, {len(scores)}, {len(class_ids)} anchors."
        )

    objects: List[DetectedObject] = []
    for k in np.asarray(kept, dtype=np.int64).reshape(-1):
        if k < 0 or k >= num_anchors:
            raise ShapeMismatchError(f"Kept index {k} out of range for {num_anchors} anchors.")
        y1, x1, y2, x2 = (float(v) for v in boxes[k])
        min_y = y1 * height
        min_x = x1 * width
        max_y = y2 * height
        max_x = x2 * width
        objects.append(
            DetectedObject(
                bbox=(min_x, min_y, max_x - min_x, max_y - min_y),
                class_name=class_table.display_name(int(class_ids[k]), class_offset),
                score=float(scores[k]),
            )
        )
    return objects
