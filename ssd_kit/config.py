from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union


class LayoutMode(str, Enum):
    """
    Output layout of the detector.

    - DENSE:  two outputs, scores `[1, A, C]` and boxes `[1, A, 1, 4]` (SSD MobileNet)
    - PACKED: one output `[1, A, C + 5]` of `[cx, cy, w, h, conf, scores...]` rows (YOLOv5)
    """

    DENSE = "dense"
    PACKED = "packed"


@dataclass(frozen=True)
class PostConfig:
    """
    Post-processing configuration.
    """

    layout: LayoutMode = LayoutMode.DENSE
    max_num_boxes: int = 20
    min_score: float = 0.5
    iou_threshold: float = 0.5
    # Square network input side; normalizes packed-layout boxes.
    input_size: int = 640
    # Which engine outputs hold what. Dense: scores + boxes. Packed: the single row tensor.
    score_index: int = 0
    box_index: int = 1
    output_index: int = 0

    def __post_init__(self) -> None:
        # Accept plain strings ("dense"/"packed") from JSON or CLI.
        object.__setattr__(self, "layout", LayoutMode(self.layout))
        if self.max_num_boxes < 0:
            raise ValueError("max_num_boxes must be >= 0")
        if not 0.0 <= self.min_score <= 1.0:
            raise ValueError("min_score must be in [0, 1]")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be in [0, 1]")
        if self.input_size <= 0:
            raise ValueError("input_size must be > 0")
        for key in ("score_index", "box_index", "output_index"):
            if getattr(self, key) < 0:
                raise ValueError(f"{key} must be >= 0")


def _require_number(payload: Dict[str, Any], key: str) -> float:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_int(payload: Dict[str, Any], key: str) -> int:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


_NUMBER_KEYS = ("min_score", "iou_threshold")
_INT_KEYS = ("max_num_boxes", "input_size", "score_index", "box_index", "output_index")


def post_config_from_dict(payload: Dict[str, Any]) -> PostConfig:
    if not isinstance(payload, dict):
        raise ValueError("Post config must be a JSON object")

    allowed = {"layout", *_NUMBER_KEYS, *_INT_KEYS}
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown post config keys: {unknown}")

    kwargs: Dict[str, Any] = {}
    if "layout" in payload:
        layout = payload["layout"]
        if not isinstance(layout, str):
            raise ValueError("layout must be a string")
        try:
            kwargs["layout"] = LayoutMode(layout.strip().lower())
        except ValueError as exc:
            raise ValueError(f"layout must be one of {[m.value for m in LayoutMode]}") from exc
    for key in _NUMBER_KEYS:
        if key in payload:
            kwargs[key] = _require_number(payload, key)
    for key in _INT_KEYS:
        if key in payload:
            kwargs[key] = _require_int(payload, key)
    return PostConfig(**kwargs)


def load_post_config(path: Union[str, Path]) -> PostConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Post config not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid post config JSON: {path}") from exc
    return post_config_from_dict(payload)
