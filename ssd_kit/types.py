from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

import numpy as np

from .errors import ShapeMismatchError


@dataclass(frozen=True)
class DetectedObject:
    """
    Final detection in image pixel space.

    `bbox` is (x, y, width, height) with (x, y) the top-left corner.
    """

    bbox: Tuple[float, float, float, float]
    class_name: str
    score: float

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        x, y, w, h = self.bbox
        return x, y, x + w, y + h

    def as_dict(self) -> Dict[str, object]:
        return {"bbox": list(self.bbox), "class": self.class_name, "score": self.score}


@dataclass(frozen=True)
class RawOutput:
    """
    Raw buffers returned by the inference engine for one image, each paired with
    its declared shape.

    Buffers may be flat; they are only ever read.
    """

    buffers: Tuple[np.ndarray, ...]
    shapes: Tuple[Tuple[int, ...], ...]

    def __post_init__(self) -> None:
        if len(self.buffers) != len(self.shapes):
            raise ShapeMismatchError(
                f"Got {len(self.buffers)} buffers but {len(self.shapes)} shapes."
            )
        for i, (buf, shape) in enumerate(zip(self.buffers, self.shapes)):
            expected = int(np.prod(shape)) if len(shape) else 1
            if np.asarray(buf).size != expected:
                raise ShapeMismatchError(
                    f"Output {i}: buffer has {np.asarray(buf).size} values, shape {tuple(shape)} needs {expected}."
                )

    @classmethod
    def from_arrays(cls, arrays: Sequence[np.ndarray]) -> "RawOutput":
        """Wrap engine outputs that already carry their shape (NumPy arrays)."""

        arrs = tuple(np.asarray(a) for a in arrays)
        return cls(buffers=arrs, shapes=tuple(tuple(int(d) for d in a.shape) for a in arrs))

    def __len__(self) -> int:
        return len(self.buffers)
