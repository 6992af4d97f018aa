from __future__ import annotations

import numpy as np

from .config import LayoutMode, PostConfig


def prepare_input(image_rgb: np.ndarray, cfg: PostConfig) -> np.ndarray:
    """
    Build the `(1, H, W, 3)` input blob the detector graph expects.

    - dense:  raw pixels as int32, original resolution
    - packed: nearest-neighbour resize to `input_size` x `input_size`, float32 in [0, 1]
    """

    if image_rgb is None or not hasattr(image_rgb, "shape"):
        raise TypeError("image_rgb must be a NumPy array (RGB).")
    if image_rgb.ndim != 3 or image_rgb.shape[2] != 3:
        raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_rgb, 'shape', None)}")

    if cfg.layout is LayoutMode.DENSE:
        return image_rgb.astype(np.int32)[None, ...]

    side = int(cfg.input_size)
    h, w = image_rgb.shape[:2]
    img = image_rgb
    if (w, h) != (side, side):
        try:
            import cv2  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError("OpenCV is required to resize inputs. Install with `pip install opencv-python`.") from e
        img = cv2.resize(img, (side, side), interpolation=cv2.INTER_NEAREST)
    blob = img.astype(np.float32) / 255.0
    return blob[None, ...]
