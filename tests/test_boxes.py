import unittest

import numpy as np

from ssd_kit.boxes import decode_center_boxes, decode_corner_boxes
from ssd_kit.errors import ShapeMismatchError


class TestCornerBoxes(unittest.TestCase):
    def test_passthrough_copies(self) -> None:
        raw = np.array([[[[0.1, 0.2, 0.3, 0.4]]], [[[0.5, 0.6, 0.7, 0.8]]]], dtype=np.float32).reshape(1, 2, 1, 4)
        boxes = decode_corner_boxes(raw, 2)
        self.assertEqual(boxes.shape, (2, 4))
        self.assertTrue(np.allclose(boxes[1], [0.5, 0.6, 0.7, 0.8]))
        boxes[0, 0] = 9.0
        self.assertAlmostEqual(float(raw[0, 0, 0, 0]), 0.1, places=6)

    def test_length_mismatch_raises(self) -> None:
        with self.assertRaises(ShapeMismatchError):
            decode_corner_boxes(np.zeros(7, dtype=np.float32), 2)


class TestCenterBoxes(unittest.TestCase):
    def test_center_size_to_corners(self) -> None:
        # [cx, cy, w, h, conf, s0]
        p = np.array([[320, 240, 128, 96, 0.9, 1.0]], dtype=np.float32)
        boxes = decode_center_boxes(p, 1, 1, 640)
        # (y1, x1, y2, x2)
        self.assertTrue(np.allclose(boxes[0], [0.3, 0.4, 0.45, 0.6]))

    def test_left_inverse_of_center_size(self) -> None:
        scale = 416.0
        rng = np.random.default_rng(7)
        n = 16
        cx = rng.uniform(50, 350, n)
        cy = rng.uniform(50, 350, n)
        w = rng.uniform(1, 100, n)
        h = rng.uniform(1, 100, n)
        p = np.zeros((n, 7), dtype=np.float32)
        p[:, 0], p[:, 1], p[:, 2], p[:, 3] = cx, cy, w, h

        y1, x1, y2, x2 = decode_center_boxes(p, n, 2, scale).T
        self.assertTrue(np.allclose((x1 + x2) / 2 * scale, cx, atol=1e-2))
        self.assertTrue(np.allclose((y1 + y2) / 2 * scale, cy, atol=1e-2))
        self.assertTrue(np.allclose((x2 - x1) * scale, w, atol=1e-2))
        self.assertTrue(np.allclose((y2 - y1) * scale, h, atol=1e-2))

    def test_input_not_modified(self) -> None:
        p = np.array([[10, 20, 4, 6, 0.5, 0.1, 0.2]], dtype=np.float32)
        before = p.copy()
        decode_center_boxes(p, 1, 2, 32)
        self.assertTrue(np.array_equal(p, before))

    def test_invalid_scale_rejected(self) -> None:
        p = np.zeros((1, 6), dtype=np.float32)
        with self.assertRaises(ValueError):
            decode_center_boxes(p, 1, 1, 0)

    def test_length_mismatch_raises(self) -> None:
        with self.assertRaises(ShapeMismatchError):
            decode_center_boxes(np.zeros((2, 6), dtype=np.float32), 2, 2, 640)


if __name__ == "__main__":
    unittest.main()
