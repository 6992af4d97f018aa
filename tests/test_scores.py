import unittest

import numpy as np

from ssd_kit.errors import ShapeMismatchError
from ssd_kit.scores import max_scores_dense, max_scores_packed, packed_confidence


class TestDenseScores(unittest.TestCase):
    def test_argmax_per_anchor(self) -> None:
        scores = np.array(
            [
                [0.1, 0.7, 0.2],
                [0.3, 0.2, 0.9],
                [0.6, 0.1, 0.2],
            ],
            dtype=np.float32,
        )
        max_scores, class_ids = max_scores_dense(scores.reshape(-1), 3, 3)
        self.assertTrue(np.array_equal(class_ids, np.array([1, 2, 0])))
        self.assertTrue(np.allclose(max_scores, np.array([0.7, 0.9, 0.6], dtype=np.float32)))

    def test_ties_resolve_to_lowest_index(self) -> None:
        scores = np.array([[0.2, 0.5, 0.5, 0.1], [0.4, 0.4, 0.4, 0.4]], dtype=np.float32)
        _, class_ids = max_scores_dense(scores, 2, 4)
        self.assertEqual(class_ids.tolist(), [1, 0])

    def test_all_negative_scores_still_pick_a_class(self) -> None:
        scores = np.array([[-3.0, -1.0, -2.0]], dtype=np.float32)
        max_scores, class_ids = max_scores_dense(scores, 1, 3)
        self.assertEqual(class_ids.tolist(), [1])
        self.assertAlmostEqual(float(max_scores[0]), -1.0)

    def test_row_without_real_score_has_no_class(self) -> None:
        scores = np.array([[-np.inf, np.nan], [0.1, np.nan]], dtype=np.float32)
        max_scores, class_ids = max_scores_dense(scores, 2, 2)
        self.assertEqual(class_ids.tolist(), [-1, 0])
        self.assertEqual(float(max_scores[0]), -np.inf)

    def test_length_mismatch_raises(self) -> None:
        with self.assertRaises(ShapeMismatchError):
            max_scores_dense(np.zeros(5, dtype=np.float32), 2, 3)

    def test_input_not_modified(self) -> None:
        scores = np.array([[0.1, np.nan, 0.3]], dtype=np.float32)
        before = scores.copy()
        max_scores_dense(scores, 1, 3)
        self.assertTrue(np.array_equal(scores, before, equal_nan=True))


class TestPackedScores(unittest.TestCase):
    def _rows(self) -> np.ndarray:
        # [cx, cy, w, h, conf, s0, s1, s2]
        return np.array(
            [
                [320, 320, 64, 64, 0.8, 0.1, 0.6, 0.3],
                [100, 50, 20, 10, 0.3, 0.9, 0.05, 0.2],
            ],
            dtype=np.float32,
        )

    def test_confidence_and_class(self) -> None:
        p = self._rows()
        _, class_ids = max_scores_packed(p, 2, 3)
        conf = packed_confidence(p, 2, 3)
        self.assertEqual(class_ids.tolist(), [1, 0])
        self.assertTrue(np.allclose(conf, np.array([0.8, 0.3], dtype=np.float32)))

    def test_class_scores_follow_full_row_stride(self) -> None:
        # Each anchor's class scores start at i * (C + 5) + 5. Give every row a
        # different winning class so reading with any other stride would disagree.
        num_anchors, num_classes = 4, 4
        p = np.zeros((num_anchors, num_classes + 5), dtype=np.float32)
        for i in range(num_anchors):
            p[i, :4] = 1000.0 + i  # box fields, larger than any score
            p[i, 4] = 0.5
            p[i, 5 + (num_classes - 1 - i)] = 0.9
        flat = p.reshape(-1)
        max_scores, class_ids = max_scores_packed(flat, num_anchors, num_classes)
        self.assertEqual(class_ids.tolist(), [3, 2, 1, 0])
        self.assertTrue(np.allclose(max_scores, 0.9))

    def test_row_width_mismatch_raises(self) -> None:
        p = self._rows()
        with self.assertRaises(ShapeMismatchError):
            max_scores_packed(p, 2, 4)
        with self.assertRaises(ShapeMismatchError):
            packed_confidence(p, 3, 3)


if __name__ == "__main__":
    unittest.main()
