import tempfile
import unittest
from pathlib import Path

from ssd_kit.classes import COCO80_CLASSES, COCO_SSD_CLASSES, ClassTable, load_class_names, load_class_table
from ssd_kit.errors import ClassIndexError


class TestClassTable(unittest.TestCase):
    def test_builtin_tables(self) -> None:
        self.assertEqual(len(COCO_SSD_CLASSES), 80)
        self.assertEqual(len(COCO80_CLASSES), 80)
        self.assertEqual(COCO_SSD_CLASSES[1], "person")
        self.assertEqual(COCO_SSD_CLASSES[90], "toothbrush")
        self.assertEqual(COCO80_CLASSES[0], "person")
        self.assertEqual(COCO80_CLASSES[79], "toothbrush")
        self.assertEqual(COCO_SSD_CLASSES[13], COCO80_CLASSES[11])

    def test_gaps_and_out_of_range_fail(self) -> None:
        self.assertNotIn(12, COCO_SSD_CLASSES)
        self.assertIsNone(COCO_SSD_CLASSES.get(0))
        for index in (0, 12, 91, -1):
            with self.subTest(index=index):
                with self.assertRaises(ClassIndexError):
                    COCO_SSD_CLASSES[index]
        with self.assertRaises(IndexError):
            COCO80_CLASSES[80]

    def test_display_name_with_offset(self) -> None:
        table = ClassTable(["background", "cat", "dog"])
        self.assertEqual(table.display_name(1, offset=1), "dog")
        self.assertEqual(list(table), [0, 1, 2])


class TestMetadata(unittest.TestCase):
    def _write(self, text: str) -> str:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        path = Path(tmpdir.name) / "metadata.yaml"
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_names_block(self) -> None:
        path = self._write(
            "description: drones\n"
            "names:\n"
            "  0: drone\n"
            "  1: 'bird'\n"
            "  # comment\n"
            '  2: "plane"\n'
            "stride: 32\n"
        )
        self.assertEqual(load_class_names(path), {0: "drone", 1: "bird", 2: "plane"})
        table = load_class_table(path)
        self.assertEqual(table[1], "bird")

    def test_bad_entries_rejected_with_line_number(self) -> None:
        cases = {
            "names:\n  0: drone\n  0: bird\n": ":3:",
            "names:\n  zero: drone\n": ":2:",
            "names:\n  0: drone\n  1: ''\n": ":3:",
        }
        for text, where in cases.items():
            with self.subTest(text=text):
                with self.assertRaises(ValueError) as ctx:
                    load_class_names(self._write(text))
                self.assertIn(where, str(ctx.exception))

    def test_keys_outside_names_block_ignored(self) -> None:
        path = self._write("meta:\n  version: 2\nnames:\n  0: drone\n")
        self.assertEqual(load_class_names(path), {0: "drone"})

    def test_empty_metadata_rejected(self) -> None:
        path = self._write("description: nothing here\n")
        self.assertEqual(load_class_names(path), {})
        with self.assertRaises(ValueError):
            load_class_table(path)


if __name__ == "__main__":
    unittest.main()
