from __future__ import annotations

from typing import Dict, Iterable, Iterator, Mapping, Sequence, Tuple, Union

from .errors import ClassIndexError


class ClassTable(Mapping):
    """
    Read-only lookup from class index to display name.

    Indices need not be contiguous: the COCO category ids used by SSD exports
    skip several values, and looking one of those up is an error, not a default.
    """

    def __init__(self, names: Union[Mapping[int, str], Sequence[str]]):
        if isinstance(names, Mapping):
            table = {int(k): str(v) for k, v in names.items()}
        else:
            table = {i: str(v) for i, v in enumerate(names)}
        self._names: Dict[int, str] = table

    def __getitem__(self, index: int) -> str:
        try:
            return self._names[index]
        except KeyError:
            raise ClassIndexError(
                f"Class index {index} not in class table ({len(self._names)} entries)."
            ) from None

    def __contains__(self, index: object) -> bool:
        return index in self._names

    def get(self, index: int, default=None):
        return self._names.get(index, default)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ClassTable({len(self._names)} classes)"

    def display_name(self, class_id: int, offset: int = 0) -> str:
        return self[int(class_id) + offset]


def _iter_name_entries(lines: Iterable[str]) -> Iterator[Tuple[int, str, str]]:
    """Yield (line number, id text, label) for every entry of the `names:` block."""

    in_names = False
    for line_no, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        indented = raw.startswith((" ", "\t"))
        if not indented:
            in_names = line == "names:"
            continue
        if in_names and ":" in line:
            key, label = line.split(":", 1)
            yield line_no, key.strip(), label.strip().strip("'").strip('"')


def load_class_names(metadata_path: str) -> Dict[int, str]:
    """
    Load class names from the lightweight `metadata.yaml` format:

        names:
          0: person
          1: bicycle
          ...

    Parsed by hand so no PyYAML dependency is needed. Any top-level key ends the
    block. Non-integer ids, empty labels and repeated ids are rejected with the
    offending line number.
    """

    names: Dict[int, str] = {}
    with open(metadata_path, "r", encoding="utf-8") as f:
        for line_no, key, label in _iter_name_entries(f):
            if not key.isdigit():
                raise ValueError(f"{metadata_path}:{line_no}: class id must be a non-negative integer, got {key!r}")
            if not label:
                raise ValueError(f"{metadata_path}:{line_no}: class {key} has an empty name")
            class_id = int(key)
            if class_id in names:
                raise ValueError(f"{metadata_path}:{line_no}: class id {class_id} listed twice")
            names[class_id] = label
    return names


def load_class_table(metadata_path: str) -> ClassTable:
    names = load_class_names(metadata_path)
    if not names:
        raise ValueError(f"No class names found in {metadata_path}")
    return ClassTable(names)


# COCO category ids as emitted by the SSD MobileNet exports (index 0 is background).
_COCO_CATEGORIES = (
    (1, "person"), (2, "bicycle"), (3, "car"), (4, "motorcycle"), (5, "airplane"),
    (6, "bus"), (7, "train"), (8, "truck"), (9, "boat"), (10, "traffic light"),
    (11, "fire hydrant"), (13, "stop sign"), (14, "parking meter"), (15, "bench"),
    (16, "bird"), (17, "cat"), (18, "dog"), (19, "horse"), (20, "sheep"), (21, "cow"),
    (22, "elephant"), (23, "bear"), (24, "zebra"), (25, "giraffe"), (27, "backpack"),
    (28, "umbrella"), (31, "handbag"), (32, "tie"), (33, "suitcase"), (34, "frisbee"),
    (35, "skis"), (36, "snowboard"), (37, "sports ball"), (38, "kite"),
    (39, "baseball bat"), (40, "baseball glove"), (41, "skateboard"), (42, "surfboard"),
    (43, "tennis racket"), (44, "bottle"), (46, "wine glass"), (47, "cup"), (48, "fork"),
    (49, "knife"), (50, "spoon"), (51, "bowl"), (52, "banana"), (53, "apple"),
    (54, "sandwich"), (55, "orange"), (56, "broccoli"), (57, "carrot"), (58, "hot dog"),
    (59, "pizza"), (60, "donut"), (61, "cake"), (62, "chair"), (63, "couch"),
    (64, "potted plant"), (65, "bed"), (67, "dining table"), (70, "toilet"), (72, "tv"),
    (73, "laptop"), (74, "mouse"), (75, "remote"), (76, "keyboard"), (77, "cell phone"),
    (78, "microwave"), (79, "oven"), (80, "toaster"), (81, "sink"), (82, "refrigerator"),
    (84, "book"), (85, "clock"), (86, "vase"), (87, "scissors"), (88, "teddy bear"),
    (89, "hair drier"), (90, "toothbrush"),
)

COCO_SSD_CLASSES = ClassTable(dict(_COCO_CATEGORIES))
# Same 80 labels, contiguous from 0 (YOLO exports).
COCO80_CLASSES = ClassTable([name for _, name in _COCO_CATEGORIES])
