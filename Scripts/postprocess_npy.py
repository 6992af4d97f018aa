import argparse
import json
import logging
from dataclasses import replace

import numpy as np

from ssd_kit import DetectionPostprocessor, LayoutMode, PostConfig, load_class_table, load_post_config


def main() -> int:
    parser = argparse.ArgumentParser(description="Post-process raw detector outputs saved as .npy files.")
    parser.add_argument("outputs", nargs="+", help="Engine outputs (.npy), in the order the engine returns them.")
    parser.add_argument("--width", type=int, required=True, help="Width of the image to report boxes in.")
    parser.add_argument("--height", type=int, required=True, help="Height of the image to report boxes in.")
    parser.add_argument("--config", default=None, help="Optional post config JSON.")
    parser.add_argument(
        "--layout",
        default=None,
        choices=[m.value for m in LayoutMode],
        help="Output layout (overrides the config file).",
    )
    parser.add_argument("--metadata", default=None, help="Class metadata (names mapping); defaults to built-in COCO.")
    parser.add_argument("--max-boxes", type=int, default=None, help="Maximum detections to keep.")
    parser.add_argument("--min-score", type=float, default=None, help="Minimum ranking score.")
    parser.add_argument("--iou", type=float, default=None, help="IoU threshold for NMS.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.width <= 0 or args.height <= 0:
        raise ValueError("--width and --height must be > 0")

    cfg = load_post_config(args.config) if args.config else PostConfig()
    overrides = {}
    if args.layout is not None:
        overrides["layout"] = LayoutMode(args.layout)
    if args.max_boxes is not None:
        overrides["max_num_boxes"] = int(args.max_boxes)
    if args.min_score is not None:
        overrides["min_score"] = float(args.min_score)
    if args.iou is not None:
        overrides["iou_threshold"] = float(args.iou)
    if overrides:
        cfg = replace(cfg, **overrides)

    class_table = load_class_table(args.metadata) if args.metadata else None
    post = DetectionPostprocessor(cfg, class_table=class_table)

    outputs = [np.load(path) for path in args.outputs]
    detections = post.process_arrays(outputs, image_size=(args.width, args.height))
    for det in detections:
        print(json.dumps(det.as_dict()))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
