"""Quality command for facemetric CLI.

Scores image files for brightness, contrast and sharpness and prints the
capture hints for each.
"""

import json

import cv2

from facemetric.capture.quality import analyze_image_quality, quality_feedback
from facemetric.cli.utils import BOLD, DIM, RESET


def run_quality(args):
    """Score each image; exit 1 if any is unreadable or below the acceptable score."""
    results = {}
    failed = False
    for path in args.images:
        image = cv2.imread(path, cv2.IMREAD_COLOR)
        if image is None:
            print(f"Cannot read image: {path}")
            failed = True
            continue
        quality = analyze_image_quality(image)
        failed = failed or not quality.is_acceptable
        results[path] = (quality, quality_feedback(quality))

    if args.json:
        payload = {
            path: {**quality.to_dict(), "feedback": [f.message for f in feedback]}
            for path, (quality, feedback) in results.items()
        }
        print(json.dumps(payload, indent=2))
        return 1 if failed else 0

    for path, (quality, feedback) in results.items():
        print(f"{BOLD}{path}{RESET}  {quality.label} ({quality.overall:.0f})")
        print(
            f"  {DIM}brightness {quality.brightness:.0f}  contrast {quality.contrast:.0f}  "
            f"sharpness {quality.sharpness:.0f}{RESET}"
        )
        for item in feedback:
            print(f"  - {item.message}")
    return 1 if failed else 0
