from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from tolmatch import MatchSettings, SearchZone, TolmatchError, get_template_matches
from tolmatch.config import DEFAULT_OUTPUT_PATH, DEFAULT_PERCENTAGE, DEFAULT_TOLERANCE


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find tolerance-matched templates inside a source image.")
    parser.add_argument("source", type=Path, help="Image to search in.")
    parser.add_argument("templates", type=Path, help="Directory holding the template images.")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log timings and write an annotated copy of the source image.",
    )
    parser.add_argument(
        "--zone",
        type=int,
        nargs=4,
        metavar=("LEFT", "TOP", "WIDTH", "HEIGHT"),
        default=None,
        help="Restrict candidate origins to this rectangle of the source image.",
    )
    parser.add_argument(
        "--tolerance",
        type=int,
        default=DEFAULT_TOLERANCE,
        help="Default per-channel tolerance for templates without one in their name.",
    )
    parser.add_argument(
        "--percentage",
        type=int,
        default=DEFAULT_PERCENTAGE,
        help="Default mismatching-pixel percentage for templates without one in their name.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_PATH,
        help="Where the annotated image is written in debug mode.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of threads scoring candidate windows.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_arguments()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = MatchSettings(
            tolerance=args.tolerance,
            percentage=args.percentage,
            window_workers=args.workers,
            output_path=args.output,
        )
        zone = SearchZone(*args.zone) if args.zone else None
        output = get_template_matches(args.source, args.templates, debug=args.debug, zone=zone, settings=settings)
    except TolmatchError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if not args.debug:
        for index, result in enumerate(output.results):
            print(f"Template {index} ({result.name}) matches:")
            for x, y in result.origins:
                print(f"({x}, {y})")
    for failure in output.failures:
        print(f"skipped {failure.name}: {failure.error}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
