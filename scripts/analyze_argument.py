"""CLI to decompose an argument and print the laid-out graph as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from argmap.errors import ArgmapError
from argmap.pipeline import build_argument_map
from argmap.utils import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Break an argument into a layered premise graph")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Argument text to send to the model")
    source.add_argument("--file", help="Path to a file containing the argument text")
    source.add_argument(
        "--response-file",
        help="Path to a saved model response; skips the model call",
    )
    parser.add_argument(
        "--reject-cycles",
        action="store_true",
        default=None,
        help="Fail when the connections contain a cycle (default: ARGMAP_REJECT_CYCLES)",
    )
    return parser.parse_args()


def _read(path: str) -> str:
    target = Path(path).expanduser()
    if not target.exists():
        raise FileNotFoundError(f"{target} not found")
    return target.read_text(encoding="utf-8")


def main() -> int:
    configure_logging()
    args = parse_args()
    logger = logging.getLogger(__name__)

    if args.response_file:
        raw = _read(args.response_file)
        source_text = None
    else:
        from argmap.llm import request_analysis

        source_text = args.text if args.text is not None else _read(args.file)
        raw = None

    try:
        if raw is None:
            raw = request_analysis(source_text)
        argument_map = build_argument_map(raw, reject_cycles=args.reject_cycles)
    except (ArgmapError, ValueError) as exc:
        logger.error("Analysis failed: %s", exc)
        print(f"Failed to analyze the argument: {exc}", file=sys.stderr)
        return 1

    if source_text:
        argument_map.result.source_text = source_text
    logger.info(
        "Built argument map with %d premises and %d connections",
        len(argument_map.result.premises),
        len(argument_map.result.connections),
    )
    print(json.dumps(argument_map.to_payload(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
