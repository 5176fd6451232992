"""Print the Markdown recap and narrative for a demo variant or two JSON files.

Examples:

    python -m scripts.print_recap --variant B
    python -m scripts.print_recap --kpi data/kpi.json --spend data/spend.json
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path

from pulsewrap import datasets, parsing, recap


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--variant", default=datasets.DEFAULT_VARIANT, help="Demo dataset variant (A or B)")
    parser.add_argument("--kpi", type=Path, help="Path to a daily KPI JSON file")
    parser.add_argument("--spend", type=Path, help="Path to a category spend JSON file")
    parser.add_argument("--name", help="Dataset name shown in the report")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Generation date for the report (YYYY-MM-DD, defaults to today)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("PULSEWRAP_LOG_LEVEL", "WARNING"),
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.kpi is not None:
            spend_text = args.spend.read_text(encoding="utf-8") if args.spend else "[]"
            dataset = parsing.parse_dataset(args.kpi.read_text(encoding="utf-8"), spend_text)
            name = args.name or args.kpi.name
        else:
            dataset = datasets.load_dataset(args.variant)
            name = args.name or f"Demo {args.variant}"
    except (parsing.DatasetError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    result = recap.build_recap(name, dataset, generation_date=args.date)
    print(result.markdown)
    print(result.narrative)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
