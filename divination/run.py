"""
CLI wrapper for compute_reading().

Usage:
    python -m divination.run --type bazi --name NAME --birth-date YYYY-MM-DD \
        --birth-time HH:MM --gender GENDER [--lunar] [--question TEXT] [--verbose]
"""

import argparse
import json
import logging
import sys

from divination.birth import BirthEvent, parse_birth_time
from divination.calendar import OutOfRangeCalendarError
from divination.chart import DivinationType, compute_reading


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute a BaZi or Qimen Dunjia reading.")
    parser.add_argument("--type", dest="kind", default=DivinationType.BAZI.value,
                        choices=[t.value for t in DivinationType])
    parser.add_argument("--name", default="")
    parser.add_argument("--birth-date", required=True, dest="birth_date",
                        help="YYYY-MM-DD (lunar numbers when --lunar is given)")
    parser.add_argument("--birth-time", default="00:00", dest="birth_time", help="HH:MM")
    parser.add_argument("--gender", required=True, choices=["male", "female"])
    parser.add_argument("--lunar", action="store_true", dest="is_lunar")
    parser.add_argument("--question", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        year, month, day = map(int, args.birth_date.split("-"))
        hour, minute = parse_birth_time(args.birth_time)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    birth = BirthEvent(
        name=args.name,
        gender=args.gender,
        birth_year=year,
        birth_month=month,
        birth_day=day,
        birth_hour=hour,
        birth_minute=minute,
        is_lunar=args.is_lunar,
        question=args.question,
    )

    try:
        result = compute_reading(args.kind, birth)
    except OutOfRangeCalendarError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
