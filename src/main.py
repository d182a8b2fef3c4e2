import argparse
import logging
import sys
from typing import List, Optional

from config import EngineConfig
from csv_io import write_snapshot
from payments_engine import PaymentsEngine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toy-payments",
        description="Replay a CSV of transactions and print the final client balances.",
    )
    parser.add_argument("input", help="CSV file with columns type, client, tx, amount")
    parser.add_argument("-o", "--output", help="write balances here instead of stdout")
    parser.add_argument("--log-level", help="logging level for diagnostics on stderr (default: WARNING)")
    parser.add_argument(
        "--no-stats",
        dest="report_stats",
        action="store_const",
        const=False,
        default=None,
        help="do not print the processing report to stderr",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = EngineConfig.from_env().with_overrides(log_level=args.log_level, report_stats=args.report_stats)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine(config)
    try:
        accounts = engine.process_file(args.input)
    except OSError as e:
        print(f"error: cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", newline="") as f:
            write_snapshot(accounts, f)
    else:
        write_snapshot(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
