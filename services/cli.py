import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from core.config import get_app_config
from core.errors import TopsisError
from core.logging_config import setup_logging
from services.email_service import EmailError, EmailService
from services.evaluation_service import EvaluationService
from services.table_reader import TableReadError, read_table

logger = logging.getLogger(__name__)


USAGE = "topsis-rank INPUT WEIGHTS IMPACTS OUTPUT [--email ADDRESS] [--log-level LEVEL]"

POSITIONALS = ("input", "weights", "impacts", "output")


def build_parser() -> argparse.ArgumentParser:
    # the four positionals are taken from the leftovers of parse_known_args:
    # an impacts list such as "-,+" would otherwise be read as an option
    parser = argparse.ArgumentParser(
        prog="topsis-rank",
        usage=USAGE,
        description="Rank the alternatives of a CSV/XLSX table with TOPSIS.",
        epilog=(
            "INPUT is a CSV or .xlsx file whose first column labels the alternatives. "
            'WEIGHTS and IMPACTS are comma-separated, e.g. "1,1,2" and "-,+,+". '
            "OUTPUT is the CSV file the ranking is written to."
        ),
    )
    parser.add_argument("--email", help="also send the ranking to this address")
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args, rest = parser.parse_known_args(argv)
    if len(rest) != len(POSITIONALS):
        parser.error(f"expected {len(POSITIONALS)} arguments (INPUT WEIGHTS IMPACTS OUTPUT), got {len(rest)}: {' '.join(rest)}")
    for name, value in zip(POSITIONALS, rest):
        setattr(args, name, value)
    args.input = Path(args.input)
    args.output = Path(args.output)
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    app_cfg = get_app_config()
    setup_logging(level=args.log_level or app_cfg.log_level, environment=app_cfg.environment)

    try:
        table = read_table(args.input)
        outcome = EvaluationService().run(table, args.weights, args.impacts, source_name=args.input.name)
    except FileNotFoundError:
        print(f"Error: file not found: {args.input}", file=sys.stderr)
        return 1
    except (TableReadError, TopsisError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    records = outcome.records
    pd.DataFrame(records).to_csv(args.output, index=False)
    print(f"Wrote {len(records)} ranked row(s) to {args.output}")

    if args.email:
        try:
            EmailService().send_results(args.email, records)
        except EmailError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Sent results to {args.email}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
