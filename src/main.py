import csv
import sys
import logging
from typing import List, Optional

from config import load_settings
from payments_engine import PaymentsEngine
from report import write_report

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        return 1

    try:
        configure_logging()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    filepath = args[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Unable to read {filepath}: {e}")
        return 2

    write_report(accounts.values(), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
