"""
Random record generator.

Writes records that pass the default validation rules to a CSV or XML
file, ready for the ``import`` command::

    filecabinet-generator --output-type csv --output records.csv --records-amount 100 --start-id 1
"""
import argparse
import random
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Iterator, Optional, Sequence

from colorama import Fore, Style, just_fix_windows_console

from .core.record import Record
from .core.snapshot import ServiceSnapshot

FIRST_NAMES = (
    "Emma", "Olivia", "Sophia", "Ava", "Isabella", "Mia", "Abigail", "Emily", "Charlotte",
    "Harper", "Madison", "Amelia", "Elizabeth", "Sofia", "Evelyn", "Avery", "Chloe", "Ella",
    "Grace", "Victoria", "Michael", "Christopher", "Matthew", "Joshua", "David", "James",
    "Daniel", "Robert", "John", "Joseph", "Jason", "Justin", "Andrew", "Ryan", "William",
    "Brian", "Brandon", "Jonathan", "Nicholas", "Anthony", "Eric", "Adam", "Kevin", "Thomas",
    "Steven", "Timothy", "Richard", "Jeremy", "Jeffrey", "Kyle",
)

LAST_NAMES = (
    "Smith", "Johnson", "Williams", "Jones", "Brown", "Davis", "Miller", "Wilson", "Moore",
    "Taylor", "Anderson", "Thomas", "Jackson", "White", "Harris", "Martin", "Thompson",
    "Garcia", "Martinez", "Robinson", "Clark", "Rodriguez", "Lewis", "Lee", "Walker", "Hall",
    "Allen", "Young", "Hernandez", "King", "Wright", "Lopez", "Hill", "Scott", "Green",
    "Adams", "Baker", "Gonzalez", "Nelson", "Carter", "Mitchell", "Perez", "Roberts",
    "Turner", "Phillips", "Campbell", "Parker", "Evans", "Edwards", "Collins",
)

EARLIEST_BIRTH_DATE = date(1950, 1, 1)


def generate_records(count: int, start_id: int,
                     rng: Optional[random.Random] = None) -> Iterator[Record]:
    """Yield ``count`` random records with consecutive ids from ``start_id``."""
    rng = rng or random.Random()
    days = (date.today() - EARLIEST_BIRTH_DATE).days

    for record_id in range(start_id, start_id + count):
        yield Record(
            id=record_id,
            first_name=rng.choice(FIRST_NAMES),
            last_name=rng.choice(LAST_NAMES),
            date_of_birth=EARLIEST_BIRTH_DATE + timedelta(days=rng.randrange(days)),
            workplace_number=rng.randint(1, 999),
            salary=Decimal(rng.randint(300, 5000)),
            department=chr(rng.randint(ord("A"), ord("Z"))),
        )


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"{text} is not a positive integer")
    return value


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="filecabinet-generator",
                                     description="Generate random file cabinet records")
    parser.add_argument("-t", "--output-type", type=str.lower, choices=["csv", "xml"],
                        required=True, help="Output format")
    parser.add_argument("-o", "--output", required=True, help="Output file")
    parser.add_argument("-a", "--records-amount", type=_positive_int, required=True,
                        help="Number of records to generate")
    parser.add_argument("-i", "--start-id", type=_positive_int, default=1,
                        help="Id of the first record (default: 1)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    return parser


def write_records(output_type: str, output: str, count: int, start_id: int,
                  seed: Optional[int] = None) -> int:
    """
    Generate records and write them to ``output``.

    Raises:
        FileNotFoundError: If the output directory does not exist
    """
    path = Path(output)
    if not path.parent.exists():
        raise FileNotFoundError(f"No such directory: {path.parent}")

    snapshot = ServiceSnapshot(generate_records(count, start_id, random.Random(seed)))
    with open(path, "w", encoding="utf-8", newline="") as writer:
        if output_type == "csv":
            snapshot.save_to_csv(writer)
        else:
            snapshot.save_to_xml(writer)
    return len(snapshot)


def main(argv: Optional[Sequence[str]] = None) -> int:
    just_fix_windows_console()
    args = create_parser().parse_args(argv)
    try:
        count = write_records(args.output_type, args.output, args.records_amount,
                              args.start_id, args.seed)
    except OSError as e:
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} {e}")
        return 1

    print(f"{Fore.GREEN}[OK]{Style.RESET_ALL} {count} records were written to {args.output}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
