"""
Main.py:
Handles CLI of the seed locator
"""

import argparse
import signal
import sys
from typing import List

from . import desc, name, short_desc, version
from .constants.constants import DEFAULT_STRATEGY, INDEX_EXTENSION
from .errors import LocatorError
from .models.locator import LocatorInput, LocatorOutput
from .seed.seeder import SeedStrategy
from .seedLocator.seedLocator import SeedLocator
from .timer.listener import ProgressListener
from .timer.progress import ProgressMonitor


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: '{value}'")
    return number


def index_file(value: str) -> str:
    if not value.endswith(INDEX_EXTENSION):
        raise argparse.ArgumentTypeError(f"index file must have extension '{INDEX_EXTENSION}': '{value}'")
    return value


class LocatorArgumentParser(argparse.ArgumentParser):
    # argument errors exit with 1, not argparse's 2
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = LocatorArgumentParser(prog=name, description=f"{short_desc}. {desc}")

    # Required arguments
    parser.add_argument('seq_file', metavar='SEQ_FILE', help='Sequence file, one sequence per line')
    parser.add_argument('-g', '--gcsa', required=True, type=index_file, metavar='GCSA2_FILE',
                        help='Index file')
    parser.add_argument('-l', '--seed-len', required=True, type=positive_int, metavar='INT',
                        help='Seed length')
    parser.add_argument('-o', '--output', required=True, metavar='OUTPUT',
                        help='Write positions where sequences are matched')

    # Optional arguments
    seeding = parser.add_mutually_exclusive_group()
    seeding.add_argument('-s', '--strategy', default=DEFAULT_STRATEGY,
                         choices=[s.value for s in SeedStrategy],
                         help=f'Seeding strategy [default: {DEFAULT_STRATEGY}]')
    seeding.add_argument('-d', '--distance', type=positive_int, metavar='INT',
                         help='Distance between seeds, instead of a seeding strategy')
    parser.add_argument('-m', '--memory', action='store_true', help='Track memory usage')
    parser.add_argument('--version', action='version', version=f'{name} {version}')

    return parser


def parse_args(argv: List[str] = None):
    return build_parser().parse_args(argv)


def main(argv: List[str] = None) -> int:
    args = parse_args(argv)

    inputData = LocatorInput(
        sequenceFile=args.seq_file,
        indexFile=args.gcsa,
        outputLocation=args.output,
        seedLength=args.seed_len,
        strategy=SeedStrategy(args.strategy),
        distance=args.distance,
        trackMemory=args.memory,
    )

    monitor : ProgressMonitor = ProgressMonitor()
    seedLocator : SeedLocator = SeedLocator(monitor=monitor)

    # kill -USR1 <pid> prints the progress of the locate phase
    with ProgressListener(monitor) as listener:
        if hasattr(signal, "SIGUSR1"):
            listener.install()
        try:
            output : LocatorOutput = seedLocator.locateSeeds(inputData)
        except LocatorError as e:
            print(f"{name}: error: {e}", file=sys.stderr)
            return 2

    print(f"Wrote {output.numberOfOccurrences} occurrences to '{output.outputLocation}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
