"""Command-line interface for decoding RLE pattern files."""

import argparse
import json
import logging
import sys
from typing import Optional

from ..core.errors import RLEError
from ..core.parser import Parser
from ..core.pattern import Pattern


class CLIPatternDecoder:
    """Reads RLE text from a file or stdin and decodes it."""

    def __init__(self, verbose: bool = False) -> None:
        """Initialize CLI decoder.

        Args:
            verbose: Log a summary of each decoded pattern
        """
        self.verbose = verbose
        self.logger = logging.getLogger("orle.cli")
        self.parser = Parser(logger=self.logger)

    def read_text(self, source: Optional[str]) -> str:
        """Read RLE text.

        Args:
            source: File path, or None / '-' for stdin

        Returns:
            File contents

        Raises:
            OSError: If the file can't be read
        """
        if source is None or source == "-":
            return sys.stdin.read()

        with open(source, "r", encoding="utf-8") as f:
            return f.read()

    def decode(self, source: Optional[str]) -> Pattern:
        """Read and decode a pattern.

        Args:
            source: File path, or None / '-' for stdin

        Returns:
            Decoded Pattern
        """
        text = self.read_text(source)
        pattern = self.parser.parse(text)

        if self.verbose:
            self.logger.info(f"Decoded {pattern.width}x{pattern.height} pattern from {source or 'stdin'}")

        return pattern


def format_pattern(pattern: Pattern, output_format: str, alive: str = "*", dead: str = ".") -> str:
    """Format a decoded pattern for display.

    Args:
        pattern: Decoded pattern
        output_format: One of 'grid', 'rows' or 'json'
        alive: Glyph for living cells in grid output
        dead: Glyph for dead cells in grid output

    Returns:
        Formatted text
    """
    if output_format == "grid":
        return pattern.render(alive, dead)
    elif output_format == "rows":
        return "\n".join(" ".join(str(cell) for cell in row) for row in pattern)
    elif output_format == "json":
        return json.dumps(pattern.to_dict())
    else:
        raise ValueError(f"Unknown output format '{output_format}'")


def print_info(pattern: Pattern) -> None:
    """Print a short summary of a pattern.

    Args:
        pattern: Decoded pattern
    """
    if pattern.name:
        print(f"Name: {pattern.name}")
    print(f"Size: {pattern.width}x{pattern.height}")
    print(f"Population: {pattern.population} cells")
    if "rule" in pattern.metadata:
        print(f"Rule: {pattern.metadata['rule']}")

    bbox = pattern.get_bounding_box()
    if bbox:
        print(f"Bounding box: ({bbox[0]}, {bbox[1]}) to ({bbox[2]}, {bbox[3]})")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Decode run-length encoded (RLE) cellular automaton patterns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Draw a pattern file
  orle-cli glider.rle

  # Read from stdin and print rows of 0/1 values
  cat gosper.rle | orle-cli --format rows

  # Use custom glyphs
  orle-cli glider.rle --alive '#' --dead ' '

  # Show size, population and rule only
  orle-cli glider.rle --info
        """,
    )

    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="RLE file to decode, '-' for stdin (default: stdin)",
    )

    parser.add_argument(
        "-f",
        "--format",
        type=str,
        default="grid",
        choices=["grid", "rows", "json"],
        help="Output format (default: grid)",
    )

    parser.add_argument("--alive", type=str, default="*", help="Glyph for living cells (default: '*')")

    parser.add_argument("--dead", type=str, default=".", help="Glyph for dead cells (default: '.')")

    parser.add_argument(
        "-i",
        "--info",
        action="store_true",
        help="Print pattern summary instead of the cells",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log parser diagnostics to stderr",
    )

    return parser


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if len(args.alive) != 1:
        errors.append("Alive glyph must be a single character")

    if len(args.dead) != 1:
        errors.append("Dead glyph must be a single character")

    if args.alive == args.dead:
        errors.append("Alive and dead glyphs must differ")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def main(argv: Optional[list] = None) -> int:
    """Main entry point for CLI interface.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not validate_args(args):
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(message)s")

    cli = CLIPatternDecoder(verbose=args.verbose)

    try:
        pattern = cli.decode(args.file)

        if args.info:
            print_info(pattern)
        else:
            print(format_pattern(pattern, args.format, args.alive, args.dead))

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    except (RLEError, OSError) as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
