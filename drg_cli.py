#!/usr/bin/env python
"""
Command-line interface for DRG separation.

Quick tool for separating single DRG descriptions or a column of a CSV file.
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from drg_tools import DRGSeparator

logger = logging.getLogger(__name__)


def _build_separator(args) -> DRGSeparator:
    pattern_file = getattr(args, 'patterns', None)
    try:
        return DRGSeparator(pattern_file=Path(pattern_file) if pattern_file else None)
    except (FileNotFoundError, ValueError) as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        sys.exit(1)


def split_description(args):
    """Separate a single DRG description."""
    separator = _build_separator(args)
    row = separator.split(args.description, remove_age=args.remove_age)

    print("\n" + "=" * 60)
    print("DRG SEPARATION RESULT")
    print("=" * 60)
    print(f"DRG:          {row.msdrg}")
    print(f"Base DRG:     {row.msdrg_base}")
    print(f"Complication: {row.msdrg_complication or 'None recognized'}")
    print("=" * 60)
    print()


def separate_batch(args):
    """Separate a column of DRG descriptions in a CSV file."""
    separator = _build_separator(args)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"\nERROR: Input file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    try:
        # Empty cells are the only missing values; "NA" is left as text
        df = pd.read_csv(input_path, dtype=str, keep_default_na=False, na_values=[""])
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        print(f"\nERROR: Unable to read CSV file {input_path}: {e}", file=sys.stderr)
        sys.exit(1)
    logger.info(f"Loaded {len(df)} rows from {input_path}")

    try:
        result = separator.separate_column(df, args.column, remove_age=args.remove_age, prefix=args.prefix)
    except KeyError as e:
        print(f"\nERROR: {e.args[0]}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        sys.exit(1)

    complication_col = f"{args.prefix or args.column}_complication"
    unsupported = separator.find_unsupported_codings(result[args.column], result[complication_col])
    if len(unsupported) > 0:
        logger.warning(
            f"{int(unsupported.sum())} descriptions use complication codings that are not recognized; "
            f"add them to a pattern file: {', '.join(unsupported.index[:10])}"
        )

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        result.to_csv(output_path, index=False)
        logger.info(f"Results written to {output_path}")
    else:
        result.to_csv(sys.stdout, index=False)

    logger.info(
        f"Processed {len(result)} descriptions, "
        f"{int(result[complication_col].notna().sum())} with a complication qualifier"
    )


def show_patterns(args):
    """Print the complication pattern table."""
    separator = _build_separator(args)
    table = separator.pattern_table()

    print("\n" + "=" * 60)
    print("COMPLICATION PATTERNS (in match order)")
    print("=" * 60)
    print(f"{'Suffix':<20} {'Label':<30}")
    print("-" * 60)
    for _, rule in table.iterrows():
        print(f"{rule['suffix']:<20} {rule['label']:<30}")
    print("=" * 60)
    print()


def main(argv=None):
    """Main CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(
        description="MS-DRG Description Separation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Separate one description
  %(prog)s split "ACUTE LEUKEMIA W/O MAJOR O.R. PROCEDURE W MCC"

  # Remove an age qualifier as well
  %(prog)s split "SIMPLE PNEUMONIA & PLEURISY AGE 0-17" --remove-age

  # Separate a CSV column
  %(prog)s batch encounters.csv --column drg_description --output separated.csv

  # Show the pattern table, including extra rules
  %(prog)s patterns --patterns extra_patterns.json
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Split command
    split_parser = subparsers.add_parser('split', help='Separate a single DRG description')
    split_parser.add_argument('description', help='DRG description text')
    split_parser.add_argument('--remove-age', action='store_true', help='Strip trailing age qualifiers')
    split_parser.add_argument('--patterns', help='JSON file with extra complication patterns')
    split_parser.set_defaults(func=split_description)

    # Batch command
    batch_parser = subparsers.add_parser('batch', help='Separate a column of a CSV file')
    batch_parser.add_argument('input', help='Input CSV file')
    batch_parser.add_argument('--column', required=True, help='Column holding DRG descriptions')
    batch_parser.add_argument('--output', help='Output CSV file (default: stdout)')
    batch_parser.add_argument('--prefix', help='Prefix for the new columns (default: column name)')
    batch_parser.add_argument('--remove-age', action='store_true', help='Strip trailing age qualifiers')
    batch_parser.add_argument('--patterns', help='JSON file with extra complication patterns')
    batch_parser.set_defaults(func=separate_batch)

    # Patterns command
    patterns_parser = subparsers.add_parser('patterns', help='Show the complication pattern table')
    patterns_parser.add_argument('--patterns', help='JSON file with extra complication patterns')
    patterns_parser.set_defaults(func=show_patterns)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == '__main__':
    main()
