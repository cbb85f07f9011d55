#!/usr/bin/env python3
"""
Run the Compensatr project selection pipeline.

This script orchestrates:
1. Loading project records from a JSON file
2. Validating and enriching them
3. Searching for the best selection under the budget and constraints
4. Writing the purchase plan and CO2 report as JSON
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from compensatr.common import load_defaults
from compensatr.config import CompensatrConfig
from compensatr.pipeline import run_pipeline


def build_parser() -> argparse.ArgumentParser:
    """Command line interface with defaults taken from the config file."""
    defaults = load_defaults()
    parser = argparse.ArgumentParser(
        description="Select carbon offset projects within a budget and report on CO2 capture"
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        required=True,
        help="Source file of projects",
    )
    parser.add_argument(
        "-t",
        "--target",
        type=Path,
        default=Path(defaults["target"]),
        help=f"Target file where result is stored, defaults to {defaults['target']}",
    )
    parser.add_argument(
        "-m",
        "--money",
        type=float,
        required=True,
        help="Amount of money to be used",
    )
    parser.add_argument(
        "--target_years",
        type=int,
        default=defaults["target_years"],
        help="Target years for CO2 report, defaults to %(default)s",
    )
    parser.add_argument(
        "-c",
        "--min_continents",
        type=int,
        default=defaults["min_continents"],
        help="Minimum number of continents where projects should be distributed, defaults to %(default)s",
    )
    for term in ("short", "medium", "long"):
        option = f"min_{term}_term_percent"
        parser.add_argument(
            f"--{option}",
            type=float,
            default=defaults[option],
            help=f"Minimum percentage of money spent on {term} term projects, defaults to %(default)s",
        )
    parser.add_argument(
        "--iterations",
        type=int,
        default=defaults["iterations"],
        help="Number of random selections to try, defaults to %(default)s",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random search, for reproducible runs",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Stop searching after this many seconds and keep the best selection so far",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=defaults["workers"],
        help="Number of threads sharing the search iterations, defaults to %(default)s",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print every new best selection found during the search",
    )
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = CompensatrConfig(
            money=args.money,
            min_continents=args.min_continents,
            min_short_term_percent=args.min_short_term_percent,
            min_medium_term_percent=args.min_medium_term_percent,
            min_long_term_percent=args.min_long_term_percent,
            target_years=args.target_years,
            iterations=args.iterations,
            seed=args.seed,
            timeout=args.timeout,
            workers=args.workers,
            verbose=args.verbose,
        )
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 1

    # Run the pipeline
    try:
        result = run_pipeline(
            projects_path=args.file,
            config=config,
            output_path=args.target,
        )

        # Print summary
        print("\n" + "=" * 60)
        print("Output Summary")
        print("=" * 60)
        plan = [row for row in result["purchase_plan"] if row]
        print(f"\nPurchase plan ({len(plan):,} projects):")
        for row in plan:
            print(f"  - {row['project_id']}: {row['num_units']} units for {row['price']}")

        print("\nCO2 report:")
        for row in result["co2_report"]:
            if row:
                print(f"  - {row['year']}: {row['co2_captured']}")

        print(f"\nOutput file saved to: {args.target.absolute()}")

        return 0

    except Exception as e:
        print(f"ERROR: Pipeline failed: {e}")
        import traceback

        traceback.print_exc()
        return 1


if __name__ == "__main__":
    exit(main())
