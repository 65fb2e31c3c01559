"""Main entry point for the harvester."""

import argparse
import asyncio
import dataclasses
import os
import sys

from .core.config import EMPTY_RUN_POLICIES, MODES, HarvesterConfig
from .core.harvester import CardHarvester
from .dynamic.browser_engine import PlaywrightAdapter, PlaywrightEngine
from .storage.output_guard import EXIT_FAILURE, OutputGuard


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Harvest the card catalog of the scshow calculator into a CSV',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  card-harvester                          # Per-card details (BASE_URL, OUT_FILE from env)
  card-harvester --mode catalog           # Card list only, deduplicated
  card-harvester --debug-limit 5 --headed # First 5 cards in a visible browser
        """
    )

    parser.add_argument(
        '--mode',
        choices=MODES,
        help='catalog: one pass over the card list; detail: select each card (default: HARVEST_MODE or detail)'
    )
    parser.add_argument(
        '--url',
        type=str,
        help='Target base URL (default: BASE_URL)'
    )
    parser.add_argument(
        '--output',
        type=str,
        help='Output CSV path (default: OUT_FILE or cards.csv)'
    )
    parser.add_argument(
        '--headed',
        action='store_true',
        help='Show the browser window'
    )
    parser.add_argument(
        '--max-candidates',
        type=int,
        help='Maximum candidates to process (default: MAX_CANDIDATES or 500)'
    )
    parser.add_argument(
        '--debug-limit',
        type=int,
        help='Only process the first N candidates'
    )
    parser.add_argument(
        '--empty-run-policy',
        choices=EMPTY_RUN_POLICIES,
        help='Exit status for a run with zero records (default: success)'
    )
    return parser


def apply_args(config: HarvesterConfig, args: argparse.Namespace) -> HarvesterConfig:
    """Return a copy of ``config`` with the command-line overrides applied."""
    overrides = {
        'mode': args.mode,
        'base_url': args.url,
        'output_path': args.output,
        'max_candidates': args.max_candidates,
        'debug_limit': args.debug_limit,
        'empty_run_policy': args.empty_run_policy,
    }
    changes = {name: value for name, value in overrides.items() if value is not None}
    if args.headed:
        changes['headless'] = False
    return dataclasses.replace(config, **changes)


async def run(config: HarvesterConfig) -> int:
    """Launch the browser, harvest, write the CSV. Returns the exit status."""
    engine = PlaywrightEngine(config)

    async def pipeline():
        await engine.initialize()
        print(f"[INFO] Navigating to: {config.base_url}")
        await engine.goto(config.base_url)
        harvester = CardHarvester(config, PlaywrightAdapter(engine.page))
        return await harvester.harvest()

    try:
        return await OutputGuard(config).run(pipeline)
    finally:
        await engine.cleanup()


def main(argv=None):
    """Main function to run the harvester."""
    args = build_parser().parse_args(argv)
    try:
        config = apply_args(HarvesterConfig.from_env(), args)
    except ValueError as e:
        print(f"✗ Config: {e}")
        fallback = HarvesterConfig(output_path=args.output or os.getenv("OUT_FILE") or "cards.csv")
        OutputGuard(fallback).write_fallback()
        sys.exit(EXIT_FAILURE)

    problems = config.validate()
    if problems:
        for problem in problems:
            print(f"✗ Config: {problem}")
        OutputGuard(config).write_fallback()
        sys.exit(EXIT_FAILURE)

    sys.exit(asyncio.run(run(config)))


if __name__ == "__main__":
    main()
