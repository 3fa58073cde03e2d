"""
Main CLI entry point for BGG Library package.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..backfill import BACKFILL_FIELDS, BackfillConfig, BackfillOrchestrator, get_backfill_field
from ..config import DATABASE_PATH, MAX_RETRIES, RATE_LIMIT_DELAY, BOX_ART_EXTRACTION_PROMPT
from ..database import CatalogDatabase
from ..enrichment import EnrichmentClient, analyze_game_image
from ..error_handling import ConfigurationError
from ..logging_config import setup_logging
from ..models import BackfillSummary

logger = logging.getLogger(__name__)


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Board game catalog enrichment tools")
    parser.add_argument("--db", type=Path, default=DATABASE_PATH, help="Catalog database path")
    parser.add_argument("--log-file", type=str, default=None, help="Custom log file name or absolute path")
    subparsers = parser.add_subparsers(dest="command", required=True)

    backfill = subparsers.add_parser("backfill", help="Fill a missing field across the catalog")
    backfill.add_argument("--field", default="suggested_age", choices=sorted(BACKFILL_FIELDS),
                          help="Catalog field to fill (default: suggested_age)")
    backfill.add_argument("--limit", type=non_negative_int, default=None, help="Max number of games to process")
    backfill.add_argument("--delay", type=float, default=RATE_LIMIT_DELAY,
                          help="Seconds to wait between service requests")
    backfill.add_argument("--max-retries", type=int, default=MAX_RETRIES,
                          help="Extra attempts after a failed service call")
    backfill.add_argument("--list-missing", action="store_true",
                          help="Only list games missing the field and exit")

    analyze = subparsers.add_parser("analyze-image", help="Identify games from a box art photo")
    analyze.add_argument("image", type=Path, help="Image file to analyze")
    analyze.add_argument("--mime-type", default="image/jpeg", help="MIME type of the image")
    analyze.add_argument("--save", action="store_true", help="Add identified games to the catalog")

    subparsers.add_parser("stats", help="Show catalog enrichment coverage")
    return parser


def print_summary(summary: BackfillSummary) -> None:
    print("\n" + "=" * 60)
    print(f"BACKFILL RESULTS: {summary.field}")
    print("=" * 60)
    for result in summary.results:
        if result.updated:
            status = "✓ UPDATED"
            detail = f"Value: {result.value}"
        elif result.skipped:
            status = "- SKIPPED"
            detail = result.error_message or "Value unknown"
        else:
            status = "✗ FAILED"
            detail = f"Error: {result.error_message}"
        print(f"{status} | {result.title}")
        print(f"  └─ {detail}")

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"Total games processed: {summary.total}")
    print(f"Successfully updated:  {summary.updated}")
    print(f"Skipped (unknown):     {summary.skipped}")
    print(f"Failed:                {summary.failed}")
    print("=" * 60)


def run_backfill(args: argparse.Namespace, db: CatalogDatabase) -> int:
    field = get_backfill_field(args.field)

    if args.list_missing:
        items = db.list_missing(field.name)
        print("\n" + "=" * 60)
        print(f"GAMES MISSING {field.name.upper()}")
        print("=" * 60)
        if not items:
            print("No games are missing this field.")
        else:
            for item in items:
                print(f"- {item.title}")
            print(f"\nTotal missing: {len(items)}")
        return 0

    client = EnrichmentClient(prompt_template=field.prompt_template)
    config = BackfillConfig(rate_limit_delay=args.delay, max_retries=args.max_retries, limit=args.limit)
    orchestrator = BackfillOrchestrator(field, client=client, source=db, sink=db, config=config)
    summary = orchestrator.run()
    print_summary(summary)
    # Non-zero only when some games still need attention
    return 1 if summary.failed > 0 else 0


def run_analyze_image(args: argparse.Namespace, db: CatalogDatabase) -> int:
    try:
        image_bytes = args.image.read_bytes()
    except OSError as e:
        logger.error(f"Could not read image {args.image}: {e}")
        print(f"✗ Could not read image: {args.image}")
        return 1
    client = EnrichmentClient(prompt_template=BOX_ART_EXTRACTION_PROMPT)
    result = analyze_game_image(image_bytes, args.mime_type, client=client)
    if not result.success:
        print(f"✗ {result.error}")
        return 1

    print("\n" + "=" * 60)
    print(f"IDENTIFIED GAMES: {result.game_count}")
    print("=" * 60)
    for game in result.games:
        players = f"{game.min_players or '?'}-{game.max_players or '?'} players"
        print(f"- {game.title or 'Unknown title'} ({game.confidence}) | {players}")
        if args.save:
            if game.title:
                game_id = db.add_game(game)
                print(f"  └─ Saved to catalog as #{game_id}")
            else:
                print("  └─ Not saved: title could not be identified")
    return 0


def run_stats(db: CatalogDatabase) -> int:
    stats = db.get_statistics()
    total = stats.get('total_games_in_db', 0)
    print("\n" + "=" * 60)
    print("CATALOG ENRICHMENT COVERAGE")
    print("=" * 60)
    print(f"Total games in database: {total}")
    for name, missing in stats.get('missing', {}).items():
        coverage = ((total - missing) / total * 100) if total > 0 else 0
        print(f"{name}: {missing} missing ({coverage:.1f}% filled)")
    print("=" * 60)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Build a default per-run log filename when not provided
    if args.log_file:
        log_file = args.log_file
    else:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = f"run_{ts}_{args.command}.log"
    setup_logging(log_file)

    try:
        db = CatalogDatabase(args.db)
        if args.command == "backfill":
            return run_backfill(args, db)
        if args.command == "analyze-image":
            return run_analyze_image(args, db)
        return run_stats(db)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except KeyboardInterrupt:
        print("\nProcess interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error in main: {e}")
        raise


if __name__ == "__main__":
    sys.exit(main())
