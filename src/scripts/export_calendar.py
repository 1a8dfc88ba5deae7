#!/usr/bin/env python3
"""
Export the property's reservations to an .ics backup file.

Usage:
    uv run python src/scripts/export_calendar.py
    uv run python src/scripts/export_calendar.py --output backups/
"""

import argparse
import sys
import traceback
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import EXPORT_FILENAME, OUTPUT_DIR
from services.feed import FeedError, load_ranges
from services.ical import generate_ics, write_ics


def main(output_dir: Path) -> int:
    """Main entry point."""
    try:
        result = load_ranges()
    except FeedError as e:
        print(f"\nError: {e}")
        return 1

    if result.from_cache:
        print(f"Feed unreachable, exporting cached data from {result.cached_at}")
    print(f"Loaded {len(result.ranges)} range(s) from {result.source_url}")

    try:
        output_path = write_ics(output_dir / EXPORT_FILENAME, generate_ics(result.ranges))
    except OSError as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        return 1

    print(f"Saved calendar backup to: {output_path}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Export reservations as an iCal backup")
    parser.add_argument(
        "--output",
        default=str(OUTPUT_DIR),
        help=f"Output directory for {EXPORT_FILENAME}. Defaults to {OUTPUT_DIR}.",
    )
    args = parser.parse_args()

    sys.exit(main(Path(args.output)))
