#!/usr/bin/env python3
"""
Check Store Integrity

Scans the session database for sessions whose item count disagrees with
their clips, clip orderings with gaps or duplicates, and clips whose
session no longer exists.

Usage:
    python scripts/check_store_integrity.py                 # Dry run
    python scripts/check_store_integrity.py --apply         # Repair
    python scripts/check_store_integrity.py --config my.yaml
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from storage import StorageConfig, StorageError, create_storage

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def check_store(dry_run: bool = True, config_path: Optional[Path] = None) -> dict:
    """
    Verify (and optionally repair) the store.

    Args:
        dry_run: If True, only report what is wrong
        config_path: Optional StorageConfig YAML file

    Returns:
        The integrity report as a dict
    """
    logger.info("Starting store integrity check...")
    logger.info(f"Mode: {'DRY RUN (no changes)' if dry_run else 'APPLY (will repair)'}")

    config = StorageConfig(config_path)

    with create_storage(config=config) as storage:
        report = storage.verify_integrity() if dry_run else storage.repair_integrity()

    for issue in report.issues:
        logger.warning(str(issue))

    stats = report.to_dict()

    logger.info("=" * 60)
    logger.info("SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Sessions checked:     {report.sessions_checked}")
    logger.info(f"Items checked:        {report.items_checked}")
    logger.info(f"Issues found:         {len(report.issues)}")
    if dry_run and report.issues:
        logger.info("Run with --apply to repair these issues")
    elif report.repaired:
        logger.info("Repairs applied")
    logger.info("=" * 60)

    return stats


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Check (and repair) session/clip consistency in the store",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Repair the issues found (default is dry run)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="StorageConfig YAML file",
    )
    args = parser.parse_args()

    try:
        stats = check_store(dry_run=not args.apply, config_path=args.config)
    except StorageError as e:
        logger.error(f"Integrity check failed: {e}", exc_info=True)
        sys.exit(1)

    if stats["issues"] and not args.apply:
        sys.exit(2)


if __name__ == "__main__":
    main()
