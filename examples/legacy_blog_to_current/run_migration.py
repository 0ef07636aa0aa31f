#!/usr/bin/env python3
"""
Example: Legacy blog instance to current instance

Previews the migration with a dry run, then (with --live) performs it and
runs a second dry run to confirm nothing is left to copy.

Usage:
    # Dry run only
    python run_migration.py

    # Dry run, live run, verification
    python run_migration.py --live

    # Different legacy instance
    python run_migration.py --source-instance 12345_old_blog

Requires NCB_API_KEY and NCB_INSTANCE in the environment.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from postsync.models.migration import MigrationConfig, MigrationOptions
from postsync.orchestrator import MigrationError, MigrationOrchestrator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('migration.log')
    ]
)
logger = logging.getLogger(__name__)


def print_result(label: str, result) -> None:
    """Print a short summary of a run."""
    print(f"\n--- {label} ---")
    print(json.dumps({k: v for k, v in result.to_dict().items() if k != "errors"}, indent=2))
    if result.errors:
        print(f"{len(result.errors)} rows rejected:")
        for error in result.errors:
            print(f"  {error.error}: {error.payload.get('slug') or '(no slug)'}")


def main():
    parser = argparse.ArgumentParser(description="Migrate legacy blog posts")
    parser.add_argument("--live", action="store_true", help="Create posts at the target")
    parser.add_argument("--source-instance", help="Legacy instance to read from")
    args = parser.parse_args()

    config = MigrationConfig.from_env()
    orchestrator = MigrationOrchestrator(config)

    try:
        preview = orchestrator.run(MigrationOptions(dry_run=True, source_instance=args.source_instance))
        print_result("Dry run", preview)

        if not args.live:
            print("\nRe-run with --live to create these posts.")
            return 0

        created = orchestrator.run(MigrationOptions(dry_run=False, source_instance=args.source_instance))
        print_result("Live run", created)

        # A second pass should find every post already present
        verify = orchestrator.run(MigrationOptions(dry_run=True, source_instance=args.source_instance))
        print_result("Verification", verify)
        if verify.created_count:
            logger.warning(f"{verify.created_count} posts still missing at the target")
            return 1

    except MigrationError as e:
        logger.error(f"Migration failed: {e}")
        return 1
    finally:
        orchestrator.gateway.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
