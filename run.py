#!/usr/bin/env python3
"""
Shopify B2B Pricing Enricher — Entry Point.

Reads product records from a JSON (or JSON Lines) file, looks up which B2B
catalogs each product is published to, prices the record's variant in each
of those catalogs, and saves the records with a b2b_pricing field attached.

The pipeline (managed by PricingOrchestrator) performs 3 steps:
  1. Load the input records
  2. Enrich each record in turn (catalog lookup, then one price query per catalog)
  3. Save enriched records and run metadata to a timestamped folder

Usage:
    python run.py                          # Enrich INPUT_FILE from .env
    python run.py --input records.jsonl    # Use a different input file
    python run.py --catalog 10             # Only price catalog 10
    python run.py --fail-fast              # Stop at the first failed record
    python run.py --debug                  # Verbose output
    python run.py --version                # Show version
    python run.py --env /path              # Use alternate .env file
"""

import sys
import argparse
import logging
from pathlib import Path

from b2b_pricing import PricingOrchestrator

# Read version from the repo-root VERSION file (e.g., "0.1.0").
VERSION_FILE = Path(__file__).resolve().parent / "VERSION"
VERSION = VERSION_FILE.read_text().strip() if VERSION_FILE.exists() else "unknown"


def main():
    """Parse CLI arguments and run the enrichment pipeline."""
    parser = argparse.ArgumentParser(
        description="Shopify B2B Pricing Enricher - Attach catalog prices to product records"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--input", "-i", help="Override INPUT_FILE")
    parser.add_argument("--catalog", "-c", help="Only price this catalog (ID or gid)")
    parser.add_argument("--fail-fast", action="store_true", help="Abort on the first failed record")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

    args = parser.parse_args()

    if args.version:
        print(f"shopify-b2b-pricing {VERSION}")
        sys.exit(0)

    # Surface requests/urllib3 connection logs in debug mode
    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s'
        )

    # Initialize the orchestrator (loads .env and builds internal config)
    orchestrator = PricingOrchestrator(env_file=args.env)

    # Apply CLI overrides on top of .env values
    if args.input:
        orchestrator.input_file = args.input
    if args.catalog:
        orchestrator.catalog_id = args.catalog
    if args.fail_fast:
        orchestrator.fail_fast = True
    if args.debug:
        orchestrator.debug = True

    print(f"\n{'='*60}")
    print(f"SHOPIFY B2B PRICING ENRICHER v{VERSION}")
    print("="*60)
    print(f"Store: {orchestrator.store_domain}")
    print(f"API Version: {orchestrator.api_version}")
    print(f"Catalogs: {orchestrator.catalog_id or 'All published'}")

    if not orchestrator.validate_config():
        sys.exit(1)

    # Cleanup old output folders based on retention policy
    if orchestrator.output_manager.retention_days > 0:
        deleted = orchestrator.output_manager.cleanup_old_folders(orchestrator.debug)
        if deleted > 0:
            print(f"Cleaned up {deleted} old output folder(s)")

    results = orchestrator.run()

    orchestrator.print_summary(results)

    if not results.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
