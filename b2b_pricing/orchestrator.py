"""
Pricing Orchestrator — Runs the enricher over a file of product records.

This plays the part of the host pipeline: it feeds records to
PricingEnricher one at a time, in order, and collects the results.

  Step 1: LOAD RECORDS
      Reads INPUT_FILE, either a JSON array of records or JSON Lines
      (one record per line).

  Step 2: ENRICH
      Each record goes through the transform(record, helper) hook, with the
      access token exposed as the "SHOPIFY" secret. PricingEnricher.enrich()
      resolves its catalogs and prices and attaches b2b_pricing. A record
      that fails (RemoteError, ResolutionError, network error) is reported
      and skipped, or aborts the whole run when FAIL_FAST is enabled.

  Step 3: SAVE OUTPUT
      Writes enriched_records.json into a timestamped output folder.

Run metadata (counts, failures, timestamps) is always written to
enrichment_results.json once an output folder exists.

Configuration:
    Loaded from environment variables (typically via .env file).
    Required: SHOPIFY_STORE_DOMAIN, SHOPIFY_ACCESS_TOKEN.
    See config/settings.py for defaults.

Typical usage:
    orchestrator = PricingOrchestrator(env_file="./.env")
    if orchestrator.validate_config():
        results = orchestrator.run()
        orchestrator.print_summary(results)
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List

import requests
from dotenv import load_dotenv

from .enrichment import PricingEnricher, PRICING_FIELD, SECRET_NAME, make_transform
from .errors import RemoteError, ResolutionError
from .output_manager import OutputManager
from .shopify_client import ShopifyGraphQLClient

from config import DEFAULT_SETTINGS


RECORD_ERRORS = (RemoteError, ResolutionError, requests.RequestException)


def _env_flag(name: str) -> bool:
    return os.getenv(name, str(DEFAULT_SETTINGS[name])).lower() == "true"


def load_records(path: str) -> List[Dict[str, Any]]:
    """Read records from a JSON array file or a JSON Lines file.

    Raises:
        ValueError: If the content is neither, or a record is not an object.
    """
    text = Path(path).read_text()
    stripped = text.lstrip()

    if stripped.startswith("["):
        records = json.loads(text)
    else:
        records = [json.loads(line) for line in text.splitlines() if line.strip()]

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Record {index} in {path} is not a JSON object")
    return records


class PricingOrchestrator:
    """Orchestrates a file-driven B2B pricing enrichment run.

    Attributes:
        store_domain: Shopify store host (e.g., "acme.myshopify.com").
        access_token: Admin API access token.
        api_version: Admin API version (default: "2023-10").
        catalog_id: If set, only this catalog is priced.
        input_file: Path to the records file.
        save_json: Whether to write enriched records to disk.
        fail_fast: Whether the first failed record aborts the run.
        request_timeout: Per-request timeout in seconds.
        debug: Whether to enable verbose output.
        output_manager: Handles timestamped output directories and retention cleanup.
    """

    def __init__(self, env_file: str = "./.env"):
        """Initialize the orchestrator by loading configuration from environment.

        Args:
            env_file: Path to a .env file. If the file exists, it is loaded via
                      python-dotenv. Otherwise, falls back to system environment.
        """
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            print(f"Loaded configuration from: {env_file}")
        else:
            print(f"Warning: {env_file} not found, using defaults/environment")

        # Shopify connection (required)
        self.store_domain = os.getenv("SHOPIFY_STORE_DOMAIN", "")
        self.access_token = os.getenv("SHOPIFY_ACCESS_TOKEN", "")
        self.api_version = os.getenv("SHOPIFY_API_VERSION", DEFAULT_SETTINGS["SHOPIFY_API_VERSION"])
        self.catalog_id = os.getenv("SHOPIFY_CATALOG_ID", DEFAULT_SETTINGS["SHOPIFY_CATALOG_ID"])

        self.input_file = os.getenv("INPUT_FILE", DEFAULT_SETTINGS["INPUT_FILE"])
        self.run_label = os.getenv("RUN_LABEL", DEFAULT_SETTINGS["RUN_LABEL"])

        output_dir = os.getenv("OUTPUT_DIR", DEFAULT_SETTINGS["OUTPUT_DIR"])
        retention_days = int(os.getenv("OUTPUT_RETENTION_DAYS", str(DEFAULT_SETTINGS["OUTPUT_RETENTION_DAYS"])))

        # Processing options
        self.save_json = _env_flag("SAVE_JSON")
        self.fail_fast = _env_flag("FAIL_FAST")
        self.debug = _env_flag("DEBUG")
        self.request_timeout = float(os.getenv("REQUEST_TIMEOUT", str(DEFAULT_SETTINGS["REQUEST_TIMEOUT"])))

        self.output_manager = OutputManager(output_dir, self.run_label, retention_days)

    def validate_config(self) -> bool:
        """Check that every required value is present.

        Returns:
            True if the configuration is usable. Otherwise prints each problem
            and returns False.
        """
        errors = []
        if not self.store_domain:
            errors.append("SHOPIFY_STORE_DOMAIN is required")
        if not self.access_token:
            errors.append("SHOPIFY_ACCESS_TOKEN is required")
        if not self.input_file:
            errors.append("INPUT_FILE is required")
        elif not Path(self.input_file).is_file():
            errors.append(f"INPUT_FILE not found: {self.input_file}")

        if errors:
            print("\nConfiguration Errors:")
            for err in errors:
                print(f"  - {err}")
            return False
        return True

    def build_enricher(self) -> PricingEnricher:
        """Create the client and enricher from the current configuration."""
        client = ShopifyGraphQLClient(
            self.store_domain,
            api_version=self.api_version,
            timeout=self.request_timeout,
            debug=self.debug,
        )
        return PricingEnricher(client, catalog_id=self.catalog_id or None, debug=self.debug)

    def run(self) -> Dict[str, Any]:
        """Execute the load / enrich / save pipeline.

        Returns:
            A dict containing:
                - started_at/completed_at: ISO timestamps
                - connector: "shopify-b2b-pricing"
                - config: Store domain, API version, catalog mode
                - success: True if the run completed (failed records may be skipped)
                - summary: Record counts
                - failures: [{"index", "id", "error"}] for each failed record
                - json_path: Path to enriched records (if save_json=True)
                - error: Error message (if success=False)
        """
        results = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "connector": "shopify-b2b-pricing",
            "config": {
                "store_domain": self.store_domain,
                "api_version": self.api_version,
                "catalog_id": self.catalog_id or None,
                "fail_fast": self.fail_fast,
            },
            "success": False,
            "failures": [],
        }

        try:
            # Step 1: Load the input records
            print(f"\n{'='*60}")
            print("STEP 1: LOAD RECORDS")
            print("="*60)
            records = load_records(self.input_file)
            print(f"  Loaded {len(records)} record(s) from {self.input_file}")

            # Step 2: Enrich each record in turn
            print(f"\n{'='*60}")
            print("STEP 2: ENRICH")
            print("="*60)
            enricher = self.build_enricher()
            enriched = self._enrich_all(enricher, records, results["failures"])
            priced = sum(
                1 for r in enriched
                if any(v is not None for v in r.get(PRICING_FIELD, {}).values())
            )
            print(f"  Enriched: {len(enriched)}  With B2B prices: {priced}  Failed: {len(results['failures'])}")

            # Step 3: Save output to timestamped directory
            print(f"\n{'='*60}")
            print("STEP 3: SAVE OUTPUT")
            print("="*60)
            self.output_manager.create_run_dir()

            if self.save_json:
                json_path = self.output_manager.write_json("enriched_records.json", enriched)
                results["json_path"] = json_path
                print(f"  Saved enriched records: {json_path}")

            results["success"] = True
            results["summary"] = {
                "records": len(records),
                "enriched": len(enriched),
                "with_prices": priced,
                "failed": len(results["failures"]),
            }

        except Exception as e:
            results["error"] = str(e)
            print(f"\n  ERROR: {e}")
            if self.debug:
                import traceback
                traceback.print_exc()

        results["completed_at"] = datetime.now(timezone.utc).isoformat()

        # Save run metadata alongside the enriched records
        if self.output_manager.current_dir:
            results_path = self.output_manager.write_json("enrichment_results.json", results)
            print(f"\n  Results saved to: {results_path}")

        return results

    def _enrich_all(
        self, enricher: PricingEnricher, records: List[Dict], failures: List[Dict]
    ) -> List[Dict]:
        transform = make_transform(enricher)
        helper = SimpleNamespace(secrets={SECRET_NAME: self.access_token})
        enriched = []
        for index, record in enumerate(records):
            if self.debug:
                print(f"  Record {index}: product {record.get('id')}, variant {record.get('objectID')}")
            try:
                enriched.append(transform(record, helper))
            except RECORD_ERRORS as e:
                failures.append({"index": index, "id": record.get("id"), "error": str(e)})
                print(f"  Warning: record {index} (id={record.get('id')}) failed: {e}")
                if self.fail_fast:
                    raise
        return enriched

    def print_summary(self, results: Dict):
        """Print a human-readable execution summary.

        Args:
            results: The dict returned by run().
        """
        print(f"\n{'='*60}")
        print("ENRICHMENT COMPLETE")
        print("="*60)
        print(f"Status: {'SUCCESS' if results.get('success') else 'FAILED'}")

        summary = results.get("summary", {})
        if summary:
            print(f"Records: {summary.get('records', 0)}")
            print(f"Enriched: {summary.get('enriched', 0)}")
            print(f"With B2B prices: {summary.get('with_prices', 0)}")
            print(f"Failed: {summary.get('failed', 0)}")

        if results.get("error"):
            print(f"Error: {results['error']}")
