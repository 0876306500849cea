"""
Settings — Default configuration values for the B2B pricing enricher.

The orchestrator falls back to DEFAULT_SETTINGS when an environment variable
is not set. Real configuration lives in a .env file loaded at runtime.

Configuration precedence (highest to lowest):
  1. CLI flags (--debug, --input, --catalog, --fail-fast)
  2. Environment variables (from .env file)
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  RUN_LABEL               Suffix used in output folder naming
  SHOPIFY_API_VERSION     Admin API version in the GraphQL endpoint path
  SHOPIFY_CATALOG_ID      Price only this catalog (empty = every published catalog)
  INPUT_FILE              Records to enrich: a JSON list or JSON Lines file
  OUTPUT_DIR              Where to write run output (default: ./output)
  OUTPUT_RETENTION_DAYS   How many days to keep old output folders (0 = keep forever)
  SAVE_JSON               Whether to write enriched records to disk
  FAIL_FAST               Abort the run on the first record that fails
  REQUEST_TIMEOUT         Seconds before an HTTP request to Shopify is abandoned
  DEBUG                   Whether to print verbose output

Required (no default): SHOPIFY_STORE_DOMAIN, SHOPIFY_ACCESS_TOKEN.
"""

RUN_LABEL = "B2B_Pricing"

DEFAULT_SETTINGS = {
    "RUN_LABEL": RUN_LABEL,
    "SHOPIFY_API_VERSION": "2023-10",
    "SHOPIFY_CATALOG_ID": "",
    "INPUT_FILE": "./records.json",
    "OUTPUT_DIR": "./output",
    "OUTPUT_RETENTION_DAYS": 30,
    "SAVE_JSON": True,
    "FAIL_FAST": False,
    "REQUEST_TIMEOUT": 30,
    "DEBUG": False,
}
