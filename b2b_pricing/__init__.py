"""
b2b_pricing — Shopify B2B catalog price enrichment.

Each module handles one concern:

  shopify_client.py     Rate-limited Shopify Admin GraphQL transport
  graphql_queries.py    The publications and catalog price queries
  catalog_ref.py        Global ID parsing and normalization
  catalog_resolver.py   Which catalogs is a product published to
  price_resolver.py     What does a variant cost in a catalog
  enrichment.py         Per-record b2b_pricing attachment
  orchestrator.py       File-driven run over many records
  output_manager.py     Timestamped output folders and retention
  errors.py             RemoteError, RetriesExhausted, ResolutionError
"""

from .errors import RemoteError, RetriesExhausted, ResolutionError
from .catalog_ref import CatalogRef, normalize_id, to_gid
from .shopify_client import ShopifyGraphQLClient, ThrottleStatus
from .catalog_resolver import CatalogResolver
from .price_resolver import PriceResolver, PriceEntry
from .enrichment import PricingEnricher, make_transform, PRICING_FIELD
from .orchestrator import PricingOrchestrator, load_records
from .output_manager import OutputManager
