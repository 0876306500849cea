"""
Pricing Enrichment — Attach B2B catalog prices to a product record.

For each record:

  1. CatalogResolver looks up the catalogs the product (record["id"]) is
     published to.
  2. PriceResolver prices the variant (record["objectID"]) in each of those
     catalogs, one catalog at a time so every call shares the same query
     budget in order.
  3. The results are attached as record["b2b_pricing"]:

        {"10": 19.99, "20": None}

     keyed by bare catalog ID. A catalog that is inactive, or has no price
     for the variant, maps to None. A product published nowhere gets {}.

The record is only written to once, after every price is resolved, so an
exception part-way through leaves it untouched.

When a catalog_id is configured the enricher runs in single-catalog mode:
only that catalog is priced, and only if the product is published to it.

make_transform(enricher) builds the per-record transform(record, helper) hook
for host pipelines that hand over a helper exposing secrets
(helper.secrets.get("SHOPIFY")). The runner in orchestrator.py drives
records through that same hook.
"""

from typing import Any, Callable, Dict, Optional

from .catalog_ref import CatalogRef
from .catalog_resolver import CatalogResolver
from .errors import ResolutionError
from .price_resolver import PriceResolver
from .shopify_client import ShopifyGraphQLClient


PRICING_FIELD = "b2b_pricing"
SECRET_NAME = "SHOPIFY"


class PricingEnricher:
    """Composes the catalog and price resolvers for one record at a time.

    Attributes:
        catalog_resolver: Finds the catalogs a product is published to.
        price_resolver: Prices a variant within one catalog.
        catalog: If set, only this catalog is considered (single-catalog mode).
        debug: If True, prints per-record progress.
    """

    def __init__(
        self,
        client: ShopifyGraphQLClient,
        catalog_id: Optional[str] = None,
        price_page_size: int = 1,
        debug: bool = False,
    ):
        self.catalog_resolver = CatalogResolver(client, debug)
        self.price_resolver = PriceResolver(client, price_page_size, debug)
        self.catalog = CatalogRef.parse(catalog_id) if catalog_id else None
        self.debug = debug

    def enrich(self, record: Dict[str, Any], access_token: str) -> Dict[str, Any]:
        """Attach the b2b_pricing mapping to a record and return it.

        Args:
            record: Product record with "id" (product) and "objectID" (variant).
            access_token: Admin API access token.

        Returns:
            The same record, with PRICING_FIELD set.

        Raises:
            ResolutionError: If the record lacks an identifier, or a lookup fails.
            RemoteError: If the API call fails (including RetriesExhausted).
        """
        product_id = self._require(record, "id")
        variant_id = self._require(record, "objectID")

        pricing = self.resolve_pricing(product_id, variant_id, access_token)

        record[PRICING_FIELD] = pricing
        return record

    def resolve_pricing(self, product_id, variant_id, access_token: str) -> Dict[str, Optional[float]]:
        """Build the catalog ID -> amount mapping for one product variant."""
        published = self.catalog_resolver.resolve_catalogs(product_id, access_token)

        if self.catalog is not None:
            if self.catalog not in published:
                if self.debug:
                    print(f"  Product {product_id} is not published in catalog {self.catalog}")
                return {}
            published = frozenset([self.catalog])

        pricing = {}
        for catalog in sorted(published, key=lambda c: c.sort_key):
            entry = self.price_resolver.resolve_price(variant_id, catalog, access_token)
            pricing[catalog.catalog_id] = entry.amount if entry else None
        return pricing

    @staticmethod
    def _require(record: Dict[str, Any], field: str):
        value = record.get(field)
        if value is None or str(value).strip() == "":
            raise ResolutionError(f"Record is missing required field '{field}'")
        return value


def make_transform(enricher: PricingEnricher) -> Callable[[Dict[str, Any], Any], Dict[str, Any]]:
    """Build the per-record hook a host pipeline calls as transform(record, helper).

    The hook reads the access token from helper.secrets.get("SHOPIFY") on
    every call and hands the record to the enricher.

    Args:
        enricher: A configured PricingEnricher.

    Returns:
        A two-argument transform(record, helper) function.
    """

    def transform(record: Dict[str, Any], helper) -> Dict[str, Any]:
        access_token = helper.secrets.get(SECRET_NAME)
        if not access_token:
            raise ValueError(f"Secret '{SECRET_NAME}' is not configured")
        return enricher.enrich(record, access_token)

    return transform
