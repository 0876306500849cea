"""
Price Resolver — What does a variant cost in a given B2B catalog?

Runs CATALOG_PRICE_QUERY for one catalog, with the price list filtered to a
single variant. The catalog's status gates the result: anything other than
"ACTIVE" resolves to None, whatever prices came back.

Response shape:
    {
      "catalog": {
        "id": "gid://shopify/Catalog/10",
        "status": "ACTIVE",
        "priceList": {
          "currency": "USD",
          "prices": {"nodes": [
            {"variant": {"id": "..."}, "price": {"amount": "19.99", "currencyCode": "USD"}}
          ]}
        }
      }
    }

A catalog without a price list, or a price list with no node for the
variant, also resolves to None. A null catalog, or an amount that is not a
non-negative number, raises ResolutionError.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .catalog_ref import CatalogRef, normalize_id
from .errors import ResolutionError
from .graphql_queries import CATALOG_PRICE_QUERY, variant_price_filter
from .shopify_client import ShopifyGraphQLClient


ACTIVE_STATUS = "ACTIVE"


@dataclass(frozen=True)
class PriceEntry:
    """One resolved price point for a variant in a catalog."""

    catalog_id: str
    amount: float
    currency_code: Optional[str] = None


def parse_amount(raw) -> float:
    """Parse a Money amount ("19.99") into a non-negative float."""
    try:
        amount = float(raw)
    except (TypeError, ValueError) as e:
        raise ResolutionError(f"Invalid price amount: {raw!r}") from e
    if amount != amount or amount < 0:
        raise ResolutionError(f"Invalid price amount: {raw!r}")
    return amount


class PriceResolver:
    """Resolves a variant's price within one catalog's price list.

    Attributes:
        page_size: Price nodes requested per query. One variant has at most
            one price per price list, so 1 is enough.
    """

    def __init__(self, client: ShopifyGraphQLClient, page_size: int = 1, debug: bool = False):
        self.client = client
        self.page_size = page_size
        self.debug = debug

    def resolve_price(
        self, variant_id, catalog: CatalogRef, access_token: str
    ) -> Optional[PriceEntry]:
        """Fetch the active price of a variant in a catalog.

        Args:
            variant_id: Bare variant ID or variant global ID.
            catalog: The catalog to price against.
            access_token: Admin API access token.

        Returns:
            A PriceEntry, or None if the catalog is inactive or has no price.

        Raises:
            ResolutionError: If the catalog is missing or the amount is invalid.
        """
        variables = {
            "catalogId": catalog.gid,
            "first": self.page_size,
            "priceQuery": variant_price_filter(normalize_id(variant_id)),
        }
        data = self.client.execute(CATALOG_PRICE_QUERY, access_token, variables)
        entry = self.extract_price(data, catalog)

        if self.debug:
            shown = f"{entry.amount} {entry.currency_code or ''}".strip() if entry else "none"
            print(f"  Catalog {catalog}: price for variant {variant_id} = {shown}")

        return entry

    @staticmethod
    def extract_price(data: Dict[str, Any], catalog: CatalogRef) -> Optional[PriceEntry]:
        """Turn a catalog price query response into a PriceEntry (or None)."""
        node = (data or {}).get("catalog")
        if not node:
            raise ResolutionError(f"Catalog not found: {catalog.gid}")

        if node.get("status") != ACTIVE_STATUS:
            return None

        price_list = node.get("priceList") or {}
        nodes = (price_list.get("prices") or {}).get("nodes") or []
        if not nodes:
            return None

        price = (nodes[0] or {}).get("price") or {}
        if price.get("amount") is None:
            return None

        catalog_id = normalize_id(node.get("id") or catalog.catalog_id)
        return PriceEntry(
            catalog_id=catalog_id,
            amount=parse_amount(price["amount"]),
            currency_code=price.get("currencyCode") or price_list.get("currency"),
        )
