"""
Catalog Resolver — Which B2B catalogs is a product published to?

Runs PRODUCT_PUBLICATIONS_QUERY for one product and collects the catalog of
every publication edge into a PublicationSet (a frozenset of CatalogRef).

The response looks like:
    {
      "product": {
        "id": "gid://shopify/Product/111",
        "resourcePublicationsV2": {
          "edges": [
            {"node": {"publication": {"catalog": {"id": "gid://shopify/Catalog/10"}}}}
          ]
        }
      }
    }

Publications without a catalog (e.g. a plain sales channel) are skipped. An
empty set is a valid answer: the product is not in any B2B catalog. A null
product means the ID does not exist (or the token cannot see it) and raises
ResolutionError.
"""

from typing import Any, Dict, FrozenSet

from .catalog_ref import CatalogRef, to_gid
from .errors import ResolutionError
from .graphql_queries import PRODUCT_PUBLICATIONS_QUERY
from .shopify_client import ShopifyGraphQLClient


class CatalogResolver:
    """Resolves the set of company-location catalogs a product is published to."""

    def __init__(self, client: ShopifyGraphQLClient, debug: bool = False):
        self.client = client
        self.debug = debug

    def resolve_catalogs(self, product_id, access_token: str) -> FrozenSet[CatalogRef]:
        """Fetch the product's publications and return their catalogs.

        Args:
            product_id: Bare product ID or product global ID.
            access_token: Admin API access token.

        Returns:
            The PublicationSet, possibly empty.

        Raises:
            ResolutionError: If the product is missing or the response is malformed.
        """
        product_gid = to_gid("Product", product_id)
        data = self.client.execute(
            PRODUCT_PUBLICATIONS_QUERY, access_token, {"productId": product_gid}
        )
        catalogs = self.extract_catalogs(data, product_gid)

        if self.debug:
            ids = ", ".join(sorted(str(c) for c in catalogs)) or "none"
            print(f"  Product {product_gid} published to catalogs: {ids}")

        return catalogs

    @staticmethod
    def extract_catalogs(data: Dict[str, Any], product_gid: str = "") -> FrozenSet[CatalogRef]:
        """Pull the catalog refs out of a publications query response."""
        product = (data or {}).get("product")
        if not product:
            raise ResolutionError(f"Product not found: {product_gid or 'unknown'}")

        publications = product.get("resourcePublicationsV2")
        if publications is None:
            raise ResolutionError(f"Product {product_gid} has no publication data")

        catalogs = set()
        for edge in publications.get("edges") or []:
            publication = ((edge or {}).get("node") or {}).get("publication") or {}
            catalog = publication.get("catalog") or {}
            if not catalog.get("id"):
                continue
            try:
                catalogs.add(CatalogRef.parse(catalog["id"]))
            except ValueError as e:
                raise ResolutionError(f"Product {product_gid} has a malformed catalog ID: {e}") from e
        return frozenset(catalogs)
