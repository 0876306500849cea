"""
GraphQL Query Definitions — The two queries used for B2B price enrichment.

PRODUCT_PUBLICATIONS_QUERY
    Lists the B2B catalogs a product is published to. Publications are
    restricted to COMPANY_LOCATION catalogs and capped at the first
    PUBLICATIONS_PAGE_SIZE edges; there is no continuation handling, so a
    product published to more catalogs than that loses the remainder.

    Variables: {"productId": "gid://shopify/Product/<id>"}

CATALOG_PRICE_QUERY
    Reads a catalog's status and its price list, filtered to one variant.

    Variables: {
        "catalogId": "gid://shopify/Catalog/<id>",
        "first": <number of price nodes>,
        "priceQuery": "variant_id:<id>"
    }

Both are sent through ShopifyGraphQLClient.execute(); the "data" payload of
the response is handed to CatalogResolver and PriceResolver respectively.
"""

PUBLICATIONS_PAGE_SIZE = 10

PRODUCT_PUBLICATIONS_QUERY = """
query ProductCatalogPublications($productId: ID!) {
  product(id: $productId) {
    id
    title
    resourcePublicationsV2(first: %d, catalogType: COMPANY_LOCATION) {
      edges {
        node {
          publication {
            catalog {
              id
              title
            }
          }
        }
      }
    }
  }
}
""" % PUBLICATIONS_PAGE_SIZE

CATALOG_PRICE_QUERY = """
query CatalogVariantPrice($catalogId: ID!, $first: Int!, $priceQuery: String) {
  catalog(id: $catalogId) {
    id
    title
    status
    priceList {
      id
      name
      currency
      prices(first: $first, query: $priceQuery) {
        nodes {
          variant {
            id
          }
          price {
            amount
            currencyCode
          }
        }
      }
    }
  }
}
"""


def variant_price_filter(variant_id) -> str:
    """Search filter restricting a price list to a single variant."""
    return f"variant_id:{variant_id}"
