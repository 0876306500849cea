"""Tests for b2b_pricing.enrichment.

End-to-end scenarios run the real client and resolvers against a mocked
HTTP session, so the full request sequence is exercised.
"""

from unittest.mock import MagicMock

import pytest

from b2b_pricing.enrichment import PRICING_FIELD, PricingEnricher, make_transform
from b2b_pricing.errors import ResolutionError, RetriesExhausted
from b2b_pricing.shopify_client import ShopifyGraphQLClient


def _enricher(session, sleep, **kwargs):
    client = ShopifyGraphQLClient("acme.myshopify.com", session=session, sleep=sleep)
    return PricingEnricher(client, **kwargs)


def _record():
    return {"id": "111", "objectID": "222", "title": "Industrial Widget"}


def test_enrich_prices_every_published_catalog(session, sleep, make_response, load_fixture):
    session.post.side_effect = [
        make_response(load_fixture("product_publications.json")),
        make_response(load_fixture("catalog_active.json")),
        make_response(load_fixture("catalog_draft.json")),
    ]

    record = _enricher(session, sleep).enrich(_record(), "token")

    assert record[PRICING_FIELD] == {"10": 19.99, "20": None}
    assert record["title"] == "Industrial Widget"
    assert session.post.call_count == 3
    catalog_ids = [c[1]["json"]["variables"]["catalogId"] for c in session.post.call_args_list[1:]]
    assert catalog_ids == ["gid://shopify/Catalog/10", "gid://shopify/Catalog/20"]


def test_unpublished_product_gets_empty_pricing(session, sleep, make_response):
    session.post.return_value = make_response(
        {"data": {"product": {"id": "gid://shopify/Product/111", "resourcePublicationsV2": {"edges": []}}}}
    )

    record = _enricher(session, sleep).enrich(_record(), "token")

    assert record[PRICING_FIELD] == {}
    assert session.post.call_count == 1


def test_single_catalog_mode_prices_only_that_catalog(session, sleep, make_response, load_fixture):
    session.post.side_effect = [
        make_response(load_fixture("product_publications.json")),
        make_response(load_fixture("catalog_active.json")),
    ]

    record = _enricher(session, sleep, catalog_id="gid://shopify/Catalog/10").enrich(_record(), "token")

    assert record[PRICING_FIELD] == {"10": 19.99}
    assert session.post.call_count == 2


def test_single_catalog_mode_skips_unpublished_catalog(session, sleep, make_response, load_fixture):
    session.post.return_value = make_response(load_fixture("product_publications.json"))

    record = _enricher(session, sleep, catalog_id="99").enrich(_record(), "token")

    assert record[PRICING_FIELD] == {}
    assert session.post.call_count == 1


def test_exhausted_retries_fail_the_record(session, sleep, make_response, load_fixture):
    session.post.side_effect = (
        [make_response(load_fixture("product_publications.json"))]
        + [make_response({}, status_code=429)] * ShopifyGraphQLClient.MAX_ATTEMPTS
    )
    record = _record()

    with pytest.raises(RetriesExhausted):
        _enricher(session, sleep).enrich(record, "token")

    assert PRICING_FIELD not in record


@pytest.mark.parametrize("field", ["id", "objectID"])
def test_missing_identifier_raises(field, session, sleep):
    record = _record()
    del record[field]

    with pytest.raises(ResolutionError, match=field):
        _enricher(session, sleep).enrich(record, "token")

    session.post.assert_not_called()


def _publications(*catalog_ids):
    edges = [
        {"node": {"publication": {"catalog": {"id": f"gid://shopify/Catalog/{c}", "title": c}}}}
        for c in catalog_ids
    ]
    return {"data": {"product": {"id": "gid://shopify/Product/111", "resourcePublicationsV2": {"edges": edges}}}}


def _active_price(catalog_id, amount):
    return {
        "data": {
            "catalog": {
                "id": f"gid://shopify/Catalog/{catalog_id}",
                "status": "ACTIVE",
                "priceList": {"currency": "USD", "prices": {"nodes": [{"price": {"amount": amount}}]}},
            }
        }
    }


def test_catalogs_are_priced_in_numeric_order(session, sleep, make_response):
    session.post.side_effect = [
        make_response(_publications("100", "20", "3")),
        make_response(_active_price("3", "1.00")),
        make_response(_active_price("20", "2.00")),
        make_response(_active_price("100", "3.00")),
    ]

    record = _enricher(session, sleep).enrich(_record(), "token")

    catalog_ids = [c[1]["json"]["variables"]["catalogId"] for c in session.post.call_args_list[1:]]
    assert catalog_ids == [
        "gid://shopify/Catalog/3",
        "gid://shopify/Catalog/20",
        "gid://shopify/Catalog/100",
    ]
    assert record[PRICING_FIELD] == {"3": 1.0, "20": 2.0, "100": 3.0}


def test_malformed_catalog_id_is_a_resolution_error(session, sleep, make_response):
    session.post.return_value = make_response(_publications(""))
    record = _record()

    with pytest.raises(ResolutionError, match="malformed catalog ID"):
        _enricher(session, sleep).enrich(record, "token")

    assert PRICING_FIELD not in record


# ---------------------------------------------------------------------------
# Host pipeline hook
# ---------------------------------------------------------------------------

def test_transform_is_called_with_record_and_helper(session, sleep, make_response, load_fixture):
    session.post.side_effect = [
        make_response(load_fixture("product_publications.json")),
        make_response(load_fixture("catalog_active.json")),
        make_response(load_fixture("catalog_draft.json")),
    ]
    helper = MagicMock()
    helper.secrets.get.return_value = "shpat_secret"
    transform = make_transform(_enricher(session, sleep))

    result = transform(_record(), helper)

    helper.secrets.get.assert_called_once_with("SHOPIFY")
    assert result[PRICING_FIELD] == {"10": 19.99, "20": None}
    assert session.post.call_args[1]["headers"]["X-Shopify-Access-Token"] == "shpat_secret"


def test_transform_without_secret_raises():
    helper = MagicMock()
    helper.secrets.get.return_value = None
    transform = make_transform(MagicMock())

    with pytest.raises(ValueError, match="SHOPIFY"):
        transform(_record(), helper)
