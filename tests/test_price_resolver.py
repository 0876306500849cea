"""Tests for b2b_pricing.price_resolver."""

from unittest.mock import MagicMock

import pytest

from b2b_pricing.catalog_ref import CatalogRef
from b2b_pricing.errors import ResolutionError
from b2b_pricing.graphql_queries import CATALOG_PRICE_QUERY
from b2b_pricing.price_resolver import PriceEntry, PriceResolver, parse_amount


def _catalog(status="ACTIVE", nodes=None, price_list=True):
    node = {"id": "gid://shopify/Catalog/10", "title": "Wholesale", "status": status}
    if price_list:
        node["priceList"] = {"currency": "USD", "prices": {"nodes": nodes or []}}
    else:
        node["priceList"] = None
    return {"catalog": node}


def _price_node(amount, currency="USD"):
    return {"variant": {"id": "gid://shopify/ProductVariant/222"},
            "price": {"amount": amount, "currencyCode": currency}}


def test_resolve_price_for_active_catalog(load_fixture):
    client = MagicMock()
    client.execute.return_value = load_fixture("catalog_active.json")["data"]

    entry = PriceResolver(client).resolve_price("222", CatalogRef("10"), "token")

    assert entry == PriceEntry(catalog_id="10", amount=19.99, currency_code="USD")
    client.execute.assert_called_once_with(
        CATALOG_PRICE_QUERY,
        "token",
        {"catalogId": "gid://shopify/Catalog/10", "first": 1, "priceQuery": "variant_id:222"},
    )


def test_variant_gid_is_filtered_by_bare_id():
    client = MagicMock()
    client.execute.return_value = _catalog(nodes=[_price_node("5.00")])

    PriceResolver(client, page_size=10).resolve_price(
        "gid://shopify/ProductVariant/222", CatalogRef("10"), "token"
    )

    variables = client.execute.call_args[0][2]
    assert variables["priceQuery"] == "variant_id:222"
    assert variables["first"] == 10


def test_inactive_catalog_yields_none_even_with_prices(load_fixture):
    data = load_fixture("catalog_draft.json")["data"]
    assert PriceResolver.extract_price(data, CatalogRef("20")) is None


@pytest.mark.parametrize("status", ["DRAFT", "ARCHIVED", None])
def test_any_non_active_status_yields_none(status):
    data = _catalog(status=status, nodes=[_price_node("10.00")])
    assert PriceResolver.extract_price(data, CatalogRef("10")) is None


def test_no_matching_price_yields_none():
    assert PriceResolver.extract_price(_catalog(nodes=[]), CatalogRef("10")) is None


def test_missing_price_list_yields_none():
    assert PriceResolver.extract_price(_catalog(price_list=False), CatalogRef("10")) is None


def test_missing_catalog_raises():
    with pytest.raises(ResolutionError, match="Catalog not found"):
        PriceResolver.extract_price({"catalog": None}, CatalogRef("10"))


def test_currency_falls_back_to_price_list():
    data = _catalog(nodes=[{"price": {"amount": "3.5"}}])
    entry = PriceResolver.extract_price(data, CatalogRef("10"))
    assert entry.amount == 3.5
    assert entry.currency_code == "USD"


def test_parse_amount():
    assert parse_amount("19.99") == 19.99
    assert parse_amount("0") == 0.0
    for bad in ("abc", None, "-1.00", "nan"):
        with pytest.raises(ResolutionError):
            parse_amount(bad)
