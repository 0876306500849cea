"""
Catalog references — Parsing and normalizing Shopify global IDs.

Shopify identifies every resource with a URI-style global ID, e.g.
"gid://shopify/Catalog/10". The records we enrich (and the b2b_pricing
mapping we produce) use the bare trailing ID ("10") instead.

Normalization strips everything up to and including the last "/". It is
idempotent: normalizing a bare ID returns it unchanged, so callers never
need to know which form they were handed.
"""

from dataclasses import dataclass


GID_PREFIX = "gid://shopify/"


def normalize_id(value) -> str:
    """Return the bare trailing ID of a global ID (or the bare ID itself).

    Examples:
        "gid://shopify/Catalog/10" -> "10"
        "10" -> "10"
    """
    text = str(value).strip()
    return text[text.rfind("/") + 1:]


def to_gid(resource: str, value) -> str:
    """Build a global ID for a resource type, e.g. to_gid("Product", 111).

    Values that are already global IDs are returned as-is.
    """
    text = str(value).strip()
    if text.startswith(GID_PREFIX):
        return text
    return f"{GID_PREFIX}{resource}/{normalize_id(text)}"


@dataclass(frozen=True)
class CatalogRef:
    """A B2B catalog, held by its bare numeric ID.

    Equality and hashing use the bare ID, so a PublicationSet built from
    either form deduplicates correctly.
    """

    catalog_id: str

    @classmethod
    def parse(cls, value) -> "CatalogRef":
        """Build a CatalogRef from a global ID or a bare ID."""
        catalog_id = normalize_id(value)
        if not catalog_id:
            raise ValueError(f"Not a catalog identifier: {value!r}")
        return cls(catalog_id)

    @property
    def sort_key(self):
        """Numeric IDs order numerically ("20" before "100"), others after them."""
        if self.catalog_id.isdigit():
            return (0, int(self.catalog_id), "")
        return (1, 0, self.catalog_id)

    @property
    def gid(self) -> str:
        """The fully-qualified form, as the Admin API expects it."""
        return to_gid("Catalog", self.catalog_id)

    def __str__(self) -> str:
        return self.catalog_id
