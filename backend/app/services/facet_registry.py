"""
Atelier Catalog — Facet Registry
==================================

What:  Static catalog of facet names, the fields each facet owns, and the
       canonical storage rule of every field.
Who:   Consulted by the normalizer (how to coerce a value), the product
       service (which model to write) and the API schemas (wire names).

Adding a facet:
    1. Declare its ORM model in app/models/facets.py
    2. Register a FacetSpec below
    Nothing in the services branches on facet names.

Wire names are the camelCase keys clients send (e.g. "priceUSD");
columns are the snake_case ORM attributes they land in (e.g. "price_usd").
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Type

from app.models.facets import (
    ProductAttributesTag,
    ProductBasic,
    ProductInventory,
    ProductItemDetails,
    ProductMedia,
    ProductPricing,
    ProductReels,
    ProductSeo,
    ProductShippingPolicies,
    ProductVariants,
)


class FieldKind(str, Enum):
    """Canonical storage rules applied by the normalizer."""
    STRING = "string"              # bounded text
    TEXT = "text"                  # unbounded text
    DECIMAL = "decimal"            # decimal-as-string
    INTEGER = "integer"            # integer-as-string
    BOOLEAN = "boolean"
    JSON_ARRAY = "json_array"
    JSON_OBJECT = "json_object"
    DATE = "date"                  # ISO-8601 string
    ENUM = "enum"
    URL = "url"
    UUID = "uuid"                  # reference id
    TRUST_BADGES = "trust_badges"  # JSON array split into three slots


@dataclass(frozen=True)
class FieldSpec:
    """
    One client-facing field and the rule that turns it into stored columns.

    Attributes:
        name:        Wire name accepted from clients
        column:      ORM attribute written (first slot for TRUST_BADGES)
        kind:        Normalization rule
        min_length / max_length:  Bounds for STRING, ENUM-free text and
                                  raw TRUST_BADGES text
        min_value / max_value:    Inclusive numeric range for DECIMAL/INTEGER
        scale:       Fixed decimal places for DECIMAL (None = strip zeros)
        choices:     Allowed members for ENUM
        columns:     Every column written; defaults to (column,)
    """
    name: str
    column: str
    kind: FieldKind
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_value: Optional[Decimal] = None
    max_value: Optional[Decimal] = None
    scale: Optional[int] = None
    choices: Tuple[str, ...] = ()
    columns: Tuple[str, ...] = ()

    @property
    def stored_columns(self) -> Tuple[str, ...]:
        return self.columns or (self.column,)


@dataclass(frozen=True)
class FacetSpec:
    """A facet: its registry name, ORM model and ordered field set."""
    name: str
    model: Type[Any]
    fields: Tuple[FieldSpec, ...]
    _by_name: Dict[str, FieldSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_name", {f.name: f for f in self.fields})

    def get_field(self, name: str) -> Optional[FieldSpec]:
        return self._by_name.get(name)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(self._by_name)


# ── Field constructors ────────────────────────────────────────────────────
# Short helpers so the registry below reads as a table.

def _string(name: str, column: str, max_length: int, min_length: int = 1) -> FieldSpec:
    return FieldSpec(name, column, FieldKind.STRING, min_length=min_length, max_length=max_length)


def _text(name: str, column: str) -> FieldSpec:
    return FieldSpec(name, column, FieldKind.TEXT)


def _decimal(
    name: str,
    column: str,
    min_value: Optional[str] = "0",
    max_value: Optional[str] = None,
    scale: Optional[int] = None,
) -> FieldSpec:
    return FieldSpec(
        name,
        column,
        FieldKind.DECIMAL,
        min_value=Decimal(min_value) if min_value is not None else None,
        max_value=Decimal(max_value) if max_value is not None else None,
        scale=scale,
    )


def _money(name: str, column: str) -> FieldSpec:
    return _decimal(name, column, min_value="0", scale=2)


def _percent(name: str, column: str) -> FieldSpec:
    return _decimal(name, column, min_value="0", max_value="100")


def _integer(name: str, column: str, min_value: int = 0, max_value: Optional[int] = None) -> FieldSpec:
    return FieldSpec(
        name,
        column,
        FieldKind.INTEGER,
        min_value=Decimal(min_value),
        max_value=Decimal(max_value) if max_value is not None else None,
    )


def _enum(name: str, column: str, *choices: str) -> FieldSpec:
    return FieldSpec(name, column, FieldKind.ENUM, choices=tuple(choices))


def _kind(name: str, column: str, kind: FieldKind) -> FieldSpec:
    return FieldSpec(name, column, kind)


# ══════════════════════════════════════════════════════════════════════════
# Facet Catalog
# ══════════════════════════════════════════════════════════════════════════

BASIC = FacetSpec(
    name="basic",
    model=ProductBasic,
    fields=(
        _kind("categoryId", "category_id", FieldKind.UUID),
        _kind("collectionId", "collection_id", FieldKind.UUID),
        _kind("signaturePieceId", "signature_piece_id", FieldKind.UUID),
        _string("brand", "brand", 100),
        _decimal("weight", "weight"),
        _enum("gender", "gender", "Male", "Female", "Unisex"),
        _string("size", "size", 20),
        _kind("colors", "colors", FieldKind.JSON_ARRAY),
        _string("colorName", "color_name", 50),
        _string("description", "description", 2000),
        _string("tagNumber", "tag_number", 50),
        _integer("stock", "stock"),
        _kind("tags", "tags", FieldKind.JSON_ARRAY),
        _string("slug", "slug", 100),
        _enum("status", "status", "active", "inactive", "draft"),
        _enum("visibility", "visibility", "PUBLIC", "UNLISTED", "HIDDEN"),
        _kind("publishedAt", "published_at", FieldKind.DATE),
        _kind("isSignaturePiece", "is_signature_piece", FieldKind.BOOLEAN),
        _kind("isFeatured", "is_featured", FieldKind.BOOLEAN),
        _string("signatureLabel", "signature_label", 100),
        _string("signatureStory", "signature_story", 1000),
        _kind("allowBackorder", "allow_backorder", FieldKind.BOOLEAN),
        _kind("isPreorder", "is_preorder", FieldKind.BOOLEAN),
        _integer("minOrderQty", "min_order_qty", min_value=1),
        _integer("maxOrderQty", "max_order_qty", min_value=1),
        _integer("leadTimeDays", "lead_time_days"),
        _string("hsCode", "hs_code", 20),
        _string("warrantyInfo", "warranty_info", 500),
        _kind("sizeGuideUrl", "size_guide_url", FieldKind.URL),
        _kind("badges", "badges", FieldKind.JSON_ARRAY),
        _integer("sales", "sales"),
        _integer("quantity", "quantity"),
        _text("reviewUi", "review_ui"),
        _text("soldUi", "sold_ui"),
    ),
)

PRICING = FacetSpec(
    name="pricing",
    model=ProductPricing,
    fields=(
        _money("price", "price"),
        _money("priceUSD", "price_usd"),
        _enum("currency", "currency", "PKR", "USD", "EUR", "GBP"),
        _percent("discount", "discount"),
        _enum("discountType", "discount_type", "percentage", "fixed"),
        _money("compareAtPrice", "compare_at_price"),
        _kind("saleStartAt", "sale_start_at", FieldKind.DATE),
        _kind("saleEndAt", "sale_end_at", FieldKind.DATE),
        _string("discountLabel", "discount_label", 100),
        _percent("tax", "tax"),
    ),
)

MEDIA = FacetSpec(
    name="media",
    model=ProductMedia,
    fields=(
        _kind("images", "images", FieldKind.JSON_ARRAY),
        _text("videoFile", "video_file"),
    ),
)

SEO = FacetSpec(
    name="seo",
    model=ProductSeo,
    fields=(
        _string("seoTitle", "seo_title", 60),
        _string("seoDescription", "seo_description", 160),
        _kind("canonicalUrl", "canonical_url", FieldKind.URL),
        _kind("ogImage", "og_image", FieldKind.URL),
    ),
)

ATTRIBUTES_TAG = FacetSpec(
    name="attributesTag",
    model=ProductAttributesTag,
    fields=(
        _kind("attributes", "attributes", FieldKind.JSON_OBJECT),
        _kind("tags", "tags", FieldKind.JSON_ARRAY),
    ),
)

VARIANTS = FacetSpec(
    name="variants",
    model=ProductVariants,
    fields=(
        _kind("variants", "variants", FieldKind.JSON_ARRAY),
    ),
)

INVENTORY = FacetSpec(
    name="inventory",
    model=ProductInventory,
    fields=(
        _string("sku", "sku", 50),
        _string("barcode", "barcode", 50),
        _integer("inventoryQuantity", "inventory_quantity"),
        _integer("lowStockThreshold", "low_stock_threshold"),
        _integer("reorderPoint", "reorder_point"),
        _integer("reorderQuantity", "reorder_quantity"),
        _string("supplier", "supplier", 100),
        _string("supplierSku", "supplier_sku", 50),
        _money("costPrice", "cost_price"),
        _percent("margin", "margin"),
        _string("location", "location", 100),
        _string("warehouse", "warehouse", 100),
        _string("binLocation", "bin_location", 50),
        _kind("lastRestocked", "last_restocked", FieldKind.DATE),
        _kind("nextRestockDate", "next_restock_date", FieldKind.DATE),
        _enum(
            "inventoryStatus", "inventory_status",
            "in_stock", "low_stock", "out_of_stock", "discontinued",
        ),
        _kind("trackInventory", "track_inventory", FieldKind.BOOLEAN),
        _integer("reservedQuantity", "reserved_quantity"),
        _integer("availableQuantity", "available_quantity"),
    ),
)

REELS = FacetSpec(
    name="reels",
    model=ProductReels,
    fields=(
        _enum("platform", "platform", "Instagram", "TikTok", "YouTube", "Facebook", "Upload"),
        _text("videoFile", "video_file"),
        _string("reelTitle", "reel_title", 100),
        _string("reelDescription", "reel_description", 500),
        _enum("reelLanguage", "reel_language", "en", "ur", "ar", "hi", "es", "fr"),
        _kind("captionsUrl", "captions_url", FieldKind.URL),
        _kind("thumbnailUrl", "thumbnail_url", FieldKind.URL),
        _integer("durationSec", "duration_sec", min_value=1, max_value=300),
        _enum("aspectRatio", "aspect_ratio", "9:16", "16:9", "1:1", "4:5"),
        _kind("ctaUrl", "cta_url", FieldKind.URL),
        _string("reelTags", "reel_tags", 200),
        _kind("isPublic", "is_public", FieldKind.BOOLEAN),
        _kind("isPinned", "is_pinned", FieldKind.BOOLEAN),
        _integer("reelOrder", "reel_order", min_value=1),
    ),
)

ITEM_DETAILS = FacetSpec(
    name="itemDetails",
    model=ProductItemDetails,
    fields=(
        _text("material", "material"),
        _text("warranty", "warranty"),
        _text("certification", "certification"),
        _text("vendorName", "vendor_name"),
        _text("shippingFreeText", "shipping_free_text"),
        _text("qualityGuaranteeText", "quality_guarantee_text"),
        _text("careInstructionsText", "care_instructions_text"),
        _text("didYouKnow", "did_you_know"),
        _kind("faqs", "faqs", FieldKind.JSON_ARRAY),
        _text("sellerBlurb", "seller_blurb"),
        FieldSpec(
            "trustBadges",
            "trust_badge_1",
            FieldKind.TRUST_BADGES,
            min_length=1,
            max_length=1000,
            columns=("trust_badge_1", "trust_badge_2", "trust_badge_3"),
        ),
    ),
)

SHIPPING_POLICIES = FacetSpec(
    name="shippingPolicies",
    model=ProductShippingPolicies,
    fields=(
        _text("shippingInfo", "shipping_info"),
        _text("shippingNotes", "shipping_notes"),
        _text("packagingDetails", "packaging_details"),
        _text("returnPolicy", "return_policy"),
        _integer("returnWindowDays", "return_window_days", max_value=365),
        _money("returnFees", "return_fees"),
        _kind("isReturnable", "is_returnable", FieldKind.BOOLEAN),
        _string("exchangePolicy", "exchange_policy", 1000),
        _integer("warrantyPeriodMonths", "warranty_period_months", max_value=120),
        _enum("warrantyType", "warranty_type", "manufacturer", "seller", "extended", "none"),
        _string("originCountry", "origin_country", 100),
        _decimal("weightKg", "weight_kg", max_value="1000"),
        _string("dimensions", "dimensions", 50),
    ),
)


def _index(specs: Iterable[FacetSpec]) -> Dict[str, FacetSpec]:
    return {spec.name: spec for spec in specs}


# Registration order is also the insert order inside create_aggregate
FACET_REGISTRY: Dict[str, FacetSpec] = _index((
    BASIC,
    PRICING,
    MEDIA,
    SEO,
    ATTRIBUTES_TAG,
    VARIANTS,
    INVENTORY,
    REELS,
    ITEM_DETAILS,
    SHIPPING_POLICIES,
))

FACET_NAMES: Tuple[str, ...] = tuple(FACET_REGISTRY)


# ══════════════════════════════════════════════════════════════════════════
# Root and Statistic Fields
# ══════════════════════════════════════════════════════════════════════════

ROOT_FIELDS: Dict[str, FieldSpec] = {
    spec.name: spec
    for spec in (
        _string("name", "name", 200),
        _string("shortDescription", "short_description", 500),
        _money("price", "price"),
        _string("image", "image", 500),
    )
}

# Accepted in a creation body but never written from it
READ_ONLY_ROOT_FIELDS = frozenset({
    "id", "rating", "reviewsCount", "views",
    "createdBy", "updatedBy", "createdAt", "updatedAt",
    "isDeleted", "deletedAt", "categoryId",
})

STATISTIC_FIELDS: Dict[str, FieldSpec] = {
    spec.name: spec
    for spec in (
        _decimal("rating", "rating", min_value="0", max_value="5", scale=2),
        _integer("reviewsCount", "reviews_count"),
        _integer("views", "views"),
    )
}


def get_facet(name: str) -> Optional[FacetSpec]:
    """Registry lookup; None for names outside the closed facet set."""
    return FACET_REGISTRY.get(name)


def column_wire_names(spec: FacetSpec) -> Dict[str, str]:
    """
    Column → wire name map for rendering a stored row back to clients.

    TRUST_BADGES columns render as trustBadge1..trustBadge3.
    """
    names: Dict[str, str] = {}
    for f in spec.fields:
        if f.kind is FieldKind.TRUST_BADGES:
            for slot, column in enumerate(f.stored_columns, start=1):
                names[column] = f"trustBadge{slot}"
        else:
            names[f.column] = f.name
    return names


def split_create_payload(payload: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Separate a flat creation body into root fields and facet payloads.

    Keys naming a registered facet go to the facet map; everything else is
    treated as a root field and left for the normalizer to accept or reject.
    """
    root_fields: Dict[str, Any] = {}
    facets: Dict[str, Any] = {}
    for key, value in payload.items():
        if key in FACET_REGISTRY:
            facets[key] = value
        else:
            root_fields[key] = value
    return root_fields, facets
