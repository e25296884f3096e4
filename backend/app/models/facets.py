"""
Atelier Catalog — Facet SQLAlchemy Models
===========================================

What:  The ten facet tables attached 1:1 to a product.
How:   Every facet shares FacetMixin (id, unique product_id FK, audit
       columns); the rest of each class is its own column set.
Who:   Looked up through FACET_REGISTRY; services never name these classes
       directly.

Storage conventions (mirrors FieldKind in services/facet_registry.py):
    DECIMAL / INTEGER  → String(32)   (decimal-as-string, no float drift)
    DATE               → String(40)   (ISO-8601 text as submitted)
    JSON_ARRAY/OBJECT  → Text         (compact JSON)
    ENUM / STRING      → String(n)    (n = the field's max length)
    URL / TEXT         → Text
    BOOLEAN            → Boolean
    UUID               → Uuid

A facet row that does not exist is a distinct state from a row whose
columns are all NULL; nothing here synthesizes missing rows.
"""

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.database import Base
from app.models.mixins import AuditMixin


class FacetMixin(AuditMixin):
    """Primary key plus the unique parent key that makes a facet 1:1."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    @declared_attr
    def product_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            Uuid,
            ForeignKey("products.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
            comment="Owning product; unique so a product has at most one row per facet",
        )


class ProductBasic(FacetMixin, Base):
    __tablename__ = "product_basic"

    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    collection_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    signature_piece_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    brand: Mapped[Optional[str]] = mapped_column(String(100))
    weight: Mapped[Optional[str]] = mapped_column(String(32))
    gender: Mapped[Optional[str]] = mapped_column(String(20))
    size: Mapped[Optional[str]] = mapped_column(String(20))
    colors: Mapped[Optional[str]] = mapped_column(Text)
    color_name: Mapped[Optional[str]] = mapped_column(String(50))
    description: Mapped[Optional[str]] = mapped_column(String(2000))
    tag_number: Mapped[Optional[str]] = mapped_column(String(50))
    stock: Mapped[Optional[str]] = mapped_column(String(32))
    tags: Mapped[Optional[str]] = mapped_column(Text)
    slug: Mapped[Optional[str]] = mapped_column(
        String(100),
        comment="URL slug; unique across all products",
    )
    status: Mapped[Optional[str]] = mapped_column(String(20))
    visibility: Mapped[Optional[str]] = mapped_column(String(20))
    published_at: Mapped[Optional[str]] = mapped_column(String(40))
    is_signature_piece: Mapped[Optional[bool]] = mapped_column(Boolean)
    is_featured: Mapped[Optional[bool]] = mapped_column(Boolean)
    signature_label: Mapped[Optional[str]] = mapped_column(String(100))
    signature_story: Mapped[Optional[str]] = mapped_column(String(1000))
    allow_backorder: Mapped[Optional[bool]] = mapped_column(Boolean)
    is_preorder: Mapped[Optional[bool]] = mapped_column(Boolean)
    min_order_qty: Mapped[Optional[str]] = mapped_column(String(32))
    max_order_qty: Mapped[Optional[str]] = mapped_column(String(32))
    lead_time_days: Mapped[Optional[str]] = mapped_column(String(32))
    hs_code: Mapped[Optional[str]] = mapped_column(String(20))
    warranty_info: Mapped[Optional[str]] = mapped_column(String(500))
    size_guide_url: Mapped[Optional[str]] = mapped_column(Text)
    badges: Mapped[Optional[str]] = mapped_column(Text)
    sales: Mapped[Optional[str]] = mapped_column(String(32))
    quantity: Mapped[Optional[str]] = mapped_column(String(32))
    review_ui: Mapped[Optional[str]] = mapped_column(Text)
    sold_ui: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("slug", name="uq_product_basic_slug"),
    )


class ProductPricing(FacetMixin, Base):
    __tablename__ = "product_pricing"

    price: Mapped[Optional[str]] = mapped_column(String(32))
    price_usd: Mapped[Optional[str]] = mapped_column(String(32))
    currency: Mapped[Optional[str]] = mapped_column(String(3))
    discount: Mapped[Optional[str]] = mapped_column(String(32))
    discount_type: Mapped[Optional[str]] = mapped_column(String(20))
    compare_at_price: Mapped[Optional[str]] = mapped_column(String(32))
    sale_start_at: Mapped[Optional[str]] = mapped_column(String(40))
    sale_end_at: Mapped[Optional[str]] = mapped_column(String(40))
    discount_label: Mapped[Optional[str]] = mapped_column(String(100))
    tax: Mapped[Optional[str]] = mapped_column(String(32))


class ProductMedia(FacetMixin, Base):
    __tablename__ = "product_media"

    images: Mapped[Optional[str]] = mapped_column(Text)
    video_file: Mapped[Optional[str]] = mapped_column(Text)


class ProductSeo(FacetMixin, Base):
    __tablename__ = "product_seo"

    seo_title: Mapped[Optional[str]] = mapped_column(String(60))
    seo_description: Mapped[Optional[str]] = mapped_column(String(160))
    canonical_url: Mapped[Optional[str]] = mapped_column(Text)
    og_image: Mapped[Optional[str]] = mapped_column(Text)


class ProductAttributesTag(FacetMixin, Base):
    __tablename__ = "product_attributes_tag"

    attributes: Mapped[Optional[str]] = mapped_column(Text)
    tags: Mapped[Optional[str]] = mapped_column(Text)


class ProductVariants(FacetMixin, Base):
    __tablename__ = "product_variants"

    variants: Mapped[Optional[str]] = mapped_column(Text)


class ProductInventory(FacetMixin, Base):
    __tablename__ = "product_inventory"

    sku: Mapped[Optional[str]] = mapped_column(String(50))
    barcode: Mapped[Optional[str]] = mapped_column(String(50))
    inventory_quantity: Mapped[Optional[str]] = mapped_column(String(32))
    low_stock_threshold: Mapped[Optional[str]] = mapped_column(String(32))
    reorder_point: Mapped[Optional[str]] = mapped_column(String(32))
    reorder_quantity: Mapped[Optional[str]] = mapped_column(String(32))
    supplier: Mapped[Optional[str]] = mapped_column(String(100))
    supplier_sku: Mapped[Optional[str]] = mapped_column(String(50))
    cost_price: Mapped[Optional[str]] = mapped_column(String(32))
    margin: Mapped[Optional[str]] = mapped_column(String(32))
    location: Mapped[Optional[str]] = mapped_column(String(100))
    warehouse: Mapped[Optional[str]] = mapped_column(String(100))
    bin_location: Mapped[Optional[str]] = mapped_column(String(50))
    last_restocked: Mapped[Optional[str]] = mapped_column(String(40))
    next_restock_date: Mapped[Optional[str]] = mapped_column(String(40))
    inventory_status: Mapped[Optional[str]] = mapped_column(String(20))
    track_inventory: Mapped[Optional[bool]] = mapped_column(Boolean)
    reserved_quantity: Mapped[Optional[str]] = mapped_column(String(32))
    available_quantity: Mapped[Optional[str]] = mapped_column(String(32))


class ProductReels(FacetMixin, Base):
    __tablename__ = "product_reels"

    platform: Mapped[Optional[str]] = mapped_column(String(20))
    video_file: Mapped[Optional[str]] = mapped_column(Text)
    reel_title: Mapped[Optional[str]] = mapped_column(String(100))
    reel_description: Mapped[Optional[str]] = mapped_column(String(500))
    reel_language: Mapped[Optional[str]] = mapped_column(String(5))
    captions_url: Mapped[Optional[str]] = mapped_column(Text)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text)
    duration_sec: Mapped[Optional[str]] = mapped_column(String(32))
    aspect_ratio: Mapped[Optional[str]] = mapped_column(String(10))
    cta_url: Mapped[Optional[str]] = mapped_column(Text)
    reel_tags: Mapped[Optional[str]] = mapped_column(String(200))
    is_public: Mapped[Optional[bool]] = mapped_column(Boolean)
    is_pinned: Mapped[Optional[bool]] = mapped_column(Boolean)
    reel_order: Mapped[Optional[str]] = mapped_column(String(32))


class ProductItemDetails(FacetMixin, Base):
    __tablename__ = "product_item_details"

    material: Mapped[Optional[str]] = mapped_column(Text)
    warranty: Mapped[Optional[str]] = mapped_column(Text)
    certification: Mapped[Optional[str]] = mapped_column(Text)
    vendor_name: Mapped[Optional[str]] = mapped_column(Text)
    shipping_free_text: Mapped[Optional[str]] = mapped_column(Text)
    quality_guarantee_text: Mapped[Optional[str]] = mapped_column(Text)
    care_instructions_text: Mapped[Optional[str]] = mapped_column(Text)
    did_you_know: Mapped[Optional[str]] = mapped_column(Text)
    faqs: Mapped[Optional[str]] = mapped_column(Text)
    seller_blurb: Mapped[Optional[str]] = mapped_column(Text)
    # trustBadges input is split across exactly three slots
    trust_badge_1: Mapped[Optional[str]] = mapped_column(Text)
    trust_badge_2: Mapped[Optional[str]] = mapped_column(Text)
    trust_badge_3: Mapped[Optional[str]] = mapped_column(Text)


class ProductShippingPolicies(FacetMixin, Base):
    __tablename__ = "product_shipping_policies"

    shipping_info: Mapped[Optional[str]] = mapped_column(Text)
    shipping_notes: Mapped[Optional[str]] = mapped_column(Text)
    packaging_details: Mapped[Optional[str]] = mapped_column(Text)
    return_policy: Mapped[Optional[str]] = mapped_column(Text)
    return_window_days: Mapped[Optional[str]] = mapped_column(String(32))
    return_fees: Mapped[Optional[str]] = mapped_column(String(32))
    is_returnable: Mapped[Optional[bool]] = mapped_column(Boolean)
    exchange_policy: Mapped[Optional[str]] = mapped_column(String(1000))
    warranty_period_months: Mapped[Optional[str]] = mapped_column(String(32))
    warranty_type: Mapped[Optional[str]] = mapped_column(String(20))
    origin_country: Mapped[Optional[str]] = mapped_column(String(100))
    weight_kg: Mapped[Optional[str]] = mapped_column(String(32))
    dimensions: Mapped[Optional[str]] = mapped_column(String(50))
