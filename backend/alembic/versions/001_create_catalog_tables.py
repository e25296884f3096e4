"""Create product aggregate tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  products, the ten facet tables, and the read-only reference tables
       (categories, collections, signature_pieces).
How:   Column types match app/models/*; decimal and integer facet values are
       strings, JSON values are compact text.

Rollback: downgrade() drops every table (destructive).
"""

from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NUMBER = sa.String(32)
DATE = sa.String(40)

FACET_TABLES = (
    "product_basic",
    "product_pricing",
    "product_media",
    "product_seo",
    "product_attributes_tag",
    "product_variants",
    "product_inventory",
    "product_reels",
    "product_item_details",
    "product_shipping_policies",
)


def _audit_columns() -> List[sa.Column]:
    return [
        sa.Column("created_by", sa.String(100), nullable=True),
        sa.Column("updated_by", sa.String(100), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def _soft_delete_columns() -> List[sa.Column]:
    return [
        sa.Column("is_deleted", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _reference_table(name: str, label: str, length: int) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(label, sa.String(length), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_soft_delete_columns(),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )


def _facet_table(name: str, *columns: sa.Column) -> None:
    """id + unique product_id FK (1:1 with products) + the facet's own columns."""
    op.create_table(
        name,
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        *columns,
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("product_id", name=f"uq_{name}_product_id"),
    )


def _cols(kind, *names: str) -> List[sa.Column]:
    return [sa.Column(n, kind, nullable=True) for n in names]


def upgrade() -> None:
    # ── External reference tables ─────────────────────────────────────────
    _reference_table("categories", "name", 100)
    _reference_table("collections", "title", 200)
    _reference_table("signature_pieces", "title", 200)

    # ── Aggregate root ────────────────────────────────────────────────────
    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("short_description", sa.String(500), nullable=True),
        sa.Column("price", NUMBER, nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("category_id", sa.Uuid(), nullable=True),
        sa.Column("rating", sa.String(8), server_default=sa.text("'0.00'"), nullable=False),
        sa.Column("reviews_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("views", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_soft_delete_columns(),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    # Name is unique only among live products
    op.create_index(
        "uq_products_name_active",
        "products",
        ["name"],
        unique=True,
        postgresql_where=sa.text("is_deleted = false"),
        sqlite_where=sa.text("is_deleted = 0"),
    )

    # ── Facets ────────────────────────────────────────────────────────────
    _facet_table(
        "product_basic",
        *_cols(sa.Uuid(), "category_id", "collection_id", "signature_piece_id"),
        sa.Column("brand", sa.String(100)),
        sa.Column("weight", NUMBER),
        sa.Column("gender", sa.String(20)),
        sa.Column("size", sa.String(20)),
        sa.Column("colors", sa.Text()),
        sa.Column("color_name", sa.String(50)),
        sa.Column("description", sa.String(2000)),
        sa.Column("tag_number", sa.String(50)),
        sa.Column("stock", NUMBER),
        sa.Column("tags", sa.Text()),
        sa.Column("slug", sa.String(100)),
        sa.Column("status", sa.String(20)),
        sa.Column("visibility", sa.String(20)),
        sa.Column("published_at", DATE),
        *_cols(sa.Boolean(), "is_signature_piece", "is_featured"),
        sa.Column("signature_label", sa.String(100)),
        sa.Column("signature_story", sa.String(1000)),
        *_cols(sa.Boolean(), "allow_backorder", "is_preorder"),
        *_cols(NUMBER, "min_order_qty", "max_order_qty", "lead_time_days"),
        sa.Column("hs_code", sa.String(20)),
        sa.Column("warranty_info", sa.String(500)),
        *_cols(sa.Text(), "size_guide_url", "badges"),
        *_cols(NUMBER, "sales", "quantity"),
        *_cols(sa.Text(), "review_ui", "sold_ui"),
        sa.UniqueConstraint("slug", name="uq_product_basic_slug"),
    )
    _facet_table(
        "product_pricing",
        *_cols(NUMBER, "price", "price_usd"),
        sa.Column("currency", sa.String(3)),
        sa.Column("discount", NUMBER),
        sa.Column("discount_type", sa.String(20)),
        sa.Column("compare_at_price", NUMBER),
        *_cols(DATE, "sale_start_at", "sale_end_at"),
        sa.Column("discount_label", sa.String(100)),
        sa.Column("tax", NUMBER),
    )
    _facet_table("product_media", *_cols(sa.Text(), "images", "video_file"))
    _facet_table(
        "product_seo",
        sa.Column("seo_title", sa.String(60)),
        sa.Column("seo_description", sa.String(160)),
        *_cols(sa.Text(), "canonical_url", "og_image"),
    )
    _facet_table("product_attributes_tag", *_cols(sa.Text(), "attributes", "tags"))
    _facet_table("product_variants", sa.Column("variants", sa.Text()))
    _facet_table(
        "product_inventory",
        *_cols(sa.String(50), "sku", "barcode"),
        *_cols(NUMBER, "inventory_quantity", "low_stock_threshold", "reorder_point", "reorder_quantity"),
        sa.Column("supplier", sa.String(100)),
        sa.Column("supplier_sku", sa.String(50)),
        *_cols(NUMBER, "cost_price", "margin"),
        *_cols(sa.String(100), "location", "warehouse"),
        sa.Column("bin_location", sa.String(50)),
        *_cols(DATE, "last_restocked", "next_restock_date"),
        sa.Column("inventory_status", sa.String(20)),
        sa.Column("track_inventory", sa.Boolean()),
        *_cols(NUMBER, "reserved_quantity", "available_quantity"),
    )
    _facet_table(
        "product_reels",
        sa.Column("platform", sa.String(20)),
        sa.Column("video_file", sa.Text()),
        sa.Column("reel_title", sa.String(100)),
        sa.Column("reel_description", sa.String(500)),
        sa.Column("reel_language", sa.String(5)),
        *_cols(sa.Text(), "captions_url", "thumbnail_url"),
        sa.Column("duration_sec", NUMBER),
        sa.Column("aspect_ratio", sa.String(10)),
        sa.Column("cta_url", sa.Text()),
        sa.Column("reel_tags", sa.String(200)),
        *_cols(sa.Boolean(), "is_public", "is_pinned"),
        sa.Column("reel_order", NUMBER),
    )
    _facet_table(
        "product_item_details",
        *_cols(
            sa.Text(),
            "material", "warranty", "certification", "vendor_name",
            "shipping_free_text", "quality_guarantee_text", "care_instructions_text",
            "did_you_know", "faqs", "seller_blurb",
            "trust_badge_1", "trust_badge_2", "trust_badge_3",
        ),
    )
    _facet_table(
        "product_shipping_policies",
        *_cols(sa.Text(), "shipping_info", "shipping_notes", "packaging_details", "return_policy"),
        *_cols(NUMBER, "return_window_days", "return_fees"),
        sa.Column("is_returnable", sa.Boolean()),
        sa.Column("exchange_policy", sa.String(1000)),
        sa.Column("warranty_period_months", NUMBER),
        sa.Column("warranty_type", sa.String(20)),
        sa.Column("origin_country", sa.String(100)),
        sa.Column("weight_kg", NUMBER),
        sa.Column("dimensions", sa.String(50)),
    )


def downgrade() -> None:
    for name in reversed(FACET_TABLES):
        op.drop_table(name)
    op.drop_index("uq_products_name_active", table_name="products")
    op.drop_table("products")
    op.drop_table("signature_pieces")
    op.drop_table("collections")
    op.drop_table("categories")
