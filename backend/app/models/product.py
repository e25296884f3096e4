"""
Atelier Catalog — Product (Aggregate Root) SQLAlchemy Model
=============================================================

What:  ORM model for the `products` table: the root every facet hangs off.
Who:   Written by ProductService; read by the Read Assembler and the
       validation gate's name-uniqueness check.

Table Design:
    - UUID primary key, generated in Python at insert; never updated
    - price and rating are decimal-as-string (see FieldKind.DECIMAL)
    - rating / reviews_count / views are statistics; only the dedicated
      statistic operations write them
    - name is unique among non-deleted products through a partial unique
      index, the storage-level backstop for the pre-write check
"""

import uuid
from typing import Optional

from sqlalchemy import Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import AuditMixin, SoftDeleteMixin


class Product(AuditMixin, SoftDeleteMixin, Base):
    """
    The aggregate root of a catalog product.

    Lifecycle:
        1. Created together with any subset of facets in one transaction
        2. Root fields change through update_root; statistics through
           update_statistic / increment_views
        3. No delete path in this service (is_deleted is honoured, not set)
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Immutable product identifier",
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Display name; unique among non-deleted products (case-sensitive)",
    )

    short_description: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="Short description for listings",
    )

    price: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True,
        comment="Base price, decimal-as-string with two places",
    )

    image: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Opaque path of the main image produced by the upload step",
    )

    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        comment="Mirror of basic.category_id taken at creation time",
    )

    # ── Statistics (read-only for general writes) ─────────────────────────
    rating: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        default="0.00",
        server_default=text("'0.00'"),
        comment="Average rating 0..5, decimal-as-string",
    )
    reviews_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    views: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    __table_args__ = (
        Index(
            "uq_products_name_active",
            "name",
            unique=True,
            postgresql_where=text("is_deleted = false"),
            sqlite_where=text("is_deleted = 0"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}')>"
