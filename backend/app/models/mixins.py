"""
Atelier Catalog — Shared Column Mixins
========================================

What:  Audit and soft-delete columns shared by the product root, the ten
       facet tables and the external reference tables.
How:   Declarative mixins; SQLAlchemy copies the mapped_column definitions
       into every subclass table.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware current time; all timestamps are stored in UTC."""
    return datetime.now(timezone.utc)


class AuditMixin:
    """created_by/updated_by actors plus created_at/updated_at timestamps."""

    created_by: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Actor that created the row",
    )
    updated_by: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Actor that last modified the row",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this row was created (UTC)",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this row was last modified (UTC)",
    )


class SoftDeleteMixin:
    """isDeleted/deletedAt pattern used by products and the simple entities."""

    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
