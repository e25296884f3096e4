"""
Atelier Catalog — External Reference Models
=============================================

What:  Minimal ORM mappings of the category, collection and signature-piece
       tables owned by the simple CRUD modules.
Why:   The basic facet points at these rows; the validation gate needs an
       "exists and not deleted" lookup for each. This service never writes them.
"""

import uuid

from sqlalchemy import Boolean, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import AuditMixin, SoftDeleteMixin


class ReferenceMixin(AuditMixin, SoftDeleteMixin):
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )


class Category(ReferenceMixin, Base):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Collection(ReferenceMixin, Base):
    __tablename__ = "collections"

    title: Mapped[str] = mapped_column(String(200), nullable=False)


class SignaturePiece(ReferenceMixin, Base):
    __tablename__ = "signature_pieces"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
