"""
Atelier Catalog — Validation Gate
===================================

What:  Cross-row checks that must pass before anything is added to the
       session: name uniqueness, slug uniqueness, and reference resolution.
How:   Read-only SELECTs on the caller's AsyncSession. Runs after the
       normalizer, so inputs are already canonical column values.
Who:   ProductService (create_aggregate, update_facet, update_root).

These checks are best-effort under concurrency; the partial unique index on
products.name and the unique constraint on product_basic.slug are the
backstop, and the service maps their IntegrityError to ConflictError.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, NotFoundError
from app.models.facets import ProductBasic
from app.models.product import Product
from app.models.reference import Category, Collection, SignaturePiece

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceLookup:
    """An external store consulted with an "exists and not deleted" query."""
    column: str      # basic facet column holding the id
    field: str       # wire name, for error reporting
    resource: str
    model: Type[Any]

    async def exists(self, db: AsyncSession, ref_id: uuid.UUID) -> bool:
        result = await db.execute(
            select(self.model.id).where(
                self.model.id == ref_id,
                self.model.is_deleted.is_(False),
            )
        )
        return result.scalar_one_or_none() is not None


REFERENCE_LOOKUPS: Tuple[ReferenceLookup, ...] = (
    ReferenceLookup("category_id", "categoryId", "category", Category),
    ReferenceLookup("collection_id", "collectionId", "collection", Collection),
    ReferenceLookup("signature_piece_id", "signaturePieceId", "signature piece", SignaturePiece),
)


class ValidationGate:
    """Stateless; every method takes the request's session."""

    def __init__(self, lookups: Tuple[ReferenceLookup, ...] = REFERENCE_LOOKUPS):
        self.lookups = lookups

    async def check_name_available(
        self,
        db: AsyncSession,
        name: str,
        exclude_product_id: Optional[uuid.UUID] = None,
    ) -> None:
        """Exact, case-sensitive match among non-deleted products."""
        query = select(Product.id).where(
            Product.name == name,
            Product.is_deleted.is_(False),
        )
        if exclude_product_id is not None:
            query = query.where(Product.id != exclude_product_id)

        result = await db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            logger.warning("Rejected duplicate product name: %r", name)
            raise ConflictError(
                message="A product with this name already exists",
                field="name",
            )

    async def check_slug_available(
        self,
        db: AsyncSession,
        slug: str,
        exclude_product_id: Optional[uuid.UUID] = None,
    ) -> None:
        query = select(ProductBasic.id).where(ProductBasic.slug == slug)
        if exclude_product_id is not None:
            query = query.where(ProductBasic.product_id != exclude_product_id)

        result = await db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            logger.warning("Rejected duplicate slug: %r", slug)
            raise ConflictError(
                message="A product with this slug already exists",
                field="slug",
            )

    async def check_references(self, db: AsyncSession, basic_values: Mapping[str, Any]) -> None:
        """Every supplied (non-null) reference id must resolve."""
        for lookup in self.lookups:
            ref_id = basic_values.get(lookup.column)
            if ref_id is None:
                continue
            if not await lookup.exists(db, ref_id):
                logger.warning("Rejected unresolved %s reference %s", lookup.resource, ref_id)
                raise NotFoundError(
                    resource=lookup.resource,
                    resource_id=str(ref_id),
                    context={"field": lookup.field},
                )

    async def check_basic(
        self,
        db: AsyncSession,
        basic_values: Mapping[str, Any],
        exclude_product_id: Optional[uuid.UUID] = None,
    ) -> None:
        slug = basic_values.get("slug")
        if slug is not None:
            await self.check_slug_available(db, slug, exclude_product_id)
        await self.check_references(db, basic_values)

    async def run_for_create(
        self,
        db: AsyncSession,
        root_values: Mapping[str, Any],
        facet_values: Dict[str, Dict[str, Any]],
    ) -> None:
        await self.check_name_available(db, root_values["name"])
        if "basic" in facet_values:
            await self.check_basic(db, facet_values["basic"])

    async def run_for_facet_update(
        self,
        db: AsyncSession,
        product_id: uuid.UUID,
        facet_name: str,
        values: Mapping[str, Any],
    ) -> None:
        # Only the basic facet carries cross-row constraints
        if facet_name == "basic":
            await self.check_basic(db, values, exclude_product_id=product_id)

    async def run_for_root_update(
        self,
        db: AsyncSession,
        product_id: uuid.UUID,
        values: Mapping[str, Any],
    ) -> None:
        if "name" in values:
            await self.check_name_available(db, values["name"], exclude_product_id=product_id)


validation_gate = ValidationGate()
