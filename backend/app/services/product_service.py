"""
Atelier Catalog — Product Service (Aggregate Orchestrator)
============================================================

What:  Creates products together with their facets, upserts single facets,
       assembles the full aggregate for reads, and maintains statistics.
How:   normalize (pure) → gate (read-only queries) → write → commit, all on
       the request's AsyncSession.
Who:   Called by the /api/products route handlers and directly by tests.

Write Flow (create_aggregate):
    ┌───────────┐    ┌────────────┐    ┌──────────────┐    ┌──────────────┐
    │ Normalize │───▶│    Gate    │───▶│ INSERT root  │───▶│ INSERT facets│──▶ COMMIT
    │ root +    │    │ name, slug │    │ flush → id   │    │ registry     │
    │ facets    │    │ references │    │              │    │ order        │
    └───────────┘    └────────────┘    └──────────────┘    └──────────────┘

    Any failure rolls the whole transaction back: either the root and every
    supplied facet exist, or none of them do.

Error Translation:
    CatalogError        → rolled back, re-raised unchanged
    IntegrityError      → ConflictError (a concurrent writer won a unique key)
    SQLAlchemyError     → InternalError (details logged, never returned)

ProductService is stateless and safe to share; concurrency comes from
separate sessions, not from anything held here.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import CatalogError, ConflictError, InternalError, NotFoundError, ValidationError
from app.models.mixins import utcnow
from app.models.product import Product
from app.services.facet_registry import FACET_REGISTRY, STATISTIC_FIELDS, get_facet
from app.services.normalizer import normalize_facet, normalize_root, normalize_statistic
from app.services.validation_gate import ValidationGate, validation_gate

logger = logging.getLogger(__name__)


@dataclass
class CreatedAggregate:
    """Result of create_aggregate: the root plus the facet rows it inserted."""
    product: Product
    facets: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AggregateDetail:
    """Full read of one product; every registered facet name is a key."""
    product: Product
    facets: Dict[str, Optional[Any]] = field(default_factory=dict)


# Constraint name (PostgreSQL) or table.column (SQLite) → wire field
CONFLICT_FIELDS = {
    "uq_product_basic_slug": "slug",
    "product_basic.slug": "slug",
    "uq_products_name_active": "name",
    "products.name": "name",
}


def _conflict_field(exc: IntegrityError) -> Optional[str]:
    # Only the first line; later lines echo the conflicting key values
    lines = str(exc.orig).splitlines()
    headline = lines[0] if lines else ""
    for marker, wire_name in CONFLICT_FIELDS.items():
        if marker in headline:
            return wire_name
    return None


class ProductService:
    """
    Business logic for the product aggregate.

    Responsibilities:
        - create_aggregate():     root + any subset of facets, atomically
        - update_facet():         create-or-update one facet (lazy activation)
        - get_aggregate_detail(): root with all ten facet slots
        - get_facet_detail():     one facet row or None
        - update_statistic():     rating / reviewsCount / views
        - increment_views():      storage-level views = views + 1
        - update_root():          partial update of the root's own fields,
                                  price mirrored into the pricing facet
    """

    def __init__(self, gate: ValidationGate = validation_gate):
        self.gate = gate

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _actor(actor: Optional[str]) -> str:
        return actor or settings.default_actor

    @asynccontextmanager
    async def _storage_guard(self, db: AsyncSession, operation: str) -> AsyncIterator[None]:
        """Roll back on any failure and translate storage errors."""
        try:
            yield
        except CatalogError:
            await db.rollback()
            raise
        except IntegrityError as exc:
            await db.rollback()
            conflict_field = _conflict_field(exc)
            logger.warning("%s violated a unique constraint (field=%s)", operation, conflict_field)
            raise ConflictError(
                message="A product with this data already exists",
                field=conflict_field,
                context={"operation": operation},
            ) from exc
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("Database error during %s: %s", operation, str(exc), exc_info=True)
            raise InternalError(
                context={"operation": operation, "error_type": type(exc).__name__},
            ) from exc

    async def _get_product(
        self,
        db: AsyncSession,
        product_id: uuid.UUID,
        refresh: bool = False,
    ) -> Product:
        query = select(Product).where(
            Product.id == product_id,
            Product.is_deleted.is_(False),
        )
        if refresh:
            query = query.execution_options(populate_existing=True)

        result = await db.execute(query)
        product = result.scalar_one_or_none()
        if product is None:
            raise NotFoundError(resource="product", resource_id=str(product_id))
        return product

    @staticmethod
    def _normalize_create_facets(facets: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
        """Normalized facet values keyed by name, in registry order."""
        for name in facets:
            if name not in FACET_REGISTRY:
                raise ValidationError(message=f"Unknown facet '{name}'", field=name)

        return {
            name: normalize_facet(name, facets[name])
            for name in FACET_REGISTRY
            if facets.get(name) is not None
        }

    # ── Operations ────────────────────────────────────────────────────────

    async def create_aggregate(
        self,
        db: AsyncSession,
        root_fields: Mapping[str, Any],
        facets: Optional[Mapping[str, Any]] = None,
        actor: Optional[str] = None,
    ) -> CreatedAggregate:
        """
        Create a product and any subset of its facets in one transaction.

        A facet whose payload is None is skipped; an empty mapping creates
        an empty facet row. Statistics start at zero whatever the input says.

        Raises:
            ValidationError: a root or facet field failed normalization
            ConflictError:   name or slug already taken
            NotFoundError:   a basic facet reference does not resolve
            InternalError:   storage failed; nothing was persisted
        """
        actor = self._actor(actor)
        root_values = normalize_root(root_fields)
        facet_values = self._normalize_create_facets(facets or {})

        async with self._storage_guard(db, "create_aggregate"):
            await self.gate.run_for_create(db, root_values, facet_values)

            product = Product(**root_values, created_by=actor, updated_by=actor)
            basic = facet_values.get("basic") or {}
            if basic.get("category_id") is not None:
                product.category_id = basic["category_id"]
            db.add(product)
            await db.flush()

            rows: Dict[str, Any] = {}
            for name, values in facet_values.items():
                row = FACET_REGISTRY[name].model(
                    product_id=product.id,
                    created_by=actor,
                    updated_by=actor,
                    **values,
                )
                db.add(row)
                rows[name] = row
            await db.flush()
            await db.commit()

        logger.info(
            "Created product %s (%r) with facets: %s",
            product.id,
            product.name,
            ", ".join(rows) or "none",
        )
        return CreatedAggregate(product=product, facets=rows)

    async def update_facet(
        self,
        db: AsyncSession,
        product_id: uuid.UUID,
        facet_name: str,
        partial_fields: Mapping[str, Any],
        actor: Optional[str] = None,
    ) -> Any:
        """
        Create the facet row if absent, otherwise set only the supplied columns.

        Sibling facets are untouched; concurrent updates of the same facet
        are last-write-wins.
        """
        facet = get_facet(facet_name)
        if facet is None:
            raise NotFoundError(resource="facet", resource_id=facet_name)
        actor = self._actor(actor)

        async with self._storage_guard(db, "update_facet"):
            product = await self._get_product(db, product_id)
            values = normalize_facet(facet_name, partial_fields)
            await self.gate.run_for_facet_update(db, product.id, facet_name, values)

            result = await db.execute(
                select(facet.model).where(facet.model.product_id == product.id)
            )
            row = result.scalar_one_or_none()
            created = row is None
            if created:
                row = facet.model(
                    product_id=product.id,
                    created_by=actor,
                    updated_by=actor,
                    **values,
                )
                db.add(row)
            else:
                for column, value in values.items():
                    setattr(row, column, value)
                row.updated_by = actor
                row.updated_at = utcnow()

            await db.flush()
            await db.commit()

        logger.info(
            "%s facet '%s' for product %s (%d fields)",
            "Created" if created else "Updated",
            facet_name,
            product_id,
            len(values),
        )
        return row

    async def get_aggregate_detail(self, db: AsyncSession, product_id: uuid.UUID) -> AggregateDetail:
        """
        Root plus every facet slot; a facet that was never written is None.

        Query plan: one PK lookup on products, then one lookup per facet table
        through its unique product_id index.
        """
        async with self._storage_guard(db, "get_aggregate_detail"):
            product = await self._get_product(db, product_id)
            facets: Dict[str, Optional[Any]] = {}
            for name, facet in FACET_REGISTRY.items():
                result = await db.execute(
                    select(facet.model).where(facet.model.product_id == product.id)
                )
                facets[name] = result.scalar_one_or_none()

        return AggregateDetail(product=product, facets=facets)

    async def get_facet_detail(
        self,
        db: AsyncSession,
        product_id: uuid.UUID,
        facet_name: str,
    ) -> Optional[Any]:
        """One facet row of a live product, or None if it was never written."""
        facet = get_facet(facet_name)
        if facet is None:
            raise NotFoundError(resource="facet", resource_id=facet_name)

        async with self._storage_guard(db, "get_facet_detail"):
            product = await self._get_product(db, product_id)
            result = await db.execute(
                select(facet.model).where(facet.model.product_id == product.id)
            )
            row = result.scalar_one_or_none()

        logger.debug("Read facet '%s' for product %s (present=%s)", facet_name, product_id, row is not None)
        return row

    async def update_statistic(
        self,
        db: AsyncSession,
        product_id: uuid.UUID,
        stat_name: str,
        value: Any,
    ) -> Product:
        """Set rating (0..5, two places), reviewsCount or views (int ≥ 0)."""
        stored = normalize_statistic(stat_name, value)
        column = STATISTIC_FIELDS[stat_name].column

        async with self._storage_guard(db, "update_statistic"):
            product = await self._get_product(db, product_id)
            setattr(product, column, stored)
            await db.flush()
            await db.commit()

        logger.info("Set %s=%s on product %s", stat_name, stored, product_id)
        return product

    async def increment_views(self, db: AsyncSession, product_id: uuid.UUID) -> Product:
        """Atomic views = views + 1, computed by the database."""
        async with self._storage_guard(db, "increment_views"):
            result = await db.execute(
                update(Product)
                .where(Product.id == product_id, Product.is_deleted.is_(False))
                .values(views=Product.views + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(resource="product", resource_id=str(product_id))
            await db.commit()
            product = await self._get_product(db, product_id, refresh=True)

        logger.debug("Incremented views for product %s", product_id)
        return product

    async def update_root(
        self,
        db: AsyncSession,
        product_id: uuid.UUID,
        partial_fields: Mapping[str, Any],
        actor: Optional[str] = None,
    ) -> Product:
        """
        Partial update of name, shortDescription, price and image.

        A non-null price is mirrored into the pricing facet's price and
        priceUSD in the same transaction, creating that facet (currency USD)
        if the product has none yet.
        """
        values = normalize_root(partial_fields, partial=True)
        actor = self._actor(actor)
        new_price = values.get("price")

        async with self._storage_guard(db, "update_root"):
            product = await self._get_product(db, product_id)
            await self.gate.run_for_root_update(db, product.id, values)
            for column, value in values.items():
                setattr(product, column, value)
            product.updated_by = actor
            product.updated_at = utcnow()

            if new_price is not None:
                await self._sync_pricing(db, product.id, new_price, actor)

            await db.flush()
            await db.commit()

        logger.info(
            "Updated product %s (%s)%s",
            product_id,
            ", ".join(values) or "no fields",
            "; pricing synced" if new_price is not None else "",
        )
        return product

    async def _sync_pricing(
        self,
        db: AsyncSession,
        product_id: uuid.UUID,
        price: str,
        actor: str,
    ) -> None:
        pricing = FACET_REGISTRY["pricing"].model
        result = await db.execute(select(pricing).where(pricing.product_id == product_id))
        row = result.scalar_one_or_none()
        if row is None:
            db.add(pricing(
                product_id=product_id,
                price=price,
                price_usd=price,
                currency="USD",
                created_by=actor,
                updated_by=actor,
            ))
            return
        row.price = price
        row.price_usd = price
        row.updated_by = actor
        row.updated_at = utcnow()


# ── Singleton Instance ────────────────────────────────────────────────────
product_service = ProductService()
