"""
Atelier Catalog — Validation Gate Tests
=========================================

What:  Name and slug uniqueness, and reference resolution, against a real
       (SQLite) database.
"""

import uuid

import pytest

from app.exceptions import ConflictError, NotFoundError
from app.models.facets import ProductBasic
from app.models.mixins import utcnow
from app.models.product import Product
from app.services.validation_gate import ValidationGate


async def _seed_product(session, name, slug=None, deleted=False):
    product = Product(name=name, is_deleted=deleted, deleted_at=utcnow() if deleted else None)
    session.add(product)
    await session.flush()
    if slug is not None:
        session.add(ProductBasic(product_id=product.id, slug=slug))
    await session.commit()
    return product


class TestNameUniqueness:

    def setup_method(self):
        self.gate = ValidationGate()

    @pytest.mark.asyncio
    async def test_taken_name_conflicts(self, db_session):
        await _seed_product(db_session, "Ring A")

        with pytest.raises(ConflictError) as exc_info:
            await self.gate.check_name_available(db_session, "Ring A")
        assert exc_info.value.field == "name"

    @pytest.mark.asyncio
    async def test_match_is_case_sensitive(self, db_session):
        await _seed_product(db_session, "Ring A")
        await self.gate.check_name_available(db_session, "ring a")

    @pytest.mark.asyncio
    async def test_deleted_products_release_their_name(self, db_session):
        await _seed_product(db_session, "Ring A", deleted=True)
        await self.gate.check_name_available(db_session, "Ring A")

    @pytest.mark.asyncio
    async def test_own_name_is_allowed_on_rename(self, db_session):
        product = await _seed_product(db_session, "Ring A")
        await self.gate.check_name_available(db_session, "Ring A", exclude_product_id=product.id)


class TestSlugUniqueness:

    def setup_method(self):
        self.gate = ValidationGate()

    @pytest.mark.asyncio
    async def test_slug_of_another_product_conflicts(self, db_session):
        await _seed_product(db_session, "Ring A", slug="ring-a")
        other = await _seed_product(db_session, "Ring B")

        with pytest.raises(ConflictError) as exc_info:
            await self.gate.run_for_facet_update(db_session, other.id, "basic", {"slug": "ring-a"})
        assert exc_info.value.field == "slug"

    @pytest.mark.asyncio
    async def test_own_slug_is_allowed(self, db_session):
        product = await _seed_product(db_session, "Ring A", slug="ring-a")
        await self.gate.run_for_facet_update(db_session, product.id, "basic", {"slug": "ring-a"})

    @pytest.mark.asyncio
    async def test_other_facets_skip_basic_checks(self, db_session):
        await _seed_product(db_session, "Ring A", slug="ring-a")
        other = await _seed_product(db_session, "Ring B")
        await self.gate.run_for_facet_update(db_session, other.id, "pricing", {"price": "10.00"})


class TestReferences:

    def setup_method(self):
        self.gate = ValidationGate()

    @pytest.mark.asyncio
    async def test_live_references_resolve(self, db_session, references):
        await self.gate.check_references(db_session, {
            "category_id": references.category_id,
            "collection_id": references.collection_id,
            "signature_piece_id": references.signature_piece_id,
        })

    @pytest.mark.asyncio
    async def test_deleted_category_is_not_found(self, db_session, references):
        with pytest.raises(NotFoundError) as exc_info:
            await self.gate.check_references(db_session, {"category_id": references.deleted_category_id})
        assert exc_info.value.resource == "category"
        assert exc_info.value.context["field"] == "categoryId"

    @pytest.mark.asyncio
    async def test_unknown_collection_is_not_found(self, db_session, references):
        with pytest.raises(NotFoundError) as exc_info:
            await self.gate.check_references(db_session, {"collection_id": uuid.uuid4()})
        assert exc_info.value.resource == "collection"

    @pytest.mark.asyncio
    async def test_cleared_references_are_skipped(self, db_session):
        await self.gate.check_references(db_session, {"category_id": None})


class TestRunForCreate:

    @pytest.mark.asyncio
    async def test_name_checked_before_basic(self, db_session, references):
        await _seed_product(db_session, "Ring A")
        gate = ValidationGate()

        with pytest.raises(ConflictError):
            await gate.run_for_create(
                db_session,
                {"name": "Ring A"},
                {"basic": {"category_id": references.deleted_category_id}},
            )
