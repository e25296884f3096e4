"""
Atelier Catalog — Product Route Handlers
==========================================

What:  HTTP surface over ProductService.
How:   Thin handlers: pull path/body/header values, call the service, wrap the
       result in a response schema. Domain errors propagate to the global
       exception handlers in main.py.

Route Inventory:
    POST /api/products                                create root + facets (201)
    GET  /api/products/{product_id}                   root + all facet slots
    PATCH /api/products/{product_id}                  partial root update
    GET  /api/products/{product_id}/facets/{facet}    one facet (data null if unwritten)
    PUT  /api/products/{product_id}/facets/{facet}    facet upsert
    PUT  /api/products/{product_id}/statistics/{stat} statistic update
    POST /api/products/{product_id}/views             views + 1

The optional X-Actor header is recorded as created_by/updated_by; without it
the configured default actor is used.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Header, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.product import (
    AggregateResponse,
    ErrorResponse,
    FacetResponse,
    ProductResponse,
    StatisticUpdate,
    facet_to_wire,
)
from app.services.facet_registry import split_create_payload
from app.services.product_service import product_service

router = APIRouter(prefix="/api", tags=["Products"])

_ERRORS = {
    400: {"description": "Invalid field value", "model": ErrorResponse},
    404: {"description": "Product, facet or reference not found", "model": ErrorResponse},
    409: {"description": "Name or slug already taken", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.post(
    "/products",
    response_model=AggregateResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Create a product with any subset of its facets",
)
async def create_product(
    payload: Dict[str, Any] = Body(
        ...,
        examples=[{
            "name": "Ring A",
            "price": 100,
            "basic": {"slug": "ring-a"},
            "pricing": {"price": 100, "currency": "USD"},
        }],
    ),
    x_actor: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> AggregateResponse:
    """
    Root fields sit at the top level; each facet is a nested object under
    its registry name. Everything is written in one transaction.
    """
    root_fields, facets = split_create_payload(payload)
    created = await product_service.create_aggregate(db, root_fields, facets, actor=x_actor)
    return AggregateResponse.from_rows(created.product, created.facets)


@router.get(
    "/products/{product_id}",
    response_model=AggregateResponse,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Get a product with all facets",
)
async def get_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> AggregateResponse:
    detail = await product_service.get_aggregate_detail(db, product_id)
    return AggregateResponse.from_rows(detail.product, detail.facets)


@router.patch(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses=_ERRORS,
    summary="Update the product's own fields",
)
async def update_product(
    product_id: UUID,
    payload: Dict[str, Any] = Body(..., examples=[{"name": "Ring A (18k)"}]),
    x_actor: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    product = await product_service.update_root(db, product_id, payload, actor=x_actor)
    return ProductResponse.model_validate(product)


@router.get(
    "/products/{product_id}/facets/{facet_name}",
    response_model=FacetResponse,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Get one facet of a product",
)
async def get_facet(
    product_id: UUID,
    facet_name: str,
    db: AsyncSession = Depends(get_db_session),
) -> FacetResponse:
    row = await product_service.get_facet_detail(db, product_id, facet_name)
    return FacetResponse(facet=facet_name, data=facet_to_wire(facet_name, row))


@router.put(
    "/products/{product_id}/facets/{facet_name}",
    response_model=FacetResponse,
    responses=_ERRORS,
    summary="Create or update one facet",
)
async def upsert_facet(
    product_id: UUID,
    facet_name: str,
    payload: Dict[str, Any] = Body(..., examples=[{"price": "10.00"}]),
    x_actor: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> FacetResponse:
    """Only the supplied fields change; an explicit null clears a field."""
    row = await product_service.update_facet(db, product_id, facet_name, payload, actor=x_actor)
    return FacetResponse(facet=facet_name, data=facet_to_wire(facet_name, row))


@router.put(
    "/products/{product_id}/statistics/{stat_name}",
    response_model=ProductResponse,
    responses={400: _ERRORS[400], 404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Set rating, reviewsCount or views",
)
async def update_statistic(
    product_id: UUID,
    stat_name: str,
    body: StatisticUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    product = await product_service.update_statistic(db, product_id, stat_name, body.value)
    return ProductResponse.model_validate(product)


@router.post(
    "/products/{product_id}/views",
    response_model=ProductResponse,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Count one view",
)
async def increment_views(
    product_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    product = await product_service.increment_views(db, product_id)
    return ProductResponse.model_validate(product)
