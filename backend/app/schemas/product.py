"""
Atelier Catalog — Pydantic Request/Response Schemas
=====================================================

What:  The API contract for the product aggregate endpoints.
How:   Response models read straight off ORM rows (from_attributes) and
       serialize with camelCase aliases; facet rows are rendered through the
       Facet Registry's wire names instead of a hand-written model per facet.
Who:   Route handlers (response_model) and the OpenAPI docs.

Request bodies are deliberately loose (plain JSON objects): field-level rules
live in the normalizer so the HTTP surface and direct service calls reject
exactly the same input.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.services.facet_registry import column_wire_names, get_facet


def facet_to_wire(facet_name: str, row: Any) -> Optional[Dict[str, Any]]:
    """
    Render one facet row as a camelCase dict; None stays None.

    Registered fields use their registry wire name (price_usd → priceUSD);
    bookkeeping columns are camelized (product_id → productId).
    """
    if row is None:
        return None
    facet = get_facet(facet_name)
    names = column_wire_names(facet) if facet is not None else {}
    return {
        names.get(column.key, to_camel(column.key)): getattr(row, column.key)
        for column in row.__table__.columns
    }


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    """The aggregate root as returned to clients."""
    id: uuid.UUID = Field(description="Immutable product identifier")
    name: str = Field(description="Display name, unique among live products")
    short_description: Optional[str] = Field(default=None, description="Listing blurb")
    price: Optional[str] = Field(default=None, description="Decimal-as-string, two places")
    image: Optional[str] = Field(default=None, description="Opaque main image path")
    category_id: Optional[uuid.UUID] = Field(default=None, description="Category at creation time")
    rating: str = Field(description="Average rating 0..5")
    reviews_count: int = Field(description="Number of reviews")
    views: int = Field(description="View counter")
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AggregateResponse(BaseModel):
    """
    A product with its facets.

    On creation `facets` holds only the facets that were written; on a detail
    read it holds every registered facet name, null where none exists.
    """
    product: ProductResponse
    facets: Dict[str, Optional[Dict[str, Any]]] = Field(default_factory=dict)

    @classmethod
    def from_rows(cls, product: Any, facets: Mapping[str, Any]) -> "AggregateResponse":
        return cls(
            product=ProductResponse.model_validate(product),
            facets={name: facet_to_wire(name, row) for name, row in facets.items()},
        )


class FacetResponse(BaseModel):
    """One facet row; data is null when the facet was never written."""
    facet: str = Field(description="Registry name of the facet")
    data: Optional[Dict[str, Any]] = Field(description="Stored fields keyed by wire name")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class StatisticUpdate(BaseModel):
    """Body of PUT /api/products/{id}/statistics/{stat_name}."""
    value: Any = Field(description="New value; rating accepts 0..5, counts accept integers ≥ 0")


# ══════════════════════════════════════════════════════════════════════════
# Error and Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    Example:
        {
            "error": "conflict",
            "message": "A product with this name already exists",
            "details": {"field": "name"},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
