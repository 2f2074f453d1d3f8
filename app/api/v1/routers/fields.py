"""
API router for field geometry endpoints.
"""
from fastapi import APIRouter, Query
from typing import Annotated

from app.api.v1.models.requests import FieldBoundaryRequest
from app.api.v1.models.responses import AreaResponse, AreaUnitsResponse, CentroidResponse
from app.utils.area_units import AREA_CONVERSION_FACTORS, convert_area, format_area
from app.utils.geometry import compute_centroid


router = APIRouter(
    prefix="/fields",
    tags=["fields"],
)


@router.post(
    "/centroid",
    response_model=CentroidResponse,
    summary="Resolve a field boundary to one coordinate",
    description="""
    Compute the centroid of a field polygon using the shoelace formula.

    Latitude is treated as x and longitude as y. Boundaries with no area
    (single point, duplicate or collinear vertices) resolve to their first
    vertex; an empty boundary resolves to null.
    """,
    responses={
        429: {"description": "Rate limit exceeded"},
    },
)
async def resolve_centroid(boundary: FieldBoundaryRequest) -> CentroidResponse:
    """
    Resolve a field boundary to its centroid.

    Args:
        boundary: Ordered field vertices

    Returns:
        CentroidResponse with the centroid (or null)
    """
    vertices = boundary.coordinates()
    return CentroidResponse(
        centroid=compute_centroid(vertices),
        vertex_count=len(vertices),
    )


@router.get(
    "/area",
    response_model=AreaResponse,
    summary="Convert a field area to a display unit",
    responses={
        400: {"description": "Unknown area unit"},
        429: {"description": "Rate limit exceeded"},
    },
)
async def convert_field_area(
    area_m2: Annotated[float, Query(ge=0, description="Field area in square meters")],
    unit: Annotated[str, Query(description="Target unit")] = "acres",
) -> AreaResponse:
    """
    Convert an area in square meters.

    Raises:
        ValueError: If the unit is unknown (mapped to 400)
    """
    return AreaResponse(
        area_m2=area_m2,
        unit=unit,
        area=convert_area(area_m2, unit),
        displayed_area=format_area(area_m2, unit),
    )


@router.get(
    "/area-units",
    response_model=AreaUnitsResponse,
    summary="List supported area units",
)
async def list_area_units() -> AreaUnitsResponse:
    return AreaUnitsResponse(factors=dict(AREA_CONVERSION_FACTORS))
