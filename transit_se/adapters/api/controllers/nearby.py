from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from transit_se.adapters.api.dependencies import get_nearby_vehicles_service
from transit_se.adapters.api.schemas.nearby import (
    NearbyVehiclesResponseSchema,
    UsageSchema,
    result_to_schema,
    usage_to_schema,
)
from transit_se.app.services.nearby_vehicles_service import NearbyVehiclesService
from transit_se.domain.models import NearbyVehiclesQuery

router = APIRouter(tags=["nearby"])


@router.get("/nearby-vehicles", response_model=NearbyVehiclesResponseSchema)
async def nearby_vehicles(
    site_id: int | None = Query(default=None),
    site_name: str | None = Query(default=None),
    latitude: float | None = Query(default=None, ge=-90.0, le=90.0),
    longitude: float | None = Query(default=None, ge=-180.0, le=180.0),
    # Out-of-range radii are clamped by the service, not rejected here.
    radius_km: float | None = Query(default=None),
    service: NearbyVehiclesService = Depends(get_nearby_vehicles_service),
) -> NearbyVehiclesResponseSchema:
    result = await service.get_nearby_vehicles(
        NearbyVehiclesQuery(
            site_id=site_id,
            site_name=site_name,
            latitude=latitude,
            longitude=longitude,
            radius_km=radius_km,
        )
    )
    return result_to_schema(result)


@router.get("/usage", response_model=UsageSchema)
def usage(
    service: NearbyVehiclesService = Depends(get_nearby_vehicles_service),
) -> UsageSchema:
    return usage_to_schema(service.get_usage())
