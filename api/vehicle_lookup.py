import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from agents.vehicle_registry.client import VehicleRegistryClient, VehicleRegistryError
from config import get_settings
from models.vehicle_registry import VehicleRegistryResponse

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@lru_cache()
def get_vehicle_registry_client() -> VehicleRegistryClient:
    return VehicleRegistryClient.from_settings(settings)


@router.get("/vehicle-lookup", response_model=VehicleRegistryResponse, response_model_exclude_none=True)
async def vehicle_lookup(
    plate: Optional[str] = Query(None),
    client: VehicleRegistryClient = Depends(get_vehicle_registry_client),
):
    """
    Look up a Norwegian vehicle in the Statens vegvesen registry.

    Args:
        plate: Registration number, e.g. 'EB34033'

    Returns:
        Make, model, year and technical data of the vehicle
    """
    plate = (plate or "").strip()
    if not plate:
        return JSONResponse(status_code=400, content={"success": False, "error": "License plate is required"})

    try:
        car = await client.lookup(plate)
    except VehicleRegistryError as e:
        logger.error(f"Vehicle lookup failed for {plate}: {e.message}")
        return JSONResponse(status_code=e.status_code, content={"success": False, "error": e.message})

    return VehicleRegistryResponse(car=car)
