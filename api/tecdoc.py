import logging
from functools import lru_cache
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from agents.tecdoc.assembly_groups import (
    BRAKE_ASSEMBLY_GROUPS,
    COMMON_ASSEMBLY_GROUPS,
    PARENT_ASSEMBLY_GROUPS,
)
from agents.tecdoc.cache import ResponseCache
from agents.tecdoc.client import TecDocClient
from agents.tecdoc.enrichment import enrich_with_details
from agents.tecdoc.errors import TecDocError, TecDocNotFoundError
from agents.tecdoc.mock import FIXTURE_CAR_ID, fixture_vehicle
from agents.tecdoc.utils import article_from_details, build_assembly_group_tree, sort_for_display
from config import get_settings
from models.parts_lookup import (
    ArticleLookupResponse,
    AssemblyGroupsResponse,
    CommonAssemblyGroupsResponse,
    PartsByPlateResponse,
    PartsResponse,
    VehicleDetailsResponse,
    VehicleLookupResponse,
    article_summary,
    part_summary,
    vehicle_summary,
)
from models.tecdoc import Article, PlateVehicle

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@lru_cache()
def get_response_cache() -> ResponseCache:
    """One response cache per process, shared by every gateway instance."""
    return ResponseCache(
        ttl_seconds=settings.TECDOC_CACHE_TTL_SECONDS,
        max_entries=settings.TECDOC_CACHE_MAX_ENTRIES,
    )


@lru_cache()
def _shared_client(use_mock_data: bool) -> TecDocClient:
    return TecDocClient.from_settings(settings, cache=get_response_cache(), use_mock_data=use_mock_data)


def get_tecdoc_client(use_mock_data: bool = Query(False, alias="useMockData")) -> TecDocClient:
    return _shared_client(use_mock_data)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _vehicle_for_id(vehicle_id: int) -> PlateVehicle:
    if vehicle_id == FIXTURE_CAR_ID:
        return PlateVehicle.model_validate(fixture_vehicle())
    return PlateVehicle(
        car_id=vehicle_id,
        car_name="Unknown Vehicle",
        country="NO",
        linking_target_type="P",
        sub_linkage_target_type="V",
        manu_id=0,
        model_id=0,
    )


async def _list_vehicle_parts(
    client: TecDocClient,
    vehicle_id: int,
    article_type: Optional[int],
    assembly_group_id: Optional[int],
    include_details: bool,
) -> Tuple[List[Article], int]:
    compatible = await client.get_compatible_parts(vehicle_id, article_type, assembly_group_id)
    logger.info(f"Found {len(compatible.articles)} parts for vehicle {vehicle_id}")

    parts = sort_for_display(compatible.articles)
    if include_details and parts:
        parts = await enrich_with_details(
            client,
            parts,
            limit=settings.TECDOC_DETAILS_LIMIT,
            max_in_flight=settings.TECDOC_DETAILS_MAX_IN_FLIGHT,
        )
    return parts, compatible.total_matching_articles


@router.get("/tecdoc/vehicle", response_model=VehicleLookupResponse)
async def lookup_vehicle(
    plate: Optional[str] = Query(None),
    country: str = Query("NO"),
    client: TecDocClient = Depends(get_tecdoc_client),
):
    """
    Look up a vehicle by license plate.

    Args:
        plate: Registration number
        country: Registration country, defaults to Norway

    Returns:
        The first matching vehicle, split into manufacturer and model
    """
    plate = (plate or "").strip()
    if not plate:
        return _error_response(400, "License plate is required")

    try:
        response = await client.get_vehicle_by_license_plate(plate, country.strip() or "NO")
    except TecDocError as e:
        logger.error(f"TecDoc vehicle lookup error: {e}")
        return _error_response(500, str(e))

    if not response.data.array:
        return _error_response(404, "Vehicle not found")

    vehicle = response.data.array[0]
    logger.info(f"Found vehicle {vehicle.car_id} ({vehicle.car_name}) for plate {plate}")
    return VehicleLookupResponse(vehicle=vehicle_summary(vehicle))


@router.get("/tecdoc/vehicle/details", response_model=VehicleDetailsResponse)
async def get_vehicle_details(
    vehicle_id: Optional[int] = Query(None, alias="vehicleId"),
    client: TecDocClient = Depends(get_tecdoc_client),
):
    if not vehicle_id:
        return _error_response(400, "Vehicle ID is required")

    try:
        response = await client.get_vehicle_details(vehicle_id)
    except TecDocNotFoundError as e:
        return _error_response(404, str(e))
    except TecDocError as e:
        logger.error(f"TecDoc vehicle details error: {e}")
        return _error_response(500, str(e))

    return VehicleDetailsResponse(vehicle=response.data)


@router.get("/tecdoc/parts", response_model=PartsResponse)
async def get_parts(
    vehicle_id: Optional[int] = Query(None, alias="vehicleId"),
    article_type: Optional[int] = Query(None, alias="articleType"),
    assembly_group_id: Optional[int] = Query(None, alias="assemblyGroupId"),
    include_details: bool = Query(False, alias="includeDetails"),
    article_number: Optional[str] = Query(None, alias="articleNumber"),
    brand: Optional[str] = Query(None),
    client: TecDocClient = Depends(get_tecdoc_client),
):
    """
    List parts compatible with a vehicle, or find a part by article number.

    With an article number and a vehicle, the vehicle's parts are filtered by
    number and (optionally) manufacturer name. With an article number alone,
    `brand` must be a numeric TecDoc brand id.
    """
    article_number = (article_number or "").strip()
    brand = (brand or "").strip()
    if not vehicle_id and not article_number:
        return _error_response(400, "Either Vehicle ID or Article Number is required")

    try:
        if article_number:
            logger.info(f"Fetching details for article {article_number} from brand {brand or 'any'}")
            if vehicle_id:
                compatible = await client.get_compatible_parts(vehicle_id, article_type, assembly_group_id)
                total = compatible.total_matching_articles
                parts = [
                    part for part in compatible.articles
                    if part.article_number == article_number and (not brand or part.mfr_name == brand)
                ]
            else:
                if brand and not brand.isdigit():
                    return _error_response(400, "Brand must be a numeric brand ID when no Vehicle ID is given")
                details = await client.get_article_details_by_number(article_number, int(brand) if brand else 0)
                total = 0
                parts = [article_from_details(details)] if details else []

            if not parts:
                return _error_response(404, f"No parts found matching article number {article_number}")

            if include_details:
                parts = await enrich_with_details(client, parts, limit=1)
        else:
            logger.info(f"Fetching parts for vehicle ID {vehicle_id} with assembly group {assembly_group_id or 'default'}")
            parts, total = await _list_vehicle_parts(client, vehicle_id, article_type, assembly_group_id, include_details)

    except TecDocError as e:
        logger.error(f"TecDoc parts lookup error: {e}")
        return _error_response(500, str(e))

    return PartsResponse(
        parts=[part_summary(part) for part in parts],
        total_matching_parts=total or len(parts),
    )


@router.get("/tecdoc/parts-by-plate", response_model=PartsByPlateResponse, response_model_exclude_none=True)
async def get_parts_by_plate(
    plate: Optional[str] = Query(None),
    tec_doc_id: Optional[int] = Query(None, alias="tecDocId"),
    assembly_group_id: Optional[int] = Query(None, alias="assemblyGroupId"),
    include_details: bool = Query(False, alias="includeDetails"),
    client: TecDocClient = Depends(get_tecdoc_client),
):
    """
    List parts for the vehicle behind a license plate or TecDoc id.

    A TecDoc id skips the plate lookup entirely.
    """
    plate = (plate or "").strip()
    if not plate and not tec_doc_id:
        return _error_response(400, "Either license plate or TecDoc ID is required")

    try:
        if tec_doc_id:
            vehicle = _vehicle_for_id(tec_doc_id)
        else:
            response = await client.get_vehicle_by_license_plate(plate)
            if not response.data.array:
                return _error_response(404, f"No vehicle found with license plate {plate}")
            vehicle = response.data.array[0]

        logger.info(f"Using vehicle with ID {vehicle.car_id}")
        parts, total = await _list_vehicle_parts(client, vehicle.car_id, None, assembly_group_id, include_details)

    except TecDocError as e:
        logger.error(f"TecDoc parts-by-plate lookup error: {e}")
        return _error_response(500, str(e))

    return PartsByPlateResponse(
        vehicle=vehicle_summary(vehicle, include_model=False),
        parts=[part_summary(part) for part in parts],
        total_matching_parts=total or len(parts),
    )


@router.get("/tecdoc/article", response_model=ArticleLookupResponse, response_model_exclude_none=True)
async def get_article(
    article_number: Optional[str] = Query(None, alias="articleNumber"),
    data_supplier_id: Optional[int] = Query(None, alias="dataSupplierId"),
    save_raw_response: bool = Query(False, alias="saveRawResponse"),
    client: TecDocClient = Depends(get_tecdoc_client),
):
    """
    Full details for one article found by free-text search.

    Args:
        article_number: Article number to search for
        data_supplier_id: Restrict the search to one data supplier
        save_raw_response: Echo the upstream payload back as `rawResponse`
    """
    article_number = (article_number or "").strip()
    if not article_number:
        return _error_response(400, "Article Number is required")

    logger.info(f"Fetching detailed information for article {article_number} with supplier ID {data_supplier_id or 'any'}")
    try:
        response, payload = await client.search_articles_with_payload(article_number, data_supplier_id)
    except TecDocError as e:
        logger.error(f"TecDoc article lookup error: {e}")
        return _error_response(500, str(e))

    logger.info(
        f"Received {len(response.articles)} articles for {article_number} "
        f"(status={response.status}, total={response.total_matching_articles})"
    )
    if not response.articles:
        return _error_response(404, f"No article found matching article number {article_number}")

    result = ArticleLookupResponse(article=article_summary(response.articles[0], article_number))
    if save_raw_response:
        result.raw_response = payload
    return result


@router.get("/tecdoc/assembly-groups", response_model=AssemblyGroupsResponse)
async def get_assembly_groups(
    vehicle_id: Optional[int] = Query(None, alias="vehicleId"),
    client: TecDocClient = Depends(get_tecdoc_client),
):
    """Assembly groups available for a vehicle, folded into a tree."""
    if not vehicle_id:
        return _error_response(400, "Vehicle ID is required")

    try:
        nodes = await client.get_assembly_groups(vehicle_id)
    except TecDocError as e:
        logger.error(f"TecDoc assembly groups lookup error: {e}")
        return _error_response(500, str(e))

    return AssemblyGroupsResponse(assembly_groups=build_assembly_group_tree(nodes))


@router.get("/tecdoc/assembly-groups/common", response_model=CommonAssemblyGroupsResponse, response_model_exclude_none=True)
async def get_common_assembly_groups():
    return CommonAssemblyGroupsResponse(
        common_groups=COMMON_ASSEMBLY_GROUPS,
        parent_groups=PARENT_ASSEMBLY_GROUPS,
        brake_groups=BRAKE_ASSEMBLY_GROUPS,
    )
