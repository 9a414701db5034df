import json
import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import Settings
from models.tecdoc import (
    ArticleDetails,
    ArticleSearchResponse,
    ArticlesResponse,
    AssemblyGroupNode,
    AssemblyGroupNodesResponse,
    CompatibleParts,
    LinkageTargetsResponse,
    VehiclesByPlateResponse,
)
from .cache import ResponseCache
from .envelope import DEFAULT_COUNTRY, DEFAULT_LANGUAGE, build_request_body, fingerprint
from .errors import (
    TecDocApplicationError,
    TecDocHTTPError,
    TecDocNotFoundError,
    TecDocParseError,
    TecDocTransportError,
)
from .mock import (
    ARTICLE_SEARCH_METHOD,
    ARTICLES_METHOD,
    PLATE_LOOKUP_METHOD,
    mock_response,
    should_mock,
)
from .pagination import DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE, walk_article_pages

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://webservice.tecalliance.services/pegasus-3-0/info/proxy/services/TecdocToCatDLB.jsonEndpoint"
HTTP_REQUEST_TIMEOUT = 30.0

LINKAGE_TARGETS_METHOD = "getLinkageTargets"
ASSEMBLY_GROUPS_METHOD = "getAssemblyGroupNodes"

# Plate lookups use the Norwegian registration key system
KEY_SYSTEM_TYPE_PLATE = 95
ALL_PARTS_ASSEMBLY_GROUP = 100002
PASSENGER_CAR = "P"

ModelT = TypeVar("ModelT", bound=BaseModel)


class TecDocClient:
    """
    Async gateway to the TecDoc parts catalog.

    One call runs: build envelope -> mock check -> cache check -> POST ->
    classify failures or cache the success. There are no retries; the only
    partial-success paths are the pagination walk and detail enrichment.
    """

    def __init__(
        self,
        api_key: Optional[str],
        provider_id: Optional[int],
        base_url: str = DEFAULT_BASE_URL,
        cache: Optional[ResponseCache] = None,
        use_mock_data: bool = False,
        mock_license_plates: bool = True,
        language: str = DEFAULT_LANGUAGE,
        country: str = DEFAULT_COUNTRY,
        timeout: float = HTTP_REQUEST_TIMEOUT,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.provider_id = provider_id
        self.base_url = base_url
        self.cache = cache if cache is not None else ResponseCache()
        self.use_mock_data = use_mock_data
        self.mock_license_plates = mock_license_plates
        self.language = language
        self.country = country
        self.timeout = timeout
        self.page_size = page_size
        self.max_pages = max_pages
        self.request_count = 0
        self._http_client = http_client

        logger.info(
            f"TecDoc client initialised: api_key_present={bool(api_key)}, provider_id={provider_id}, "
            f"use_mock_data={use_mock_data}, mock_license_plates={mock_license_plates}"
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache: Optional[ResponseCache] = None,
        use_mock_data: bool = False,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "TecDocClient":
        return cls(
            api_key=settings.TECDOC_API_KEY,
            provider_id=settings.TECDOC_PROVIDER_ID,
            base_url=settings.TECDOC_BASE_URL,
            cache=cache,
            use_mock_data=use_mock_data,
            mock_license_plates=settings.TECDOC_MOCK_LICENSE_PLATES,
            language=settings.TECDOC_LANGUAGE,
            country=settings.TECDOC_COUNTRY,
            timeout=settings.HTTP_REQUEST_TIMEOUT,
            page_size=settings.TECDOC_PAGE_SIZE,
            max_pages=settings.TECDOC_MAX_PAGES,
            http_client=http_client,
        )

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Api-Key": self.api_key or "",
        }

    # --- Core request path ---

    async def call(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Runs one catalog method and returns the decoded response object."""
        if should_mock(method, params, self.use_mock_data, self.mock_license_plates):
            logger.info(f"Using mock data for {method}")
            return mock_response(method, params, self.use_mock_data)

        cache_key = fingerprint(method, params)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Using cached response for {method}")
            return cached

        self.request_count += 1
        request_id = f"{method}-{int(time.time() * 1000)}-{self.request_count}"
        body = build_request_body(method, params, self.provider_id, self.language, self.country)

        logger.info(f"[{request_id}] Making request to: {self.base_url}")
        logger.debug(f"[{request_id}] Request headers: {{**self.headers, 'X-Api-Key': 'REDACTED'}}")
        logger.debug(f"[{request_id}] Request body: {json.dumps(body, default=str)}")

        try:
            data = await self._send(body, request_id)
        except Exception as e:
            logger.error(f"[{request_id}] Request failed: {e}")
            raise

        self.cache.put(cache_key, data)
        return data

    async def _send(self, body: Dict[str, Any], request_id: str) -> Dict[str, Any]:
        if self._http_client is not None:
            return await self._post(self._http_client, body, request_id)
        async with httpx.AsyncClient() as client:
            return await self._post(client, body, request_id)

    async def _post(self, client: httpx.AsyncClient, body: Dict[str, Any], request_id: str) -> Dict[str, Any]:
        try:
            response = await client.post(self.base_url, json=body, headers=self.headers, timeout=self.timeout)
        except httpx.RequestError as e:
            raise TecDocTransportError(f"Request failed: {type(e).__name__} - {e}") from e

        response_text = response.text
        logger.info(f"[{request_id}] Response status: {response.status_code} {response.reason_phrase}")
        logger.debug(f"[{request_id}] Raw response: {response_text[:2000]}")

        if not response.is_success:
            raise TecDocHTTPError(response.status_code, response.reason_phrase, response_text)

        try:
            data = json.loads(response_text)
        except json.JSONDecodeError as e:
            raise TecDocParseError(f"Invalid JSON response: {response_text[:500]}", raw_text=response_text) from e

        if not isinstance(data, dict):
            raise TecDocParseError(f"Expected a JSON object, got {type(data).__name__}", raw_text=response_text)

        # An explicit 200 and an absent status both mean success
        status = data.get("status")
        if status is not None and status != 200:
            raise TecDocApplicationError(status, data.get("statusText"))

        return data

    def _parse(self, model: Type[ModelT], payload: Dict[str, Any], method: str) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raw_text = json.dumps(payload, default=str)
            raise TecDocParseError(
                f"Unexpected {method} response shape ({e.error_count()} validation errors): {raw_text[:500]}",
                raw_text=raw_text,
            ) from e

    # --- Typed operations ---

    async def get_vehicle_by_license_plate(self, license_plate: str, country: str = DEFAULT_COUNTRY) -> VehiclesByPlateResponse:
        logger.info(f"Looking up vehicle by license plate {license_plate} ({country})")
        payload = await self.call(PLATE_LOOKUP_METHOD, {
            "country": country,
            "keySystemNumber": license_plate,
            "keySystemType": KEY_SYSTEM_TYPE_PLATE,
        })
        return self._parse(VehiclesByPlateResponse, payload, PLATE_LOOKUP_METHOD)

    async def get_vehicle_details(self, linkage_target_id: int) -> LinkageTargetsResponse:
        payload = await self.call(LINKAGE_TARGETS_METHOD, {
            "linkageTargetId": linkage_target_id,
            "lang": "en",
            "perPage": 1,
            "page": 1,
        })
        response = self._parse(LinkageTargetsResponse, payload, LINKAGE_TARGETS_METHOD)
        if not response.data:
            raise TecDocNotFoundError("Vehicle details not found")
        return response

    async def _get_articles_page(self, query: Dict[str, Any]) -> ArticlesResponse:
        payload = await self.call(ARTICLES_METHOD, query)
        return self._parse(ArticlesResponse, payload, ARTICLES_METHOD)

    async def get_compatible_parts(
        self,
        linkage_target_id: int,
        generic_article_id: Optional[int] = None,
        assembly_group_node_id: Optional[int] = None,
    ) -> CompatibleParts:
        """Fetches every compatible article for a vehicle, walking up to `max_pages` pages."""
        query: Dict[str, Any] = {
            "linkageTargetId": linkage_target_id,
            "lang": "en",
            "perPage": self.page_size,
            "page": 1,
            "articleCountry": self.country,
            "linkageTargetType": PASSENGER_CAR,
            "assemblyGroupNodeId": assembly_group_node_id or ALL_PARTS_ASSEMBLY_GROUP,
            "includeMisc": True,
            "includeGenericArticles": True,
            "includeArticleText": True,
        }
        if generic_article_id:
            query["genericArticleId"] = generic_article_id

        async def fetch_page(page: int) -> ArticlesResponse:
            return await self._get_articles_page({**query, "page": page})

        return await walk_article_pages(
            fetch_page,
            page_size=self.page_size,
            max_pages=self.max_pages,
            paginate=not self.use_mock_data,
        )

    async def get_article_details_by_number(self, article_number: str, brand_id: int) -> Optional[ArticleDetails]:
        """Exact article-number search; returns None when nothing matches."""
        payload = await self.call(ARTICLE_SEARCH_METHOD, {
            "articleNumber": article_number,
            "brandId": brand_id,
            "articleCountry": self.country,
            "lang": "en",
            "searchExact": True,
        })
        response = self._parse(ArticleSearchResponse, payload, ARTICLE_SEARCH_METHOD)
        if not response.data.array:
            return None

        row = response.data.array[0]
        return ArticleDetails(
            article_id=row.article_id,
            article_number=row.article_number or article_number,
            brand_name=row.brand_name or "",
            mfr_name=row.mfr_name or "",
            mfr_id=row.mfr_id or brand_id,
            data_supplier_id=row.data_supplier_id or 0,
            generic_article_name=row.generic_article_name or "",
            description=row.article_name or "",
            generic_article_description=row.generic_article_description or "",
            assembly_group=row.assembly_group_name or "",
            attributes=row.attributes,
            images=row.images,
            oem_numbers=row.oem_numbers,
            usage_numbers=row.usage_numbers,
        )

    async def search_articles(self, article_number: str, data_supplier_id: Optional[int] = None, per_page: int = 10) -> ArticlesResponse:
        """Free-text article search with every include flag set."""
        response, _ = await self.search_articles_with_payload(article_number, data_supplier_id, per_page)
        return response

    async def search_articles_with_payload(
        self,
        article_number: str,
        data_supplier_id: Optional[int] = None,
        per_page: int = 10,
    ) -> Tuple[ArticlesResponse, Dict[str, Any]]:
        """Same search, also handing back the decoded upstream payload untouched."""
        params: Dict[str, Any] = {
            "lang": self.language,
            "articleCountry": self.country,
            "searchType": 0,
            "searchQuery": article_number,
            "includeAll": True,
            "perPage": per_page,
        }
        if data_supplier_id:
            params["dataSupplierIds"] = data_supplier_id
        payload = await self.call(ARTICLES_METHOD, params)
        return self._parse(ArticlesResponse, payload, ARTICLES_METHOD), payload

    async def get_assembly_groups(self, linkage_target_id: int) -> List[AssemblyGroupNode]:
        payload = await self.call(ASSEMBLY_GROUPS_METHOD, {
            "linkageTargetId": linkage_target_id,
            "lang": "en",
            "linkageTargetType": PASSENGER_CAR,
            "country": self.country,
        })
        response = self._parse(AssemblyGroupNodesResponse, payload, ASSEMBLY_GROUPS_METHOD)
        if response.data.array is None:
            logger.warning(f"No assembly groups found in response for vehicle {linkage_target_id}")
            return []
        return response.data.array
