import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

PLATE_LOOKUP_METHOD = "getVehiclesByKeyNumberPlates"
ARTICLES_METHOD = "getArticles"
ARTICLE_SEARCH_METHOD = "getArticleDirectSearchAllNumbersWithState"

# Plate whose lookup is always answered locally, never from the paid API
FIXTURE_PLATE = "EB34033"
FIXTURE_CAR_ID = 138779
MOCK_ARTICLE_COUNT = 20


def fixture_vehicle() -> Dict[str, Any]:
    return {
        "carId": FIXTURE_CAR_ID,
        "carName": "AUDI E-TRON (GEN) 50 quattro",
        "country": "NO",
        "linkingTargetType": "P",
        "subLinkageTargetType": "V",
        "manuId": 5,
        "modelId": 39213,
        "vehicleDetails": {
            "engineCode": "EAWA",
            "engineCodes": ["EAWA"],
            "registrationNumber": FIXTURE_PLATE,
            "tecDocNumber": str(FIXTURE_CAR_ID),
            "tecDocType": "PASSENGER",
        },
    }


def is_fixture_plate_lookup(method: str, params: Dict[str, Any]) -> bool:
    return method == PLATE_LOOKUP_METHOD and params.get("keySystemNumber") == FIXTURE_PLATE


def should_mock(method: str, params: Dict[str, Any], use_mock_data: bool, mock_license_plates: bool) -> bool:
    """Decides whether a call is answered locally instead of over the network."""
    if is_fixture_plate_lookup(method, params):
        return True
    if method == PLATE_LOOKUP_METHOD and mock_license_plates:
        return True
    return use_mock_data


def _mock_articles() -> Dict[str, Any]:
    articles = []
    for i in range(1, MOCK_ARTICLE_COUNT + 1):
        if i % 3 == 0:
            brand = "BOSCH"
        elif i % 2 == 0:
            brand = "ATE"
        else:
            brand = "BREMBO"
        articles.append({
            "articleId": 1000 + i,
            "articleNumber": f"MOCK-{i}",
            "mfrName": brand,
            "dataSupplierId": 100 + i,
            "genericArticleName": "Brake Disc" if i % 2 == 0 else "Brake Pad",
            "articleStatusId": 1,
            "packingUnit": 1,
            "quantityPerPackingUnit": 2,
            "immediateDisplayQuantity": 1,
            "immediateDisplayPrice": 100 + i * 10,
            "thumbnailName": "",
        })
    return {
        "status": 200,
        "articles": articles,
        "totalMatchingArticles": len(articles),
        "maxAllowedPage": 1,
    }


def _mock_article_search(params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "status": 200,
        "data": {
            "array": [{
                "articleId": 12345,
                "articleNumber": params.get("articleNumber"),
                "brandName": "Mock Brand",
                "mfrName": "Mock Manufacturer",
                "mfrId": params.get("brandId") or 0,
                "dataSupplierId": 100,
                "genericArticleName": "Mock Part",
                "articleName": "Detailed Mock Part Description",
            }]
        },
    }


def mock_response(method: str, params: Dict[str, Any], use_mock_data: bool) -> Dict[str, Any]:
    """Builds a fresh canned payload for a call that `should_mock` intercepted."""
    logger.info(f"Returning mock data for {method}")

    if is_fixture_plate_lookup(method, params):
        return {"status": 200, "data": {"array": [fixture_vehicle()]}}

    if use_mock_data:
        if method == ARTICLES_METHOD:
            return _mock_articles()
        if method == ARTICLE_SEARCH_METHOD:
            return _mock_article_search(params)

    return {"status": 200, "data": {}}
