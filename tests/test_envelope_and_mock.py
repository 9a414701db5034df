"""
Tests for request envelopes, fingerprints and the mock responder.
"""

import pytest

from agents.tecdoc.envelope import build_request_body, fingerprint
from agents.tecdoc.mock import (
    ARTICLE_SEARCH_METHOD,
    ARTICLES_METHOD,
    FIXTURE_CAR_ID,
    FIXTURE_PLATE,
    PLATE_LOOKUP_METHOD,
    mock_response,
    should_mock,
)


class TestEnvelope:

    def test_wraps_params_under_method(self):
        body = build_request_body("getArticles", {"perPage": 10}, 123)
        assert body == {"getArticles": {"provider": 123, "lang": "no", "country": "NO", "perPage": 10}}

    def test_caller_params_win(self):
        body = build_request_body("getArticles", {"lang": "en", "country": "SE"}, 123)
        assert body["getArticles"]["lang"] == "en"
        assert body["getArticles"]["country"] == "SE"

    def test_fingerprint_ignores_key_order(self):
        assert fingerprint("m", {"a": 1, "b": 2}) == fingerprint("m", {"b": 2, "a": 1})

    def test_fingerprint_separates_methods_and_params(self):
        assert fingerprint("m", {"a": 1}) != fingerprint("n", {"a": 1})
        assert fingerprint("m", {"a": 1}) != fingerprint("m", {"a": 2})


class TestMockResponder:

    @pytest.mark.parametrize("use_mock_data", [True, False])
    @pytest.mark.parametrize("mock_license_plates", [True, False])
    def test_fixture_plate_is_always_mocked(self, use_mock_data, mock_license_plates):
        params = {"keySystemNumber": FIXTURE_PLATE, "keySystemType": 95}
        assert should_mock(PLATE_LOOKUP_METHOD, params, use_mock_data, mock_license_plates)

    def test_other_plates_follow_plate_flag(self):
        params = {"keySystemNumber": "AB12345"}
        assert should_mock(PLATE_LOOKUP_METHOD, params, False, True)
        assert not should_mock(PLATE_LOOKUP_METHOD, params, False, False)

    def test_other_methods_follow_mock_mode(self):
        assert should_mock(ARTICLES_METHOD, {}, True, False)
        assert not should_mock(ARTICLES_METHOD, {}, False, True)

    def test_fixture_vehicle(self):
        payload = mock_response(PLATE_LOOKUP_METHOD, {"keySystemNumber": FIXTURE_PLATE}, False)
        vehicle = payload["data"]["array"][0]
        assert vehicle["carId"] == FIXTURE_CAR_ID
        assert vehicle["carName"] == "AUDI E-TRON (GEN) 50 quattro"
        assert vehicle["vehicleDetails"]["registrationNumber"] == FIXTURE_PLATE

    def test_mock_articles(self):
        payload = mock_response(ARTICLES_METHOD, {}, True)
        articles = payload["articles"]
        assert payload["totalMatchingArticles"] == 20
        assert payload["maxAllowedPage"] == 1
        assert [a["articleId"] for a in articles] == list(range(1001, 1021))
        assert articles[0]["mfrName"] == "BREMBO"
        assert articles[1]["mfrName"] == "ATE"
        assert articles[2]["mfrName"] == "BOSCH"
        assert articles[4]["immediateDisplayPrice"] == 150

    def test_mock_article_search_echoes_request(self):
        payload = mock_response(ARTICLE_SEARCH_METHOD, {"articleNumber": "0 986 494 104", "brandId": 30}, True)
        row = payload["data"]["array"][0]
        assert row["articleNumber"] == "0 986 494 104"
        assert row["mfrId"] == 30

    def test_unknown_method_gets_empty_data(self):
        assert mock_response("getLinkageTargets", {}, True) == {"status": 200, "data": {}}

    def test_responses_are_fresh_objects(self):
        first = mock_response(ARTICLES_METHOD, {}, True)
        first["articles"].clear()
        assert len(mock_response(ARTICLES_METHOD, {}, True)["articles"]) == 20
