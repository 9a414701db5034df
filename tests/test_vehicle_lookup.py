"""
Tests for the Statens vegvesen vehicle registry client and route.
"""

import copy

import httpx
import pytest
from fastapi.testclient import TestClient

from agents.vehicle_registry.client import (
    VehicleRegistryClient,
    VehicleRegistryError,
    normalize_plate,
    parse_vehicle,
)
from api.vehicle_lookup import get_vehicle_registry_client
from main import app
from conftest import RecordingHandler, no_network, ok

ETRON = {
    "kjoretoydataListe": [{
        "forstegangsregistrering": {"registrertForstegangNorgeDato": "2019-06-14"},
        "godkjenning": {"tekniskGodkjenning": {"tekniskeData": {
            "generelt": {"merke": [{"merke": "AUDI"}], "handelsbetegnelse": ["E-TRON"]},
            "karosseriOgLasteplan": {
                "antallDorer": [5],
                "rFarge": [{"kodeBeskrivelse": "Grå"}],
                "karosseritype": {"kodeBeskrivelse": "Stasjonsvogn (AC)"},
            },
            "motorOgDrivverk": {
                "motor": [
                    {"motorKode": "EASA", "drivstoff": [{"drivstoffKode": {"kodeBeskrivelse": "Elektrisk"}, "maksEffektPrTime": 70, "maksNettoEffekt": 125}]},
                    {"motorKode": "EAWA", "drivstoff": [{"drivstoffKode": {"kodeBeskrivelse": "Elektrisk"}, "maksEffektPrTime": 65, "maksNettoEffekt": 140}]},
                ],
                "utelukkendeElektriskDrift": True,
                "maksimumHastighet": [200],
                "girkassetype": {"kodeBeskrivelse": "Automat"},
            },
            "dimensjoner": {"lengde": 4901, "bredde": 1935, "hoyde": 1629},
            "vekter": {"egenvekt": 2490, "tillattTaklast": 75, "nyttelast": 565, "tillattTotalvekt": 3130, "tillattTilhengervektMedBrems": 1800},
            "miljodata": {
                "euroKlasse": {"kodeBeskrivelse": "Euro 6 d-TEMP"},
                "miljoOgdrivstoffGruppe": [{
                    "forbrukOgUtslipp": [{"wltpKjoretoyspesifikk": {"rekkeviddeKmBlandetkjoring": 417, "nedcEnergiforbruk": 230}}],
                    "lyd": {"kjorestoy": 68, "stoyMalingOppgittAv": {"kodeBeskrivelse": "Produsent"}},
                }],
            },
            "persontall": {"sitteplasserTotalt": 5, "sitteplasserForan": 2},
        }}},
    }]
}


def registry(handler, api_key="svv-key") -> VehicleRegistryClient:
    return VehicleRegistryClient(
        api_key=api_key,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestParseVehicle:

    def test_electric_vehicle(self):
        car = parse_vehicle(ETRON)

        assert (car.make, car.model, car.year) == ("AUDI", "E-TRON", 2019)
        assert car.doors == "5-dr"
        assert car.color == "Grå"
        assert car.body_type == "Stasjonsvogn (AC)"
        assert car.dimensions.length == 4901
        assert car.weight.total == 2490
        assert car.weight.trailer_weight.with_brakes == 1800
        assert car.engine.type == "electric"
        assert car.engine.max_speed == 200
        assert [m.code for m in car.engine.motors] == ["EASA", "EAWA"]
        assert car.engine.motors[1].power.peak == 140
        assert car.engine.transmission == "Automat"
        assert car.electric.range == 417
        assert car.electric.emission_class == "Euro 6 d-TEMP"
        assert car.seating.total == 5
        assert car.noise.level == 68
        assert car.noise.source == "Produsent"

    def test_hybrid_and_defaults(self):
        data = copy.deepcopy(ETRON)
        technical = data["kjoretoydataListe"][0]["godkjenning"]["tekniskGodkjenning"]["tekniskeData"]
        technical["motorOgDrivverk"] = {"motor": [{"drivstoff": [{"drivstoffKode": {"kodeBeskrivelse": "Bensin"}}]}], "hybridElektriskKjoretoy": True}
        del technical["karosseriOgLasteplan"]["antallDorer"]
        del technical["persontall"]

        car = parse_vehicle(data)

        assert car.engine.type == "hybrid"
        assert car.electric is None
        assert car.doors == "5-dr"
        assert car.seating is None

    def test_conventional(self):
        data = copy.deepcopy(ETRON)
        technical = data["kjoretoydataListe"][0]["godkjenning"]["tekniskGodkjenning"]["tekniskeData"]
        technical["motorOgDrivverk"] = {"motor": [{"drivstoff": [{"drivstoffKode": {"kodeBeskrivelse": "Diesel"}}]}]}
        technical["karosseriOgLasteplan"]["antallDorer"] = [3]

        car = parse_vehicle(data)

        assert car.engine.type == "conventional"
        assert car.doors == "3-dr"

    def test_empty_list_is_not_found(self):
        with pytest.raises(VehicleRegistryError) as exc_info:
            parse_vehicle({"kjoretoydataListe": []})
        assert exc_info.value.status_code == 404

    def test_missing_technical_data(self):
        with pytest.raises(VehicleRegistryError) as exc_info:
            parse_vehicle({"kjoretoydataListe": [{"godkjenning": {}}]})
        assert exc_info.value.message == "Technical data not available"

    def test_missing_year(self):
        data = copy.deepcopy(ETRON)
        del data["kjoretoydataListe"][0]["forstegangsregistrering"]
        with pytest.raises(VehicleRegistryError) as exc_info:
            parse_vehicle(data)
        assert exc_info.value.message == "Could not extract required vehicle information"

    def test_null_sections(self):
        data = copy.deepcopy(ETRON)
        technical = data["kjoretoydataListe"][0]["godkjenning"]["tekniskGodkjenning"]["tekniskeData"]
        technical["karosseriOgLasteplan"] = None
        technical["miljodata"] = None
        technical["motorOgDrivverk"] = {"motor": None}

        car = parse_vehicle(data)

        assert car.make == "AUDI"
        assert car.doors == "5-dr"
        assert car.color is None
        assert car.engine.type == "conventional"
        assert car.engine.motors == []

    def test_null_general_section(self):
        data = copy.deepcopy(ETRON)
        technical = data["kjoretoydataListe"][0]["godkjenning"]["tekniskGodkjenning"]["tekniskeData"]
        technical["generelt"] = None
        with pytest.raises(VehicleRegistryError) as exc_info:
            parse_vehicle(data)
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "Could not extract required vehicle information"


class TestRegistryClient:

    @pytest.mark.parametrize("plate", ["eb34033", " EB34033 ", "AB1234"])
    def test_valid_plates(self, plate):
        assert normalize_plate(plate) == plate.strip().upper()

    @pytest.mark.parametrize("plate", ["E34033", "EB123", "EB1234567", "12EB345"])
    def test_invalid_plates(self, plate):
        with pytest.raises(VehicleRegistryError) as exc_info:
            normalize_plate(plate)
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_request_shape(self):
        handler = RecordingHandler(ok(ETRON))

        car = await registry(handler).lookup("eb34033")

        assert car.make == "AUDI"
        request = handler.requests[0]
        assert request.url.params["kjennemerke"] == "EB34033"
        assert request.headers["SVV-Authorization"] == "Apikey svv-key"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, message", [
        (404, "Vehicle not found"),
        (429, "Rate limit exceeded"),
        (503, "Failed to fetch vehicle data: Service Unavailable"),
    ])
    async def test_upstream_errors(self, status, message):
        client = registry(lambda request: httpx.Response(status))
        with pytest.raises(VehicleRegistryError) as exc_info:
            await client.lookup("EB34033")
        assert exc_info.value.message == message

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        client = registry(no_network, api_key=None)
        with pytest.raises(VehicleRegistryError) as exc_info:
            await client.lookup("EB34033")
        assert exc_info.value.status_code == 503


class TestVehicleLookupRoute:

    @pytest.fixture
    def api(self):
        def _use(client: VehicleRegistryClient) -> TestClient:
            app.dependency_overrides[get_vehicle_registry_client] = lambda: client
            return TestClient(app)

        yield _use
        app.dependency_overrides.clear()

    def test_success(self, api):
        response = api(registry(ok(ETRON))).get("/api/v1/vehicle-lookup", params={"plate": "EB34033"})

        assert response.status_code == 200
        car = response.json()["car"]
        assert car["make"] == "AUDI"
        assert car["bodyType"] == "Stasjonsvogn (AC)"
        assert car["engine"]["maxSpeed"] == 200
        assert car["weight"]["trailerWeight"]["withBrakes"] == 1800
        assert "withoutBrakes" not in car["weight"]["trailerWeight"]

    def test_missing_plate(self, api):
        response = api(registry(no_network)).get("/api/v1/vehicle-lookup")
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "License plate is required"}

    def test_invalid_plate(self, api):
        response = api(registry(no_network)).get("/api/v1/vehicle-lookup", params={"plate": "NOTAPLATE"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid license plate format"

    def test_not_found(self, api):
        response = api(registry(lambda request: httpx.Response(404))).get("/api/v1/vehicle-lookup", params={"plate": "EB34033"})
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Vehicle not found"}
