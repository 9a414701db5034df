import logging
import re
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from config import Settings
from models.vehicle_registry import (
    Dimensions,
    ElectricData,
    Engine,
    Motor,
    MotorPower,
    Noise,
    RegisteredVehicle,
    Seating,
    TrailerWeight,
    Weight,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://www.vegvesen.no/ws/no/vegvesen/kjoretoy/felles/datautlevering/enkeltoppslag/kjoretoydata"
HTTP_REQUEST_TIMEOUT = 30.0

# Norwegian plates: two letters followed by four or five digits
PLATE_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{4,5}$")
ELECTRIC_FUEL = "Elektrisk"


class VehicleRegistryError(Exception):
    """Raised when the registry lookup cannot produce a vehicle."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def normalize_plate(plate: str) -> str:
    formatted = (plate or "").strip().upper()
    if not PLATE_PATTERN.match(formatted):
        raise VehicleRegistryError("Invalid license plate format", status_code=400)
    return formatted


def _first(values: Any) -> Any:
    return values[0] if isinstance(values, list) and values else None


def _registration_year(date_text: Optional[str]) -> Optional[int]:
    if not date_text:
        return None
    try:
        return datetime.fromisoformat(date_text[:10]).year
    except ValueError:
        logger.warning(f"Unparseable first registration date: {date_text}")
        return None


def parse_vehicle(data: Dict[str, Any]) -> RegisteredVehicle:
    """
    Parse a `kjoretoydata` response into a RegisteredVehicle.

    Raises:
        VehicleRegistryError: If no vehicle is listed or make, model or year are missing.
    """
    vehicle = _first(data.get("kjoretoydataListe"))
    if not vehicle:
        raise VehicleRegistryError("Vehicle not found", status_code=404)

    technical = ((vehicle.get("godkjenning") or {}).get("tekniskGodkjenning") or {}).get("tekniskeData")
    if not technical:
        raise VehicleRegistryError("Technical data not available", status_code=422)

    general = technical.get("generelt") or {}
    make = (_first(general.get("merke")) or {}).get("merke")
    model = _first(general.get("handelsbetegnelse"))
    year = _registration_year((vehicle.get("forstegangsregistrering") or {}).get("registrertForstegangNorgeDato"))
    if not make or not model or not year:
        raise VehicleRegistryError("Could not extract required vehicle information", status_code=422)

    body = technical.get("karosseriOgLasteplan") or {}
    doors = _first(body.get("antallDorer"))
    color = (_first(body.get("rFarge")) or {}).get("kodeBeskrivelse")
    body_type = (body.get("karosseritype") or {}).get("kodeBeskrivelse")

    drivetrain = technical.get("motorOgDrivverk") or {}
    motors = []
    for motor in filter(None, drivetrain.get("motor") or []):
        fuel = _first(motor.get("drivstoff")) or {}
        motors.append(Motor(
            power=MotorPower(hourly=fuel.get("maksEffektPrTime"), peak=fuel.get("maksNettoEffekt")),
            code=motor.get("motorKode"),
        ))

    first_fuel = _first((_first(drivetrain.get("motor")) or {}).get("drivstoff")) or {}
    fuel_code = (first_fuel.get("drivstoffKode") or {}).get("kodeBeskrivelse")
    if fuel_code == ELECTRIC_FUEL or drivetrain.get("utelukkendeElektriskDrift"):
        engine_type = "electric"
    elif drivetrain.get("hybridElektriskKjoretoy"):
        engine_type = "hybrid"
    else:
        engine_type = "conventional"

    environment = technical.get("miljodata") or {}
    env_group = _first(environment.get("miljoOgdrivstoffGruppe")) or {}
    wltp = (_first(env_group.get("forbrukOgUtslipp")) or {}).get("wltpKjoretoyspesifikk") or {}
    noise = env_group.get("lyd")

    dimensions = technical.get("dimensjoner")
    weights = technical.get("vekter")
    seating = technical.get("persontall")

    return RegisteredVehicle(
        make=make,
        model=model,
        year=year,
        doors=f"{doors}-dr" if doors else "5-dr",
        color=color,
        body_type=body_type,
        dimensions=Dimensions(
            length=dimensions.get("lengde"),
            width=dimensions.get("bredde"),
            height=dimensions.get("hoyde"),
        ) if dimensions else None,
        weight=Weight(
            total=weights.get("egenvekt"),
            max_roof_load=weights.get("tillattTaklast"),
            payload=weights.get("nyttelast"),
            total_allowed=weights.get("tillattTotalvekt"),
            trailer_weight=TrailerWeight(
                with_brakes=weights.get("tillattTilhengervektMedBrems"),
                without_brakes=weights.get("tillattTilhengervektUtenBrems"),
                vertical_load=weights.get("tillattVertikalKoplingslast"),
                total_train_weight=weights.get("tillattVogntogvekt"),
            ),
        ) if weights else None,
        engine=Engine(
            type=engine_type,
            max_speed=_first(drivetrain.get("maksimumHastighet")),
            motors=motors,
            transmission=(drivetrain.get("girkassetype") or {}).get("kodeBeskrivelse"),
        ),
        electric=ElectricData(
            range=wltp.get("rekkeviddeKmBlandetkjoring"),
            consumption=wltp.get("nedcEnergiforbruk"),
            emission_class=(environment.get("euroKlasse") or {}).get("kodeBeskrivelse"),
        ) if engine_type == "electric" else None,
        seating=Seating(
            total=seating.get("sitteplasserTotalt"),
            front=seating.get("sitteplasserForan"),
        ) if seating else None,
        noise=Noise(
            level=noise.get("kjorestoy"),
            source=(noise.get("stoyMalingOppgittAv") or {}).get("kodeBeskrivelse"),
        ) if noise else None,
    )


class VehicleRegistryClient:
    """Looks up Norwegian vehicles by registration number."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_API_URL,
        timeout: float = HTTP_REQUEST_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> "VehicleRegistryClient":
        return cls(
            api_key=settings.STATENS_VEGVESEN_API_KEY,
            base_url=settings.VEGVESEN_API_URL,
            timeout=settings.HTTP_REQUEST_TIMEOUT,
            http_client=http_client,
        )

    async def _get(self, client: httpx.AsyncClient, plate: str) -> httpx.Response:
        return await client.get(
            self.base_url,
            params={"kjennemerke": plate},
            headers={
                "SVV-Authorization": f"Apikey {self.api_key}",
                "Accept": "application/json",
            },
            timeout=self.timeout,
        )

    async def lookup(self, plate: str) -> RegisteredVehicle:
        """
        Fetch and parse the registry entry for a license plate.

        Raises:
            VehicleRegistryError: Invalid plate, missing API key, upstream failure or unusable data.
        """
        if not self.api_key:
            raise VehicleRegistryError("API key is not configured", status_code=503)
        formatted = normalize_plate(plate)
        logger.info(f"Looking up vehicle {formatted} in the vehicle registry")

        try:
            if self._http_client is not None:
                response = await self._get(self._http_client, formatted)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._get(client, formatted)
        except httpx.RequestError as e:
            logger.error(f"Vehicle registry request failed: {type(e).__name__} - {e}")
            raise VehicleRegistryError(f"Failed to reach vehicle registry: {e}", status_code=502) from e

        if response.status_code == 404:
            raise VehicleRegistryError("Vehicle not found", status_code=404)
        if response.status_code == 429:
            raise VehicleRegistryError("Rate limit exceeded", status_code=429)
        if not response.is_success:
            logger.error(f"Vehicle registry error response: {response.status_code} {response.reason_phrase} {response.text[:500]}")
            raise VehicleRegistryError(f"Failed to fetch vehicle data: {response.reason_phrase}", status_code=502)

        try:
            data = response.json()
        except ValueError as e:
            raise VehicleRegistryError("Vehicle registry returned invalid JSON", status_code=502) from e
        if not isinstance(data, dict):
            raise VehicleRegistryError("Vehicle registry returned an unexpected payload", status_code=502)

        logger.debug(f"Vehicle registry raw data for {formatted}: {data}")
        return parse_vehicle(data)
