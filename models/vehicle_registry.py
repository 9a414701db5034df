from pydantic import Field
from typing import List, Literal, Optional

from models.parts_lookup import ApiModel, ApiResponse

# Vehicle as reported by the Norwegian Public Roads Administration (Statens vegvesen).
# Units as delivered upstream: millimetres, kilograms, kW, km/h, km, Wh/km, dB.


class Dimensions(ApiModel):
    length: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None


class TrailerWeight(ApiModel):
    with_brakes: Optional[int] = None
    without_brakes: Optional[int] = None
    vertical_load: Optional[int] = None
    total_train_weight: Optional[int] = None


class Weight(ApiModel):
    total: Optional[int] = Field(None, description="Curb weight")
    max_roof_load: Optional[int] = None
    payload: Optional[int] = None
    total_allowed: Optional[int] = None
    trailer_weight: TrailerWeight = Field(default_factory=TrailerWeight)


class MotorPower(ApiModel):
    hourly: Optional[float] = Field(None, description="Max power per hour (kW)")
    peak: Optional[float] = Field(None, description="Max net power (kW)")


class Motor(ApiModel):
    power: MotorPower = Field(default_factory=MotorPower)
    code: Optional[str] = None


class Engine(ApiModel):
    type: Literal["electric", "hybrid", "conventional"] = "conventional"
    max_speed: Optional[int] = None
    motors: List[Motor] = Field(default_factory=list)
    transmission: Optional[str] = None


class ElectricData(ApiModel):
    range: Optional[float] = Field(None, description="WLTP mixed driving range (km)")
    consumption: Optional[float] = Field(None, description="Energy consumption (Wh/km)")
    emission_class: Optional[str] = None


class Seating(ApiModel):
    total: Optional[int] = None
    front: Optional[int] = None


class Noise(ApiModel):
    level: Optional[float] = Field(None, description="Driving noise (dB)")
    source: Optional[str] = None


class RegisteredVehicle(ApiModel):
    """A registered vehicle with the technical data relevant for parts lookup."""
    make: str
    model: str
    year: int = Field(..., description="Year of first registration in Norway")
    doors: str = Field("5-dr", description="Physical doors, e.g. '5-dr'")
    color: Optional[str] = None
    body_type: Optional[str] = None
    dimensions: Optional[Dimensions] = None
    weight: Optional[Weight] = None
    engine: Engine = Field(default_factory=Engine)
    electric: Optional[ElectricData] = None
    seating: Optional[Seating] = None
    noise: Optional[Noise] = None


class VehicleRegistryResponse(ApiResponse):
    car: RegisteredVehicle
