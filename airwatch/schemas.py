# airwatch/schemas.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .alerts import Alert
from .aqi import AggregateResult, Pollutant
from .health import describe_aqi, level_label


def _concentration(**kwargs):
    # non-negative, finite; callers default missing fields to 0.0
    return Field(default=0.0, ge=0, allow_inf_nan=False, **kwargs)


# ---------- Input schemas ----------
class Concentrations(BaseModel):
    pm25: float = _concentration(description="PM2.5, µg/m³")
    pm10: float = _concentration(description="PM10, µg/m³")
    co: float = _concentration(description="CO, ppm")
    no2: float = _concentration(description="NO2, ppb")
    so2: float = _concentration(description="SO2, ppb")
    o3: float = _concentration(description="O3, ppb")

    def as_mapping(self) -> Dict[Pollutant, float]:
        return {p: getattr(self, p.value) for p in Pollutant}


class DeviceIn(BaseModel):
    device_id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=128)
    location: Optional[str] = Field(default=None, max_length=255)


class ReadingIn(Concentrations):
    device_id: str = Field(min_length=1, max_length=64)
    measured_at: datetime
    temperature_c: Optional[float] = None
    humidity: Optional[float] = Field(default=None, ge=0, le=100)
    pressure_hpa: Optional[float] = Field(default=None, gt=0)


# ---------- Output schemas ----------
class AQIOut(BaseModel):
    aqi: int
    level: str
    label: str
    description: str
    dominant_pollutant: str
    dominant_label: str
    sub_indices: Dict[str, int]

    @classmethod
    def from_result(cls, result: AggregateResult) -> "AQIOut":
        return cls(
            aqi=result.aqi,
            level=result.level.value,
            label=level_label(result.level),
            description=describe_aqi(result.aqi),
            dominant_pollutant=result.dominant_pollutant.value,
            dominant_label=result.dominant_pollutant.label,
            sub_indices={p.value: v for p, v in result.sub_indices.items()},
        )


class DeviceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    device_id: str
    name: str
    location: Optional[str] = None
    last_seen_at: Optional[datetime] = None
    created: bool = False


class RecommendationOut(BaseModel):
    group: str
    advice: str


class LevelOut(BaseModel):
    aqi: int
    level: str
    label: str
    description: str
    recommendations: List[RecommendationOut]
    tips: List[str]


class PollutantLevelOut(BaseModel):
    pollutant: str
    label: str
    unit: str
    value: float
    level: str
    level_label: str


class AlertOut(BaseModel):
    pollutant: str
    level: str
    value: float
    message: str

    @classmethod
    def from_alert(cls, alert: Alert) -> "AlertOut":
        return cls(pollutant=alert.pollutant.value, level=alert.level.value, value=alert.value, message=alert.message)


class AlertsOut(BaseModel):
    alert_flag: int
    alerts: List[AlertOut]


class PredictionOut(BaseModel):
    predicted_aqi: int
    level: str
    label: str
    description: str


class ReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    device_id: str
    measured_at: datetime
    pm25: float
    pm10: float
    co: float
    no2: float
    so2: float
    o3: float
    temperature_c: Optional[float] = None
    humidity: Optional[float] = None
    pressure_hpa: Optional[float] = None
    aqi: int
    level: str
    dominant_pollutant: str
    alert_flag: int


class LatestOut(BaseModel):
    reading: ReadingOut
    levels: Dict[str, str]
    alerts: List[AlertOut]
    recommendations: List[RecommendationOut]
