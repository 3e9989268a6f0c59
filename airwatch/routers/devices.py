# airwatch/routers/devices.py
# Device registry and the "current conditions" view for one device.

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from .. import schemas
from ..alerts import evaluate_alerts
from ..aqi import Pollutant, level_for_concentration
from ..database import get_db
from ..deps import get_api_key
from ..health import overall_level, recommendations
from ..models import Device, Reading

router = APIRouter(tags=["devices"])


@router.post("/devices", response_model=schemas.DeviceOut, summary="Register or rename a sensor device")
def register_device(
    body: schemas.DeviceIn,
    response: Response,
    db: Session = Depends(get_db),
    _api_key: str = Depends(get_api_key),
):
    """
    Idempotent on device_id: a known device gets its name/location replaced
    (200), an unknown one is created (201).
    """
    device = db.get(Device, body.device_id)
    created = device is None
    if created:
        device = Device(device_id=body.device_id)
        db.add(device)
        response.status_code = status.HTTP_201_CREATED
    device.name = body.name
    device.location = body.location
    db.commit()
    db.refresh(device)

    out = schemas.DeviceOut.model_validate(device)
    out.created = created
    return out


@router.get("/devices/{device_id}/latest", response_model=schemas.LatestOut)
def get_latest(
    device_id: str,
    db: Session = Depends(get_db),
    _api_key: str = Depends(get_api_key),
):
    """
    Most recent snapshot for this device, with per-metric badge levels,
    active alerts and guidance for the worst of those badge levels.
    """
    row = (
        db.query(Reading)
        .filter(Reading.device_id == device_id)
        .order_by(Reading.measured_at.desc())
        .first()
    )
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No readings found for this device")

    concentrations = {p: getattr(row, p.value) for p in Pollutant}
    levels = {p: level_for_concentration(p, v) for p, v in concentrations.items()}

    # guidance follows the badges, not the stored AQI level; the two can
    # differ for values that sit between breakpoint segments
    guidance = recommendations(overall_level(levels.values()))

    return schemas.LatestOut(
        reading=schemas.ReadingOut.model_validate(row),
        levels={p.value: lv.value for p, lv in levels.items()},
        alerts=[schemas.AlertOut.from_alert(a) for a in evaluate_alerts(concentrations)],
        recommendations=[schemas.RecommendationOut(**r._asdict()) for r in guidance],
    )
