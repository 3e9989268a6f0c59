# airwatch/routers/readings.py
# Indoor sensor snapshot ingestion and history.
# - One row per (device_id, measured_at) with all six pollutants
# - AQI, level, dominant pollutant and alert flag are computed at ingest

import logging
from typing import Optional, List
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from .. import models, schemas, deps
from ..alerts import alert_flag, evaluate_alerts
from ..aqi import calculate_aqi_from_mapping
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["readings"])

MAX_HISTORY = 5000


@router.post(
    "/readings",
    response_model=schemas.ReadingOut,
    status_code=status.HTTP_201_CREATED,
    summary="Ingest a single indoor reading snapshot"
)
def create_reading(
    reading: schemas.ReadingIn,
    db: Session = Depends(get_db),
    api_key: str = Depends(deps.get_api_key),                            # Authorization: Bearer <key>
    idempo_key: Optional[str] = Depends(deps.get_idempotency_key),       # X-Idempotency-Key (optional)
):
    """
    Ingest one snapshot. Duplicates on (device_id, measured_at) return the stored row.
    """
    concentrations = reading.as_mapping()
    result = calculate_aqi_from_mapping(concentrations)
    flag = alert_flag(evaluate_alerts(concentrations))

    # --- Touch device's last_seen_at if the device exists
    device = db.query(models.Device).filter(models.Device.device_id == reading.device_id).one_or_none()
    if device:
        device.last_seen_at = reading.measured_at

    row = models.Reading(
        device_id=reading.device_id,
        measured_at=reading.measured_at,
        pm25=reading.pm25,
        pm10=reading.pm10,
        co=reading.co,
        no2=reading.no2,
        so2=reading.so2,
        o3=reading.o3,
        temperature_c=reading.temperature_c,
        humidity=reading.humidity,
        pressure_hpa=reading.pressure_hpa,
        aqi=result.aqi,
        level=result.level.value,
        dominant_pollutant=result.dominant_pollutant.value,
        alert_flag=flag,
        api_key=api_key,
        idempotency_key=idempo_key,
    )

    # --- Insert safely: rely on unique (device_id, measured_at) to dedupe
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except IntegrityError:
        db.rollback()
        existing = (
            db.query(models.Reading)
            .filter(models.Reading.device_id == reading.device_id)
            .filter(models.Reading.measured_at == reading.measured_at)
            .one_or_none()
        )
        if not existing:
            logger.warning("Integrity error for %s @ %s with no existing row", reading.device_id, reading.measured_at)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Duplicate reading and existing row could not be retrieved."
            )
        row = existing

    if flag:
        logger.info("Device %s reading flagged %d (AQI %d, %s)", row.device_id, flag, row.aqi, row.dominant_pollutant)

    return schemas.ReadingOut.model_validate(row)


@router.get(
    "/devices/{device_id}/history",
    response_model=List[schemas.ReadingOut],
    summary="Fetch recent readings for a device",
)
def get_history(
    device_id: str,
    minutes: Optional[int] = None,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    limit: int = 500,
    db: Session = Depends(get_db),
    _api_key: str = Depends(deps.get_api_key),
):
    """
    Newest first. Explicit since/until take precedence over 'minutes'.
    """
    q = db.query(models.Reading).filter(models.Reading.device_id == device_id)

    if since:
        q = q.filter(models.Reading.measured_at >= since)
    if until:
        q = q.filter(models.Reading.measured_at <= until)
    if minutes and not since and not until:
        cutoff = datetime.now(timezone.utc) - timedelta(minutes=minutes)
        q = q.filter(models.Reading.measured_at >= cutoff)

    q = q.order_by(models.Reading.measured_at.desc()).limit(max(1, min(limit, MAX_HISTORY)))
    return [schemas.ReadingOut.model_validate(r) for r in q.all()]
