# airwatch/routers/aqi.py
# Stateless AQI endpoints. No auth, no DB: everything here is computed per request.

import logging

from fastapi import APIRouter, HTTPException, Query, status

from .. import schemas
from ..alerts import alert_flag, evaluate_alerts
from ..aqi import MAX_AQI, Pollutant, calculate_aqi_from_mapping, classify_aqi, level_for_concentration
from ..health import GENERAL_TIPS, describe_aqi, level_label, recommendations
from ..predictor import PredictionError, predict_aqi

logger = logging.getLogger(__name__)

router = APIRouter(tags=["aqi"])


@router.post("/aqi", response_model=schemas.AQIOut, summary="Aggregate AQI from six pollutant concentrations")
def compute(body: schemas.Concentrations):
    result = calculate_aqi_from_mapping(body.as_mapping())
    return schemas.AQIOut.from_result(result)


@router.get("/aqi/{aqi}/level", response_model=schemas.LevelOut, summary="Severity level and guidance for an AQI value")
def aqi_level(aqi: int):
    if aqi < 0 or aqi > MAX_AQI:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"AQI must be between 0 and {MAX_AQI}")
    level = classify_aqi(aqi)
    return schemas.LevelOut(
        aqi=aqi,
        level=level.value,
        label=level_label(level),
        description=describe_aqi(aqi),
        recommendations=[schemas.RecommendationOut(**r._asdict()) for r in recommendations(level)],
        tips=GENERAL_TIPS,
    )


@router.get(
    "/pollutants/{pollutant}/level",
    response_model=schemas.PollutantLevelOut,
    summary="Badge level for a single raw concentration",
)
def pollutant_level(pollutant: str, value: float = Query(ge=0, allow_inf_nan=False)):
    try:
        p = Pollutant(pollutant.strip().lower())
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown pollutant '{pollutant}'")

    level = level_for_concentration(p, value)
    return schemas.PollutantLevelOut(
        pollutant=p.value,
        label=p.label,
        unit=p.unit,
        value=value,
        level=level.value,
        level_label=level_label(level),
    )


@router.post("/alerts", response_model=schemas.AlertsOut, summary="Pollutants at alert level in a snapshot")
def alerts(body: schemas.Concentrations):
    found = evaluate_alerts(body.as_mapping())
    return schemas.AlertsOut(alert_flag=alert_flag(found), alerts=[schemas.AlertOut.from_alert(a) for a in found])


@router.post("/predict", response_model=schemas.PredictionOut, summary="Forward to the remote AQI predictor")
def predict(body: schemas.Concentrations):
    try:
        predicted = predict_aqi(body.as_mapping())
    except PredictionError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    # the model can overshoot the scale; classify the clamped value
    clamped = max(0, min(predicted, MAX_AQI))
    level = classify_aqi(clamped)
    logger.info("Predicted AQI %d (%s)", predicted, level.value)
    return schemas.PredictionOut(
        predicted_aqi=predicted,
        level=level.value,
        label=level_label(level),
        description=describe_aqi(clamped),
    )
