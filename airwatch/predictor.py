# airwatch/predictor.py
# Client for the remote ML AQI predictor. We only consume its integer output.

import logging
import math
import os
from numbers import Real
from typing import Mapping, Optional

import requests
from dotenv import load_dotenv

from .aqi import Pollutant, round_half_up

load_dotenv()

logger = logging.getLogger(__name__)

PREDICTOR_URL = os.getenv("PREDICTOR_URL", "https://aqi-api-rfpk.onrender.com/predict")
PREDICTOR_TIMEOUT = float(os.getenv("PREDICTOR_TIMEOUT", "10"))

# Pollutant -> field name the predictor expects (flat payload, PM2_5 with underscore)
PAYLOAD_KEYS = {
    Pollutant.PM25: "PM2_5",
    Pollutant.PM10: "PM10",
    Pollutant.SO2: "SO2",
    Pollutant.O3: "O3",
    Pollutant.NO2: "NO2",
    Pollutant.CO: "CO",
}


class PredictionError(RuntimeError):
    pass


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def build_payload(concentrations: Mapping) -> dict:
    normalized = {Pollutant(k): float(v) for k, v in concentrations.items()}
    missing = [p.value for p in PAYLOAD_KEYS if p not in normalized]
    if missing:
        raise ValueError(f"missing concentrations for: {', '.join(missing)}")
    return {field: normalized[p] for p, field in PAYLOAD_KEYS.items()}


def parse_prediction(data) -> int:
    """
    Accepts {"predicted_aqi": n}, a bare number, or {"prediction": n | [n, ...]}.
    """
    if isinstance(data, dict) and _is_number(data.get("predicted_aqi")):
        return round_half_up(data["predicted_aqi"])
    if _is_number(data):
        return round_half_up(data)
    if isinstance(data, dict) and data.get("prediction") is not None:
        pred = data["prediction"]
        if isinstance(pred, list):
            if not pred:
                raise PredictionError("empty prediction list")
            pred = pred[0]
        if isinstance(pred, str):
            try:
                pred = float(pred)
            except ValueError as e:
                raise PredictionError(f"non-numeric prediction: {pred!r}") from e
        # rejects bools, None, nested containers and inf/nan (json reads 1e400 as inf)
        if not _is_number(pred):
            raise PredictionError(f"non-numeric prediction: {pred!r}")
        return round_half_up(pred)
    raise PredictionError("Unknown response format")


def predict_aqi(concentrations: Mapping, *, url: Optional[str] = None, timeout: Optional[float] = None) -> int:
    payload = build_payload(concentrations)
    target = url or PREDICTOR_URL
    try:
        resp = requests.post(target, json=payload, timeout=timeout or PREDICTOR_TIMEOUT)
    except requests.RequestException as e:
        logger.error("Predictor request to %s failed: %s", target, e)
        raise PredictionError(f"predictor unreachable: {e}") from e

    if not resp.ok:
        logger.error("Predictor returned HTTP %s: %s", resp.status_code, resp.reason)
        raise PredictionError(f"API error: {resp.status_code} {resp.reason}")

    try:
        data = resp.json()
    except ValueError as e:
        raise PredictionError("predictor returned invalid JSON") from e

    logger.debug("Prediction API response: %s", data)
    return parse_prediction(data)
