import math

import pytest

from airwatch.aqi import (
    AQI_BANDS,
    CONCENTRATION_THRESHOLDS,
    TABLES,
    Breakpoint,
    InvalidConcentrationError,
    Pollutant,
    SeverityLevel,
    calculate_aqi,
    calculate_aqi_from_mapping,
    classify_aqi,
    co_level,
    level_for_concentration,
    no2_level,
    o3_level,
    pm10_level,
    pm25_level,
    so2_level,
    sub_index,
)

INDEX_RANGES = [(0, 50), (51, 100), (101, 150), (151, 200), (201, 300), (301, 500)]


@pytest.mark.parametrize("pollutant", list(Pollutant))
def test_tables_have_six_segments_with_epa_index_ranges(pollutant):
    table = TABLES[pollutant]
    assert len(table) == 6
    assert [(bp.index_low, bp.index_high) for bp in table] == INDEX_RANGES


@pytest.mark.parametrize("pollutant", list(Pollutant))
def test_sub_index_exact_at_every_segment_boundary(pollutant):
    for bp in TABLES[pollutant]:
        assert sub_index(bp.concentration_low, TABLES[pollutant]) == bp.index_low
        assert sub_index(bp.concentration_high, TABLES[pollutant]) == bp.index_high


def test_pm25_boundary_examples():
    assert sub_index(12, TABLES[Pollutant.PM25]) == 50
    assert sub_index(12.1, TABLES[Pollutant.PM25]) == 51
    assert sub_index(35.4, TABLES[Pollutant.PM25]) == 100
    assert sub_index(35.5, TABLES[Pollutant.PM25]) == 101


def test_sub_index_interpolates_inside_segment():
    # (100 - 51) / (35.4 - 12.1) * (24.5 - 12.1) + 51 = 77.08
    assert sub_index(24.5, TABLES[Pollutant.PM25]) == 77
    # (100 - 51) / (35.4 - 12.1) * (35.0 - 12.1) + 51 = 99.16
    assert sub_index(35.0, TABLES[Pollutant.PM25]) == 99


def test_sub_index_rounds_half_up():
    table = [Breakpoint(0, 100, 0, 100)]
    assert sub_index(50.5, table) == 51
    assert sub_index(2.5, table) == 3
    assert sub_index(2.49, table) == 2


def test_sub_index_saturates_above_table():
    table = TABLES[Pollutant.PM25]
    assert sub_index(500.4, table) == 500
    assert sub_index(500.5, table) == 500
    assert sub_index(10_000, table) == 500


def test_sub_index_gap_values_take_lower_segment_top():
    assert sub_index(12.05, TABLES[Pollutant.PM25]) == 50
    assert sub_index(9.45, TABLES[Pollutant.CO]) == 100
    assert sub_index(54.5, TABLES[Pollutant.O3]) == 50
    assert sub_index(360.5, TABLES[Pollutant.NO2]) == 150


@pytest.mark.parametrize("pollutant", list(Pollutant))
def test_sub_index_is_monotonic_and_bounded(pollutant):
    table = TABLES[pollutant]
    top = table[-1].concentration_high
    step = top / 4000
    previous = -1
    for i in range(4400):
        value = sub_index(i * step, table)
        assert 0 <= value <= 500
        assert value >= previous, f"{pollutant.value} dropped at {i * step}"
        previous = value


@pytest.mark.parametrize("bad", [-0.1, -50, float("nan"), float("inf"), float("-inf")])
def test_sub_index_rejects_negative_and_non_finite(bad):
    with pytest.raises(InvalidConcentrationError):
        sub_index(bad, TABLES[Pollutant.PM25])


def test_sub_index_rejects_empty_table():
    with pytest.raises(ValueError):
        sub_index(1.0, [])


def test_invalid_concentration_is_a_value_error():
    assert issubclass(InvalidConcentrationError, ValueError)


def test_calculate_aqi_all_zero():
    result = calculate_aqi(0, 0, 0, 0, 0, 0)
    assert result.aqi == 0
    assert result.level is SeverityLevel.GOOD
    assert result.dominant_pollutant is Pollutant.PM25
    assert set(result.sub_indices.values()) == {0}


def test_calculate_aqi_saturated_pm25():
    result = calculate_aqi(500, 0, 0, 0, 0, 0)
    assert result.sub_indices[Pollutant.PM25] == 500
    assert result.aqi == 500
    assert result.level is SeverityLevel.HAZARDOUS
    assert result.dominant_pollutant is Pollutant.PM25


def test_calculate_aqi_picks_maximum_sub_index():
    result = calculate_aqi(pm25=10, pm10=20, co=1, no2=120, so2=5, o3=30)
    assert result.sub_indices[Pollutant.NO2] > 100
    assert result.aqi == result.sub_indices[Pollutant.NO2] == max(result.sub_indices.values())
    assert result.dominant_pollutant is Pollutant.NO2
    assert result.level is SeverityLevel.UNHEALTHY


def test_calculate_aqi_tie_goes_to_earlier_pollutant():
    # PM10 54 and CO 4.4 both map to 50
    for _ in range(3):
        result = calculate_aqi(pm25=0, pm10=54, co=4.4, no2=0, so2=0, o3=0)
        assert result.sub_indices[Pollutant.PM10] == result.sub_indices[Pollutant.CO] == 50
        assert result.dominant_pollutant is Pollutant.PM10

    result = calculate_aqi(pm25=0, pm10=0, co=4.4, no2=53, so2=35, o3=54)
    assert result.dominant_pollutant is Pollutant.CO

    result = calculate_aqi(pm25=12, pm10=54, co=4.4, no2=53, so2=35, o3=54)
    assert result.dominant_pollutant is Pollutant.PM25


def test_calculate_aqi_sub_indices_keep_evaluation_order():
    result = calculate_aqi(1, 2, 0.3, 4, 5, 6)
    assert list(result.sub_indices) == list(Pollutant)


def test_calculate_aqi_is_idempotent():
    args = (37.2, 88, 5.1, 47, 12, 61)
    assert calculate_aqi(*args) == calculate_aqi(*args)


def test_calculate_aqi_rejects_negative_input():
    with pytest.raises(InvalidConcentrationError):
        calculate_aqi(0, 0, -1, 0, 0, 0)


def test_calculate_aqi_from_mapping_accepts_string_keys_and_defaults_missing():
    result = calculate_aqi_from_mapping({"o3": 80, Pollutant.PM25: 5})
    assert result == calculate_aqi(5, 0, 0, 0, 0, 80)
    assert result.dominant_pollutant is Pollutant.O3


@pytest.mark.parametrize(
    "aqi, expected",
    [
        (0, SeverityLevel.GOOD),
        (50, SeverityLevel.GOOD),
        (51, SeverityLevel.MODERATE),
        (100, SeverityLevel.MODERATE),
        (101, SeverityLevel.UNHEALTHY),
        (150, SeverityLevel.UNHEALTHY),
        (151, SeverityLevel.VERY_UNHEALTHY),
        (200, SeverityLevel.VERY_UNHEALTHY),
        (201, SeverityLevel.HAZARDOUS),
        (500, SeverityLevel.HAZARDOUS),
    ],
)
def test_classify_aqi_band_edges(aqi, expected):
    assert classify_aqi(aqi) is expected


def test_aqi_bands_match_segment_tops():
    assert [upper for upper, _ in AQI_BANDS] == [hi for _, hi in INDEX_RANGES[:4]]


def test_severity_levels_are_ordered_by_severity():
    levels = list(SeverityLevel)
    assert sorted(reversed(levels)) == levels
    assert SeverityLevel.GOOD < SeverityLevel.MODERATE < SeverityLevel.HAZARDOUS
    assert SeverityLevel.VERY_UNHEALTHY >= SeverityLevel.UNHEALTHY
    # plain string order would say "hazardous" < "moderate"
    assert SeverityLevel.HAZARDOUS > SeverityLevel.MODERATE


@pytest.mark.parametrize(
    "fn, value, expected",
    [
        (pm25_level, 12, SeverityLevel.GOOD),
        (pm25_level, 35.4, SeverityLevel.MODERATE),
        (pm25_level, 35.45, SeverityLevel.UNHEALTHY),
        (pm25_level, 150.4, SeverityLevel.VERY_UNHEALTHY),
        (pm25_level, 150.5, SeverityLevel.HAZARDOUS),
        (pm10_level, 0, SeverityLevel.GOOD),
        (pm10_level, 254, SeverityLevel.UNHEALTHY),
        (co_level, 9.4, SeverityLevel.MODERATE),
        (co_level, 15.5, SeverityLevel.HAZARDOUS),
        (no2_level, 360, SeverityLevel.UNHEALTHY),
        (no2_level, 649, SeverityLevel.VERY_UNHEALTHY),
        (so2_level, 304, SeverityLevel.VERY_UNHEALTHY),
        (so2_level, 305, SeverityLevel.HAZARDOUS),
        (o3_level, 70, SeverityLevel.MODERATE),
        (o3_level, 86, SeverityLevel.VERY_UNHEALTHY),
    ],
)
def test_single_pollutant_levels(fn, value, expected):
    assert fn(value) is expected


def test_level_for_concentration_accepts_string_key():
    assert level_for_concentration("pm25", 40) is SeverityLevel.UNHEALTHY


def test_level_for_concentration_rejects_negative():
    with pytest.raises(InvalidConcentrationError):
        level_for_concentration(Pollutant.O3, -1)


def test_level_for_concentration_unknown_pollutant():
    with pytest.raises(ValueError):
        level_for_concentration("co2", 400)


@pytest.mark.parametrize("pollutant", list(Pollutant))
def test_concentration_and_sub_index_levels_agree_at_boundaries(pollutant):
    table = TABLES[pollutant]
    boundaries = [c for bp in table for c in (bp.concentration_low, bp.concentration_high)]
    for c in boundaries:
        by_index = classify_aqi(sub_index(c, table))
        by_concentration = level_for_concentration(pollutant, c)
        assert by_index is by_concentration, f"{pollutant.value} disagrees at {c}"


@pytest.mark.parametrize("pollutant", list(Pollutant))
def test_concentration_thresholds_are_segment_tops(pollutant):
    tops = tuple(bp.concentration_high for bp in TABLES[pollutant][:4])
    assert all(math.isclose(a, b) for a, b in zip(CONCENTRATION_THRESHOLDS[pollutant], tops))
