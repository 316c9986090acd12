"""Unit tests for biomarker -> signal normalization."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from smartfuel.domains.nutrition.domain_logic.signal_models import BiomarkerReading
from smartfuel.domains.nutrition.domain_logic.signal_normalizer import (
    latest_readings,
    normalize_signals,
    signal_name_for,
)

_BASE = datetime(2026, 1, 15, 8, 0, tzinfo=timezone.utc)


def _reading(type: str, value: float, days_ago: int = 0) -> BiomarkerReading:
    return BiomarkerReading(type=type, value=value, recorded_at=_BASE - timedelta(days=days_ago))


class TestLatestReadings:
    def test_keeps_most_recent_regardless_of_order(self):
        readings = [
            _reading("hba1c", 5.2, days_ago=1),
            _reading("hba1c", 6.1, days_ago=90),
        ]
        assert latest_readings(readings)["hba1c"].value == 5.2

    def test_tie_goes_to_later_input(self):
        readings = [_reading("alt", 30), _reading("alt", 55)]
        assert latest_readings(readings)["alt"].value == 55

    def test_aliases_share_one_slot(self):
        readings = [_reading("fasting_glucose", 90), _reading("glucose", 130, days_ago=365)]
        latest = latest_readings(readings)
        assert list(latest) == ["fasting_glucose"]
        assert latest["fasting_glucose"].value == 90

    def test_case_variants_compare_by_timestamp(self):
        readings = [_reading("hba1c", 5.2), _reading("HbA1c", 6.5, days_ago=365)]
        assert normalize_signals(readings) == {"hba1c": 5.2}

    def test_alias_tie_goes_to_later_input(self):
        readings = [_reading("hs_crp", 1.0), _reading("hscrp", 4.0)]
        assert normalize_signals(readings)["hsCRP"] == 4.0


class TestSignalNames:
    @pytest.mark.parametrize(
        "biomarker_type, expected",
        [
            ("blood_pressure_systolic", "bp_systolic"),
            ("Blood_Pressure_Diastolic", "bp_diastolic"),
            ("glucose", "fasting_glucose"),
            ("HS_CRP", "hsCRP"),
            ("hscrp", "hsCRP"),
            ("vitamin_d", "vitamin_d"),
            ("Ferritin", "Ferritin"),
        ],
    )
    def test_mapping(self, biomarker_type, expected):
        assert signal_name_for(biomarker_type) == expected


class TestNormalizeSignals:
    def test_empty_input_gives_empty_map(self):
        assert normalize_signals([]) == {}

    def test_maps_types_to_signals(self):
        signals = normalize_signals([
            _reading("blood_pressure_systolic", 145),
            _reading("egfr", 72),
        ])
        assert signals == {"bp_systolic": 145, "egfr": 72}

    def test_non_hdl_with_triglycerides(self):
        signals = normalize_signals([
            _reading("ldl_cholesterol", 150),
            _reading("hdl_cholesterol", 40),
            _reading("triglycerides", 200),
        ])
        assert signals["non_hdl"] == pytest.approx(150 + 200 / 5 - 40)
        assert signals["trig_hdl_ratio"] == pytest.approx(5.0)

    def test_non_hdl_without_triglycerides(self):
        signals = normalize_signals([
            _reading("ldl_cholesterol", 150),
            _reading("hdl_cholesterol", 40),
        ])
        assert signals["non_hdl"] == pytest.approx(110)
        assert "trig_hdl_ratio" not in signals

    def test_no_derived_signals_without_hdl(self):
        signals = normalize_signals([
            _reading("ldl_cholesterol", 150),
            _reading("triglycerides", 200),
        ])
        assert "non_hdl" not in signals
        assert "trig_hdl_ratio" not in signals

    def test_zero_hdl_skips_ratio(self):
        signals = normalize_signals([
            _reading("hdl_cholesterol", 0),
            _reading("triglycerides", 200),
        ])
        assert "trig_hdl_ratio" not in signals

    def test_uses_latest_value_for_derived_signals(self):
        signals = normalize_signals([
            _reading("ldl_cholesterol", 190, days_ago=200),
            _reading("ldl_cholesterol", 120, days_ago=2),
            _reading("hdl_cholesterol", 50),
        ])
        assert signals["ldl_cholesterol"] == 120
        assert signals["non_hdl"] == pytest.approx(70)


class TestBiomarkerReadingParsing:
    def test_from_dict_accepts_iso_z(self):
        reading = BiomarkerReading.from_dict(
            {"type": "hba1c", "value": 6, "recordedAt": "2026-01-10T09:30:00Z"}
        )
        assert reading.value == 6.0
        assert reading.recorded_at == datetime(2026, 1, 10, 9, 30, tzinfo=timezone.utc)

    def test_naive_timestamp_treated_as_utc(self):
        reading = BiomarkerReading.from_dict(
            {"type": "alt", "value": 30, "recorded_at": "2026-01-10T09:30:00"}
        )
        assert reading.recorded_at.tzinfo == timezone.utc

    @pytest.mark.parametrize(
        "payload",
        [
            {"value": 1, "recordedAt": "2026-01-01"},
            {"type": "alt", "value": "high", "recordedAt": "2026-01-01"},
            {"type": "alt", "value": True, "recordedAt": "2026-01-01"},
            {"type": "alt", "value": 1},
            {"type": "alt", "value": 1, "recordedAt": "yesterday"},
            "alt=30",
        ],
    )
    def test_bad_payloads_raise_value_error(self, payload):
        with pytest.raises(ValueError):
            BiomarkerReading.from_dict(payload)
