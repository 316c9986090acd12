"""Signal normalization: biomarker readings -> canonical signal map.

Keeps only the most recent reading per canonical signal name (aliases of one
biomarker compete with each other), and adds derived lipid ratios when their inputs
are present. Missing data never raises; it simply leaves signals out.
"""

from __future__ import annotations

from typing import Iterable

from smartfuel.domains.nutrition.domain_logic.signal_models import (
    BIOMARKER_SIGNAL_NAMES,
    BiomarkerReading,
)


def latest_readings(readings: Iterable[BiomarkerReading]) -> dict[str, BiomarkerReading]:
    """Most recent reading per canonical signal name.

    Aliases (``glucose`` / ``fasting_glucose``, ``HbA1c`` / ``hba1c``) compete
    for the same slot. On equal timestamps the reading that appears later in
    the input wins.
    """
    latest: dict[str, BiomarkerReading] = {}
    for reading in readings:
        name = signal_name_for(reading.type)
        existing = latest.get(name)
        if existing is None or reading.recorded_at >= existing.recorded_at:
            latest[name] = reading
    return latest


def signal_name_for(biomarker_type: str) -> str:
    return BIOMARKER_SIGNAL_NAMES.get(biomarker_type.lower(), biomarker_type)


def normalize_signals(readings: Iterable[BiomarkerReading]) -> dict[str, float]:
    """Build the signal map used by the risk profiler."""
    signals: dict[str, float] = {
        name: reading.value for name, reading in latest_readings(readings).items()
    }

    ldl = signals.get("ldl_cholesterol")
    hdl = signals.get("hdl_cholesterol")
    trig = signals.get("triglycerides")

    if ldl is not None and hdl is not None:
        signals["non_hdl"] = ldl + (trig or 0.0) / 5 - hdl

    if trig is not None and hdl:
        signals["trig_hdl_ratio"] = trig / hdl

    return signals
