"""SmartFuel signal/guidance models and domain constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

# Biomarker type (lower-cased) -> canonical signal name.
# Types not listed here pass through as their own signal name.
BIOMARKER_SIGNAL_NAMES = {
    "blood_pressure_systolic": "bp_systolic",
    "blood_pressure_diastolic": "bp_diastolic",
    "ldl_cholesterol": "ldl_cholesterol",
    "total_cholesterol": "total_cholesterol",
    "hdl_cholesterol": "hdl_cholesterol",
    "triglycerides": "triglycerides",
    "glucose": "fasting_glucose",
    "fasting_glucose": "fasting_glucose",
    "hba1c": "hba1c",
    "creatinine": "creatinine",
    "egfr": "egfr",
    "alt": "alt",
    "ast": "ast",
    "hscrp": "hsCRP",
    "hs_crp": "hsCRP",
}

# Target field -> (dedup key, display template). Order matters: within one
# theme, fields are emitted in this order.
TARGET_TEMPLATES: dict[str, tuple[str, str]] = {
    "sodium_mg_max": ("sodium", "Keep sodium under {} mg/day"),
    "potassium_mg_min": ("potassium", "Aim for at least {} mg of potassium daily"),
    "potassium_mg_max": ("potassium", "Keep potassium under {} mg/day"),
    "fiber_g_min": ("fiber", "Aim for at least {} g of fiber daily"),
    "sat_fat_g_max": ("sat_fat", "Stay below {} g of saturated fat per day"),
    "sugar_g_max": ("sugar", "Limit added sugars to {} g/day"),
    "protein_g_max": ("protein", "Keep protein under {} g/day"),
    "protein_pct_min": ("protein_pct", "Aim for at least {}% of calories from protein"),
    "carbs_pct_max": ("carbs", "Keep carbs under {}% of total calories"),
    "omega3_g_min": ("omega3", "Include at least {} g of omega-3 fatty acids daily"),
    "plant_sterols_mg_min": ("plant_sterols", "Aim for {} mg of plant sterols daily"),
    "phosphorus_mg_max": ("phosphorus", "Limit phosphorus to {} mg/day"),
}

THEME_LABELS = {
    "hypertension": "blood pressure management",
    "elevated_ldl": "cholesterol balance",
    "elevated_triglycerides": "triglyceride control",
    "insulin_resistance": "blood sugar regulation",
    "kidney_health": "kidney support",
    "liver_health": "liver health",
    "inflammation": "inflammation reduction",
}

OMEGA3_CATEGORY = "omega3_fish_nuts"
OMEGA3_PLANT_EXAMPLES = frozenset({"walnuts", "chia seeds", "flaxseed"})
OMEGA3_PLANT_LABEL = "Omega-3 sources (plant-based)"

MAX_EXAMPLES_PER_ITEM = 3
MAX_OVERVIEW_FOCUS_AREAS = 2

DEFAULT_TIP = "Small, consistent improvements drive lasting results"


# ---------------------------------------------------------------------------
# Input types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BiomarkerReading:
    """A single recorded biomarker value."""

    type: str
    value: float
    recorded_at: datetime

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BiomarkerReading:
        """Parse ``{type, value, recordedAt}``; raises ValueError on bad input."""
        if not isinstance(data, dict):
            raise ValueError(f"biomarker reading must be an object, got {type(data).__name__}")
        kind = data.get("type")
        if not isinstance(kind, str) or not kind.strip():
            raise ValueError("biomarker reading requires a non-empty 'type'")
        value = data.get("value")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"biomarker '{kind}' requires a numeric 'value'")
        raw_ts = data.get("recordedAt", data.get("recorded_at"))
        if raw_ts is None:
            raise ValueError(f"biomarker '{kind}' requires 'recordedAt'")
        return cls(type=kind, value=float(value), recorded_at=parse_timestamp(raw_ts))


@dataclass(frozen=True)
class NutritionProfile:
    """Diet preferences and allergies from the user profile."""

    dietary_preferences: tuple[str, ...] = ()
    allergies: tuple[str, ...] = ()

    @property
    def diet_type(self) -> str | None:
        """The primary diet type is the first listed preference."""
        return self.dietary_preferences[0] if self.dietary_preferences else None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> NutritionProfile | None:
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ValueError("nutrition profile must be an object")
        prefs = data.get("dietaryPreferences", data.get("dietary_preferences")) or []
        allergies = data.get("allergies") or []
        if not isinstance(prefs, list) or not isinstance(allergies, list):
            raise ValueError("dietaryPreferences and allergies must be lists")
        return cls(
            dietary_preferences=tuple(str(p) for p in prefs),
            allergies=tuple(str(a) for a in allergies),
        )


def parse_timestamp(value: Any) -> datetime:
    """Accept a datetime or an ISO-8601 string; naive values are taken as UTC."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"invalid timestamp: {value!r}") from exc
    else:
        raise ValueError(f"invalid timestamp: {value!r}")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GuidanceItem:
    """A food category to avoid or include, with display examples."""

    category: str
    category_label: str
    examples: tuple[str, ...]
    reason: str
    evidence_tier: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "categoryLabel": self.category_label,
            "examples": list(self.examples),
            "reason": self.reason,
            "evidenceTier": self.evidence_tier,
        }


@dataclass(frozen=True)
class EvidenceSource:
    """Provenance echo of the inputs behind a guidance result."""

    biomarkers: tuple[tuple[str, float], ...] = ()
    goals: tuple[str, ...] = ()
    diet_type: str | None = None
    allergies: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "biomarkers": [{"type": t, "value": v} for t, v in self.biomarkers],
            "goals": list(self.goals),
            "dietType": self.diet_type,
            "allergies": list(self.allergies),
        }


@dataclass(frozen=True)
class SmartFuelGuidance:
    """Final nutrition guidance for one request."""

    themes_detected: tuple[str, ...]
    overview: str
    avoid: tuple[GuidanceItem, ...]
    include: tuple[GuidanceItem, ...]
    targets: tuple[str, ...]
    tip: str
    rules_applied: tuple[str, ...]
    evidence_source: EvidenceSource = field(default_factory=EvidenceSource)

    def to_dict(self) -> dict[str, Any]:
        """JSON wire shape (camelCase keys)."""
        return {
            "themesDetected": list(self.themes_detected),
            "overview": self.overview,
            "avoid": [item.to_dict() for item in self.avoid],
            "include": [item.to_dict() for item in self.include],
            "targets": list(self.targets),
            "tip": self.tip,
            "rulesApplied": list(self.rules_applied),
            "evidenceSource": self.evidence_source.to_dict(),
        }


# ---------------------------------------------------------------------------
# Default guidance (no theme matched)
# ---------------------------------------------------------------------------

DEFAULT_OVERVIEW = (
    "Your biomarkers look good! SmartFuel recommends maintaining a balanced, "
    "whole-foods diet to support your long-term health."
)

DEFAULT_AVOID = (
    GuidanceItem(
        category="refined_sugars_sweets",
        category_label="Refined sugars and sweets",
        examples=("candy", "soda", "pastries"),
        reason="Excess sugar increases inflammation and metabolic risk",
        evidence_tier="A",
    ),
    GuidanceItem(
        category="processed_meats",
        category_label="Processed meats",
        examples=("bacon", "sausage", "deli meats"),
        reason="High in sodium and preservatives",
        evidence_tier="A",
    ),
)

DEFAULT_INCLUDE = (
    GuidanceItem(
        category="colorful_vegetables_fruits",
        category_label="Colorful vegetables and fruits",
        examples=("bell peppers", "berries", "leafy greens"),
        reason="Rich in antioxidants and fiber for overall health",
        evidence_tier="A",
    ),
    GuidanceItem(
        category="whole_grains_fiber",
        category_label="Whole grains with fiber",
        examples=("brown rice", "quinoa", "oats"),
        reason="Support digestive health and stable energy",
        evidence_tier="A",
    ),
)

DEFAULT_TARGETS = (
    "Aim for at least 25-30 g of fiber daily",
    "Include a variety of colorful vegetables each day",
)

DEFAULT_GUIDANCE_TIP = "Focus on whole, minimally processed foods for optimal health"
