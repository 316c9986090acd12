"""Shared test fixtures for SmartFuel tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RULEPACK_PATH", raising=False)
    monkeypatch.delenv("ONTOLOGY_PATH", raising=False)
    monkeypatch.delenv("HISTORY_LIMIT_DEFAULT", raising=False)
    monkeypatch.delenv("HISTORY_RETENTION", raising=False)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from smartfuel.core.rules.loader import parse_ontology, parse_rulepack  # noqa: E402
from smartfuel.core.rules.models import SmartFuelConfig  # noqa: E402
from smartfuel.domains.nutrition.domain_logic.reasoner import SmartFuelReasoner  # noqa: E402


# ---------------------------------------------------------------------------
# Test rule pack + ontology
# ---------------------------------------------------------------------------

TEST_RULEPACK: dict[str, Any] = {
    "version": "9.9.9",
    "themes": {
        "hypertension": {
            "triggers": ["bp_systolic > 130"],
            "avoid": [
                {"category": "high_sodium", "reason": "Raises blood pressure", "evidence_tier": "A"},
            ],
            "include": [
                {"category": "potassium_foods", "reason": "Offsets sodium", "evidence_tier": "A"},
                {"category": "omega3_fish_nuts", "reason": "Heart healthy fats", "evidence_tier": "B"},
            ],
            "targets": {"sodium_mg_max": 1500, "potassium_mg_min": 3500},
            "tips": ["Season with herbs instead of salt", "Read labels"],
        },
        "kidney_health": {
            "triggers": ["egfr < 60"],
            "avoid": [
                {"category": "high_phosphorus", "reason": "Hard on kidneys", "evidence_tier": "B"},
            ],
            "include": [
                {"category": "nuts", "reason": "Healthy fats", "evidence_tier": "C"},
            ],
            "targets": {"sodium_mg_max": 2000, "phosphorus_mg_max": 800},
        },
        "broken": {
            "triggers": ["bp_systolic >> 5", "not a trigger"],
            "include": [{"category": "missing_category", "reason": "x", "evidence_tier": "C"}],
        },
        "lipids": {
            "triggers": ["non_hdl >= 160", "trig_hdl_ratio > 3.5"],
            "avoid": [
                {"category": "missing_category", "reason": "Unknown", "evidence_tier": "C"},
                {"category": "saturated_fat", "reason": "Raises LDL", "evidence_tier": "A"},
            ],
            "include": [
                {"category": "soluble_fiber", "reason": "Lowers LDL", "evidence_tier": "A"},
            ],
            "targets": {"fiber_g_min": 30, "omega3_g_min": 2.5},
            "tips": ["Start the day with oats"],
        },
    },
    "diet_preferences": {
        "vegan": {"exclude_categories": ["omega3_fish_nuts", "lean_meats"]},
        "vegetarian": {"exclude_categories": ["lean_meats"]},
    },
}

TEST_ONTOLOGY: dict[str, Any] = {
    "categories": [
        {"id": "high_sodium", "label": "High-sodium foods", "examples": ["canned soup", "chips", "pickles", "ramen"]},
        {"id": "potassium_foods", "label": "Potassium-rich foods", "examples": ["bananas", "spinach", "sweet potatoes", "avocados"]},
        {"id": "omega3_fish_nuts", "label": "Omega-3 sources", "examples": ["salmon", "walnuts", "chia seeds", "flaxseed"]},
        {"id": "nuts", "label": "Nuts", "examples": ["almonds", "walnuts", "cashews"]},
        {"id": "high_phosphorus", "label": "High-phosphorus foods", "examples": ["dark colas", "processed cheese"]},
        {"id": "saturated_fat", "label": "Saturated fat", "examples": ["butter", "cheese", "cream"]},
        {"id": "soluble_fiber", "label": "Soluble fiber", "examples": ["oats", "barley", "beans"]},
        {"id": "lean_meats", "label": "Lean meats", "examples": ["chicken", "turkey"]},
    ]
}


@pytest.fixture
def test_config() -> SmartFuelConfig:
    return SmartFuelConfig(
        rulepack=parse_rulepack(TEST_RULEPACK),
        ontology=parse_ontology(TEST_ONTOLOGY),
    )


@pytest.fixture
def reasoner(test_config: SmartFuelConfig) -> SmartFuelReasoner:
    return SmartFuelReasoner(test_config)


@pytest.fixture
def packaged_rule_paths() -> tuple[Path, Path]:
    rules_dir = _SRC_DIR / "smartfuel" / "domains" / "nutrition" / "rules"
    return rules_dir / "rulepack.yaml", rules_dir / "ontology.json"
