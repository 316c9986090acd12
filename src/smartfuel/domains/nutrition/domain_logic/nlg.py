"""Plain-English rendering of SmartFuel guidance for display."""

from __future__ import annotations

from typing import Any, Sequence

from smartfuel.domains.nutrition.domain_logic.signal_models import (
    GuidanceItem,
    SmartFuelGuidance,
)

EVIDENCE_TIER_LABELS = {
    "A": "Strong clinical evidence",
    "B": "Well-supported by research",
    "C": "Expert consensus",
}


def format_examples(examples: Sequence[str], limit: int = 2) -> str:
    """``a``, ``a and b``, or ``a, b, and c``."""
    selected = list(examples[:limit])
    if not selected:
        return ""
    if len(selected) == 1:
        return selected[0]
    if len(selected) == 2:
        return f"{selected[0]} and {selected[1]}"
    return f"{', '.join(selected[:-1])}, and {selected[-1]}"


def format_avoid_item(item: GuidanceItem) -> str:
    examples = format_examples(item.examples)
    return f"Limit {item.category_label.lower()} like {examples} - {item.reason.lower()}."


def format_include_item(item: GuidanceItem) -> str:
    examples = format_examples(item.examples)
    return f"Add more {item.category_label.lower()} like {examples} - {item.reason.lower()}."


def format_evidence_tier(tier: str) -> str:
    return EVIDENCE_TIER_LABELS.get(tier, "Evidence-based")


def format_guidance_for_display(guidance: SmartFuelGuidance) -> dict[str, Any]:
    """Display block: overview, sentence-form items, targets, tip."""
    return {
        "overview": guidance.overview,
        "avoidItems": [format_avoid_item(item) for item in guidance.avoid],
        "includeItems": [format_include_item(item) for item in guidance.include],
        "targets": list(guidance.targets),
        "tip": guidance.tip,
    }
