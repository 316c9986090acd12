"""Personalization layer — diet type and allergy filtering.

Only the include list is personalized; avoid items pass through untouched.
Items are never mutated: narrowed items are rebuilt with dataclasses.replace.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from smartfuel.core.rules.models import RulePack
from smartfuel.domains.nutrition.domain_logic.signal_models import (
    OMEGA3_CATEGORY,
    OMEGA3_PLANT_EXAMPLES,
    OMEGA3_PLANT_LABEL,
    GuidanceItem,
)


class PersonalizationLayer:
    """Applies a user's diet type and allergies to guidance items."""

    def __init__(self, rulepack: RulePack) -> None:
        self.rulepack = rulepack

    def apply_preferences(
        self,
        avoid: Sequence[GuidanceItem],
        include: Sequence[GuidanceItem],
        diet_type: str | None = None,
        allergies: Sequence[str] | None = None,
    ) -> tuple[list[GuidanceItem], list[GuidanceItem]]:
        """Return the filtered (avoid, include) pair."""
        filtered_include = self._apply_diet(list(include), diet_type)
        filtered_include = _apply_allergies(filtered_include, allergies)
        return list(avoid), filtered_include

    def _apply_diet(self, items: list[GuidanceItem], diet_type: str | None) -> list[GuidanceItem]:
        diet = self.rulepack.get_diet(diet_type)
        if diet is None or not diet.exclude_categories:
            return items

        excluded = set(diet.exclude_categories)
        kept: list[GuidanceItem] = []
        for item in items:
            if item.category not in excluded:
                kept.append(item)
                continue
            if item.category == OMEGA3_CATEGORY:
                narrowed = _plant_based_omega3(item)
                if narrowed is not None:
                    kept.append(narrowed)
        return kept


def _plant_based_omega3(item: GuidanceItem) -> GuidanceItem | None:
    examples = tuple(ex for ex in item.examples if ex.lower() in OMEGA3_PLANT_EXAMPLES)
    if not examples:
        return None
    return replace(item, examples=examples, category_label=OMEGA3_PLANT_LABEL)


def _apply_allergies(
    items: list[GuidanceItem], allergies: Sequence[str] | None
) -> list[GuidanceItem]:
    keywords = [a.strip().lower() for a in (allergies or []) if a and a.strip()]
    if not keywords:
        return items

    kept: list[GuidanceItem] = []
    for item in items:
        examples = tuple(
            ex for ex in item.examples if not any(k in ex.lower() for k in keywords)
        )
        if not examples:
            continue
        kept.append(item if examples == item.examples else replace(item, examples=examples))
    return kept
