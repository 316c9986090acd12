"""SmartFuel reasoner — biomarkers in, nutrition guidance out.

Pipeline (single pass, no I/O):
    normalize signals -> identify themes -> resolve avoid/include items
    -> personalize -> targets -> tip -> overview

All computation is deterministic. The configuration snapshot is injected
and never mutated, so one reasoner can serve concurrent requests.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from smartfuel.core.rules.models import Ontology, SmartFuelConfig, ThemeItem
from smartfuel.domains.nutrition.domain_logic.personalization import PersonalizationLayer
from smartfuel.domains.nutrition.domain_logic.risk_profiler import RiskProfiler
from smartfuel.domains.nutrition.domain_logic.signal_models import (
    DEFAULT_AVOID,
    DEFAULT_GUIDANCE_TIP,
    DEFAULT_INCLUDE,
    DEFAULT_OVERVIEW,
    DEFAULT_TARGETS,
    DEFAULT_TIP,
    MAX_EXAMPLES_PER_ITEM,
    MAX_OVERVIEW_FOCUS_AREAS,
    THEME_LABELS,
    BiomarkerReading,
    EvidenceSource,
    GuidanceItem,
    NutritionProfile,
    SmartFuelGuidance,
)
from smartfuel.domains.nutrition.domain_logic.signal_normalizer import normalize_signals
from smartfuel.domains.nutrition.domain_logic.target_setter import TargetSetter

logger = logging.getLogger(__name__)


class SmartFuelReasoner:
    """Orchestrates the five SmartFuel stages over one config snapshot."""

    def __init__(self, config: SmartFuelConfig) -> None:
        self.config = config
        self.risk_profiler = RiskProfiler(config.rulepack)
        self.target_setter = TargetSetter(config.rulepack)
        self.personalization = PersonalizationLayer(config.rulepack)

    def generate_guidance(
        self,
        biomarkers: Iterable[BiomarkerReading],
        nutrition_profile: NutritionProfile | None = None,
        goals: Sequence[str] | None = None,
    ) -> SmartFuelGuidance:
        """Generate personalized nutrition guidance from health signals."""
        goals = tuple(goals or ())
        diet_type = nutrition_profile.diet_type if nutrition_profile else None
        allergies = nutrition_profile.allergies if nutrition_profile else ()

        signals = normalize_signals(biomarkers)
        themes = self.risk_profiler.identify_themes(signals)

        if not themes:
            logger.debug("No SmartFuel themes matched %d signals; using default guidance", len(signals))
            return default_guidance(goals=goals, diet_type=diet_type, allergies=allergies)

        avoid_items: list[GuidanceItem] = []
        include_items: list[GuidanceItem] = []
        rules_applied: list[str] = []

        for theme_name in themes:
            theme = self.config.rulepack.get_theme(theme_name)
            if theme is None:
                continue
            rules_applied.append(theme_name)
            avoid_items.extend(_resolve_items(theme_name, theme.avoid, self.config.ontology))
            include_items.extend(_resolve_items(theme_name, theme.include, self.config.ontology))

        avoid, include = self.personalization.apply_preferences(
            avoid_items, include_items, diet_type, allergies
        )

        return SmartFuelGuidance(
            themes_detected=tuple(themes),
            overview=generate_overview(themes),
            avoid=tuple(avoid),
            include=tuple(include),
            targets=tuple(self.target_setter.set_targets(themes)),
            tip=self.select_tip(themes),
            rules_applied=tuple(rules_applied),
            evidence_source=EvidenceSource(
                biomarkers=tuple(signals.items()),
                goals=goals,
                diet_type=diet_type,
                allergies=tuple(allergies),
            ),
        )

    def select_tip(self, themes: Sequence[str]) -> str:
        """First tip of the first matched theme, else the default tip."""
        if themes:
            theme = self.config.rulepack.get_theme(themes[0])
            if theme is not None and theme.tips:
                return theme.tips[0]
        return DEFAULT_TIP


def _resolve_items(
    theme_name: str, items: Iterable[ThemeItem], ontology: Ontology
) -> list[GuidanceItem]:
    resolved: list[GuidanceItem] = []
    for item in items:
        category = ontology.get(item.category)
        if category is None:
            logger.warning(
                "Theme '%s' references unknown category '%s'; skipping", theme_name, item.category
            )
            continue
        examples = category.examples[:MAX_EXAMPLES_PER_ITEM]
        if not examples:
            logger.warning("Category '%s' has no examples; skipping", category.id)
            continue
        resolved.append(
            GuidanceItem(
                category=item.category,
                category_label=category.label,
                examples=examples,
                reason=item.reason,
                evidence_tier=item.evidence_tier,
            )
        )
    return resolved


def generate_overview(themes: Sequence[str]) -> str:
    """One-sentence summary naming up to two focus areas."""
    focus_areas = [THEME_LABELS.get(t, t) for t in themes][:MAX_OVERVIEW_FOCUS_AREAS]

    if not focus_areas:
        return "SmartFuel has analyzed your data to provide personalized nutrition guidance."
    if len(focus_areas) == 1:
        return f"SmartFuel is helping you improve {focus_areas[0]}."
    return f"SmartFuel has identified key focus areas: {' and '.join(focus_areas)}."


def default_guidance(
    *,
    goals: Sequence[str] = (),
    diet_type: str | None = None,
    allergies: Sequence[str] = (),
) -> SmartFuelGuidance:
    """General healthy-eating guidance used when no theme matches."""
    return SmartFuelGuidance(
        themes_detected=(),
        overview=DEFAULT_OVERVIEW,
        avoid=DEFAULT_AVOID,
        include=DEFAULT_INCLUDE,
        targets=DEFAULT_TARGETS,
        tip=DEFAULT_GUIDANCE_TIP,
        rules_applied=("default",),
        evidence_source=EvidenceSource(
            biomarkers=(),
            goals=tuple(goals),
            diet_type=diet_type,
            allergies=tuple(allergies),
        ),
    )
