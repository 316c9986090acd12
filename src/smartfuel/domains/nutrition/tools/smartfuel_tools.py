"""MCP tools for SmartFuel nutrition guidance."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP

if TYPE_CHECKING:
    from smartfuel.domains.nutrition.domain_logic.history import GuidanceHistory
    from smartfuel.domains.nutrition.domain_logic.service import SmartFuelService

from smartfuel.domains.nutrition.domain_logic.nlg import format_guidance_for_display
from smartfuel.domains.nutrition.domain_logic.signal_models import (
    BiomarkerReading,
    NutritionProfile,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _parse_biomarkers(biomarkers: list[dict[str, Any]] | None) -> list[BiomarkerReading]:
    """Parse raw reading dicts; raises ValueError naming the bad index."""
    readings: list[BiomarkerReading] = []
    for i, raw in enumerate(biomarkers or []):
        try:
            readings.append(BiomarkerReading.from_dict(raw))
        except ValueError as exc:
            raise ValueError(f"biomarkers[{i}]: {exc}") from exc
    return readings


def _parse_goals(goals: list[str] | None) -> list[str]:
    if goals is None:
        return []
    if not isinstance(goals, list) or not all(isinstance(g, str) for g in goals):
        raise ValueError("goals must be a list of strings")
    return goals


def register_smartfuel_tools(
    mcp: FastMCP,
    service: SmartFuelService,
    history: GuidanceHistory,
    history_limit_default: int = 10,
) -> None:
    """Register SmartFuel guidance, history, and reload tools."""

    @mcp.tool
    def smartfuel_guidance(
        biomarkers: list[dict[str, Any]],
        nutrition_profile: dict[str, Any] | None = None,
        goals: list[str] | None = None,
        user_id: str | None = None,
        include_display: bool = False,
    ) -> dict[str, Any]:
        """Generate personalized nutrition guidance from biomarker readings.

        Args:
            biomarkers: Readings as {type, value, recordedAt}. Only the most
                recent reading per type is used.
            nutrition_profile: Optional {dietaryPreferences, allergies}. The
                first dietary preference is treated as the diet type.
            goals: Optional free-text goals, echoed in the provenance block.
            user_id: When set, the result is stored as the user's current
                guidance and earlier guidance is marked superseded.
            include_display: Add plain-English sentences under 'display'.
        """
        readings = _parse_biomarkers(biomarkers)
        profile = NutritionProfile.from_dict(nutrition_profile)
        goal_list = _parse_goals(goals)

        guidance = service.generate_guidance(readings, profile, goal_list)
        logger.info(
            "SmartFuel guidance generated: %d readings, themes=%s",
            len(readings),
            list(guidance.themes_detected),
        )

        result = guidance.to_dict()
        if user_id:
            record = history.record(user_id, guidance)
            result["guidanceId"] = record.id
        if include_display:
            result["display"] = format_guidance_for_display(guidance)
        return result

    @mcp.tool
    def smartfuel_current_guidance(user_id: str) -> dict[str, Any]:
        """Return the user's active guidance, if any."""
        record = history.current(user_id)
        return {"userId": user_id, "current": record.to_dict() if record else None}

    @mcp.tool
    def smartfuel_guidance_history(user_id: str, limit: int | None = None) -> dict[str, Any]:
        """Return the user's stored guidance, newest first."""
        effective_limit = history_limit_default if limit is None else limit
        records = history.history(user_id, limit=effective_limit)
        return {
            "userId": user_id,
            "count": len(records),
            "records": [r.to_dict() for r in records],
        }

    @mcp.tool
    def smartfuel_reload_rules() -> dict[str, Any]:
        """Reload the rule pack and ontology from disk.

        On failure the previous rules stay active and the error is reported.
        """
        config = service.reload()
        return {
            "status": "reloaded",
            "rulepack_version": config.rulepack.version,
            "themes_loaded": len(config.rulepack.themes),
            "categories_loaded": len(config.ontology.categories),
        }
