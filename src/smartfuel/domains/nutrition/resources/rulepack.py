"""MCP Resources for SmartFuel rule pack discovery."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import FastMCP

if TYPE_CHECKING:
    from smartfuel.domains.nutrition.domain_logic.service import SmartFuelService


def register_rulepack_resources(mcp: FastMCP, service: SmartFuelService) -> None:
    """Register rule pack discovery resources on the MCP server."""

    @mcp.resource("smartfuel://rulepack/themes")
    def rulepack_themes_resource() -> str:
        """Discover the loaded SmartFuel themes and diet preferences."""
        rulepack = service.config.rulepack
        return json.dumps(
            {
                "version": rulepack.version,
                "theme_count": len(rulepack.themes),
                "themes": [
                    {
                        "name": t.name,
                        "triggers": [trigger.source for trigger in t.triggers],
                        "avoid": [item.category for item in t.avoid],
                        "include": [item.category for item in t.include],
                        "targets": list(t.targets.keys()),
                    }
                    for t in rulepack.themes
                ],
                "diet_preferences": {
                    name: list(diet.exclude_categories)
                    for name, diet in rulepack.diet_preferences.items()
                },
            },
            indent=2,
        )
