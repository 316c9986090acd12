"""SmartFuel MCP Server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastmcp import FastMCP

from smartfuel.core.config.settings import Settings, get_settings
from smartfuel.core.rules.models import SmartFuelConfig
from smartfuel.core.rules.validator import log_validation_problems
from smartfuel.domains.nutrition.domain_logic.history import GuidanceHistory
from smartfuel.domains.nutrition.domain_logic.service import SmartFuelService
from smartfuel.domains.nutrition.resources.rulepack import register_rulepack_resources
from smartfuel.domains.nutrition.tools.smartfuel_tools import register_smartfuel_tools

logger = logging.getLogger(__name__)

SERVER_VERSION = "0.1.0"

# Rule files live under src/smartfuel/domains/nutrition/rules/
_RULES_DIR = Path(__file__).resolve().parent.parent.parent / "domains" / "nutrition" / "rules"
DEFAULT_RULEPACK_PATH = _RULES_DIR / "rulepack.yaml"
DEFAULT_ONTOLOGY_PATH = _RULES_DIR / "ontology.json"


def resolve_rule_paths(settings: Settings) -> tuple[Path, Path]:
    """Rule pack and ontology paths; empty settings fall back to the packaged files."""
    rulepack_path = Path(settings.rulepack_path) if settings.rulepack_path else DEFAULT_RULEPACK_PATH
    ontology_path = Path(settings.ontology_path) if settings.ontology_path else DEFAULT_ONTOLOGY_PATH
    return rulepack_path, ontology_path


def create_app(
    *,
    config_override: SmartFuelConfig | None = None,
    history_override: GuidanceHistory | None = None,
) -> FastMCP:
    """Create and configure the SmartFuel MCP server.

    1. Loads the rule pack and ontology (ConfigurationError propagates:
       the server must not start without valid rules)
    2. Logs rule pack validation problems
    3. Registers tools and resources
    """
    settings = get_settings()

    server = FastMCP(
        "SmartFuel Nutrition Guidance",
        instructions=(
            "SmartFuel — rule-based nutrition guidance. Converts biomarker readings, "
            "diet preferences, and allergies into foods to limit, foods to add, "
            "daily targets, and a practical tip. Deterministic; no LLM involved."
        ),
    )

    rulepack_path, ontology_path = resolve_rule_paths(settings)

    service = SmartFuelService(rulepack_path, ontology_path, config=config_override)
    problem_count = log_validation_problems(service.config)
    if problem_count:
        logger.warning("Rule pack loaded with %d problem(s)", problem_count)

    history = history_override
    if history is None:
        history = GuidanceHistory(settings.history_retention)

    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        config = service.config
        return {
            "status": "ok",
            "server": "SmartFuel Nutrition Guidance",
            "version": SERVER_VERSION,
            "rulepack_version": config.rulepack.version,
            "themes_loaded": len(config.rulepack.themes),
            "categories_loaded": len(config.ontology.categories),
            "guidance_records": history.count(),
        }

    register_smartfuel_tools(server, service, history, settings.history_limit_default)
    logger.info("SmartFuel tools registered")

    register_rulepack_resources(server, service)

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
