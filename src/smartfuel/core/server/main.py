"""SmartFuel server entry point — ``python -m smartfuel.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from smartfuel.core.config.settings import Settings, get_settings
from smartfuel.core.server.app import create_app, resolve_rule_paths

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def check_bind_host(settings: Settings) -> None:
    """Refuse non-loopback hosts unless explicitly allowed.

    The guidance tools accept health data and there is no auth layer.
    """
    if settings.smartfuel_allow_insecure_bind or _is_loopback_host(settings.smartfuel_host):
        return
    raise RuntimeError(
        f"Refusing to bind SmartFuel server to {settings.smartfuel_host!r}: biomarker "
        "readings would be accepted from the network without authentication. "
        "Set SMARTFUEL_ALLOW_INSECURE_BIND=true to override (unsafe)."
    )


def run() -> None:
    """Start the SmartFuel MCP server with Streamable HTTP transport."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.smartfuel_log_level.upper(), logging.INFO))

    check_bind_host(settings)

    rulepack_path, ontology_path = resolve_rule_paths(settings)
    logger.info("Rule pack: %s", rulepack_path)
    logger.info("Food ontology: %s", ontology_path)
    logger.info(
        "Guidance history: %d records kept per user, %d returned by default",
        settings.history_retention,
        settings.history_limit_default,
    )

    mcp = create_app()
    logger.info(
        "Starting SmartFuel server on %s:%d",
        settings.smartfuel_host,
        settings.smartfuel_port,
    )
    mcp.run(
        transport="streamable-http",
        host=settings.smartfuel_host,
        port=settings.smartfuel_port,
    )


if __name__ == "__main__":
    run()
