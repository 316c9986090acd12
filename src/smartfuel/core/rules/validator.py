"""Rule pack validator — cross-checks themes against the ontology.

Loading only rejects ill-shaped documents. This module finds the softer
problems the reasoner would otherwise skip at request time.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

from smartfuel.core.rules.loader import ConfigurationError, load_config
from smartfuel.core.rules.models import SmartFuelConfig
from smartfuel.domains.nutrition.domain_logic.signal_models import (
    OMEGA3_CATEGORY,
    TARGET_TEMPLATES,
)

logger = logging.getLogger(__name__)


def validate_config(config: SmartFuelConfig) -> list[str]:
    """Return human-readable problems; an empty list means clean."""
    errors: list[str] = []
    ontology = config.ontology

    duplicates = [cid for cid, n in Counter(c.id for c in ontology.categories).items() if n > 1]
    for cid in duplicates:
        errors.append(f"ontology: duplicate category id '{cid}'")

    for category in ontology.categories:
        if not category.examples:
            errors.append(f"ontology: category '{category.id}' has no examples")

    for theme in config.rulepack.themes:
        prefix = f"theme '{theme.name}'"
        for expression in theme.invalid_triggers:
            errors.append(f"{prefix}: invalid trigger {expression!r}")
        if not theme.triggers:
            errors.append(f"{prefix}: no valid triggers, theme can never match")

        for kind, items in (("avoid", theme.avoid), ("include", theme.include)):
            for item in items:
                if ontology.get(item.category) is None:
                    errors.append(f"{prefix}: {kind} category '{item.category}' not in ontology")

        for field_name in theme.targets:
            if field_name not in TARGET_TEMPLATES:
                errors.append(f"{prefix}: unknown target '{field_name}'")

    for diet in config.rulepack.diet_preferences.values():
        for category_id in diet.exclude_categories:
            if category_id != OMEGA3_CATEGORY and ontology.get(category_id) is None:
                errors.append(
                    f"diet '{diet.name}': excluded category '{category_id}' not in ontology"
                )

    return errors


def validate_files(rulepack_path: str | Path, ontology_path: str | Path) -> list[str]:
    """Load and validate a rule pack/ontology pair from disk."""
    try:
        config = load_config(rulepack_path, ontology_path)
    except ConfigurationError as exc:
        return [f"Failed to load: {exc}"]
    return validate_config(config)


def log_validation_problems(config: SmartFuelConfig) -> int:
    """Log each problem as a warning; returns the problem count."""
    problems = validate_config(config)
    for problem in problems:
        logger.warning("Rule pack: %s", problem)
    return len(problems)
