"""Rule pack and ontology loader — reads YAML/JSON definitions from disk.

Loading is all-or-nothing: any unreadable file or ill-shaped document raises
ConfigurationError. Individual malformed trigger expressions are not shape
errors; they are logged and kept aside on the Theme as ``invalid_triggers``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from smartfuel.core.rules.models import (
    DietPreference,
    Ontology,
    OntologyCategory,
    RulePack,
    SmartFuelConfig,
    Theme,
    ThemeItem,
)
from smartfuel.core.rules.triggers import parse_triggers

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when the rule pack or ontology cannot be loaded."""


def load_config(rulepack_path: str | Path, ontology_path: str | Path) -> SmartFuelConfig:
    """Load both configuration files into one immutable snapshot."""
    rulepack = load_rulepack_file(rulepack_path)
    ontology = load_ontology_file(ontology_path)
    logger.info(
        "Loaded SmartFuel config: %d themes, %d diet preferences, %d categories",
        len(rulepack.themes),
        len(rulepack.diet_preferences),
        len(ontology.categories),
    )
    return SmartFuelConfig(rulepack=rulepack, ontology=ontology)


# ---------------------------------------------------------------------------
# Rule pack
# ---------------------------------------------------------------------------

def load_rulepack_file(path: str | Path) -> RulePack:
    """Parse a rule pack YAML file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read rule pack {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Cannot parse rule pack {path}: {exc}") from exc

    try:
        return parse_rulepack(data)
    except ConfigurationError as exc:
        raise ConfigurationError(f"{path}: {exc}") from exc


def parse_rulepack(data: Any) -> RulePack:
    """Build a RulePack from an already-parsed document."""
    if not isinstance(data, dict):
        raise ConfigurationError("rule pack must be a mapping")

    themes_data = data.get("themes")
    if not isinstance(themes_data, dict) or not themes_data:
        raise ConfigurationError("rule pack has no 'themes' mapping")

    themes = tuple(_parse_theme(name, body) for name, body in themes_data.items())

    diets_data = data.get("diet_preferences") or {}
    if not isinstance(diets_data, dict):
        raise ConfigurationError("'diet_preferences' must be a mapping")

    diet_preferences: dict[str, DietPreference] = {}
    for diet_name, body in diets_data.items():
        body = body or {}
        if not isinstance(body, dict):
            raise ConfigurationError(f"diet preference '{diet_name}' must be a mapping")
        diet_preferences[str(diet_name)] = DietPreference(
            name=str(diet_name),
            exclude_categories=tuple(str(c) for c in _as_list(body, "exclude_categories")),
        )

    return RulePack(
        themes=themes,
        diet_preferences=MappingProxyType(diet_preferences),
        version=str(data.get("version", "")),
    )


def _parse_theme(name: Any, body: Any) -> Theme:
    if not isinstance(body, dict):
        raise ConfigurationError(f"theme '{name}' must be a mapping")

    triggers, rejected = parse_triggers(_as_list(body, "triggers"))
    if rejected:
        logger.warning("Theme '%s' has %d invalid trigger(s): %s", name, len(rejected), rejected)

    targets_data = body.get("targets") or {}
    if not isinstance(targets_data, dict):
        raise ConfigurationError(f"theme '{name}': 'targets' must be a mapping")
    targets: dict[str, float] = {}
    for key, value in targets_data.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(f"theme '{name}': target '{key}' must be a number")
        targets[str(key)] = value

    return Theme(
        name=str(name),
        triggers=tuple(triggers),
        invalid_triggers=tuple(rejected),
        avoid=tuple(_parse_item(name, item) for item in _as_list(body, "avoid")),
        include=tuple(_parse_item(name, item) for item in _as_list(body, "include")),
        targets=MappingProxyType(targets),
        tips=tuple(str(t) for t in _as_list(body, "tips")),
    )


def _parse_item(theme_name: Any, item: Any) -> ThemeItem:
    if not isinstance(item, dict) or not item.get("category"):
        raise ConfigurationError(f"theme '{theme_name}': item without a category: {item!r}")
    return ThemeItem(
        category=str(item["category"]),
        reason=str(item.get("reason", "")),
        evidence_tier=str(item.get("evidence_tier", "")),
    )


def _as_list(body: dict[str, Any], key: str) -> list[Any]:
    value = body.get(key) or []
    if not isinstance(value, list):
        raise ConfigurationError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


# ---------------------------------------------------------------------------
# Ontology
# ---------------------------------------------------------------------------

def load_ontology_file(path: str | Path) -> Ontology:
    """Parse an ontology JSON file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read ontology {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Cannot parse ontology {path}: {exc}") from exc

    try:
        return parse_ontology(data)
    except ConfigurationError as exc:
        raise ConfigurationError(f"{path}: {exc}") from exc


def parse_ontology(data: Any) -> Ontology:
    """Build an Ontology from ``{"categories": [...]}`` or a bare list."""
    records = data.get("categories") if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise ConfigurationError("ontology must contain a 'categories' list")

    categories: list[OntologyCategory] = []
    for record in records:
        if not isinstance(record, dict) or not record.get("id"):
            raise ConfigurationError(f"ontology category without an id: {record!r}")
        examples = record.get("examples") or []
        if not isinstance(examples, list):
            raise ConfigurationError(f"category '{record['id']}': 'examples' must be a list")
        categories.append(
            OntologyCategory(
                id=str(record["id"]),
                label=str(record.get("label") or record["id"]),
                examples=tuple(str(e) for e in examples),
            )
        )
    return Ontology(categories=tuple(categories))
