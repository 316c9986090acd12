"""Data models for the SmartFuel rule pack and food ontology."""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class ComparisonOperator(str, Enum):
    """Comparison operators allowed in trigger expressions."""

    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    EQ = "=="

    def compare(self, value: float, threshold: float) -> bool:
        return _OPERATOR_FUNCS[self](value, threshold)


_OPERATOR_FUNCS = {
    ComparisonOperator.GT: operator.gt,
    ComparisonOperator.GE: operator.ge,
    ComparisonOperator.LT: operator.lt,
    ComparisonOperator.LE: operator.le,
    ComparisonOperator.EQ: operator.eq,
}


@dataclass(frozen=True)
class Trigger:
    """A parsed trigger expression such as ``bp_systolic > 130``."""

    signal: str
    operator: ComparisonOperator
    threshold: float
    source: str = ""

    def evaluate(self, signals: Mapping[str, float]) -> bool:
        """Absent signals never satisfy a trigger."""
        value = signals.get(self.signal)
        if value is None:
            return False
        return self.operator.compare(value, self.threshold)


@dataclass(frozen=True)
class ThemeItem:
    """An avoid/include entry pointing at an ontology category."""

    category: str
    reason: str = ""
    evidence_tier: str = ""


@dataclass(frozen=True)
class Theme:
    """A named rule bundle: triggers plus the guidance it contributes."""

    name: str
    triggers: tuple[Trigger, ...] = ()
    invalid_triggers: tuple[str, ...] = ()
    avoid: tuple[ThemeItem, ...] = ()
    include: tuple[ThemeItem, ...] = ()
    targets: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    tips: tuple[str, ...] = ()

    def matches(self, signals: Mapping[str, float]) -> bool:
        """A theme matches when any of its triggers is true."""
        return any(trigger.evaluate(signals) for trigger in self.triggers)


@dataclass(frozen=True)
class DietPreference:
    """Per-diet exclusions applied to include recommendations."""

    name: str
    exclude_categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class RulePack:
    """All themes (in declaration order) and diet preferences."""

    themes: tuple[Theme, ...]
    diet_preferences: Mapping[str, DietPreference] = field(
        default_factory=lambda: MappingProxyType({})
    )
    version: str = ""

    def get_theme(self, name: str) -> Theme | None:
        for theme in self.themes:
            if theme.name == name:
                return theme
        return None

    def get_diet(self, diet_type: str | None) -> DietPreference | None:
        if not diet_type:
            return None
        return self.diet_preferences.get(diet_type)


@dataclass(frozen=True)
class OntologyCategory:
    """A food category with ordered display examples."""

    id: str
    label: str
    examples: tuple[str, ...] = ()


@dataclass(frozen=True)
class Ontology:
    """Food category lookup table."""

    categories: tuple[OntologyCategory, ...]
    _by_id: Mapping[str, OntologyCategory] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_id: dict[str, OntologyCategory] = {}
        for category in self.categories:
            # First definition wins; duplicates are reported by the validator.
            by_id.setdefault(category.id, category)
        object.__setattr__(self, "_by_id", MappingProxyType(by_id))

    def get(self, category_id: str) -> OntologyCategory | None:
        return self._by_id.get(category_id)


@dataclass(frozen=True)
class SmartFuelConfig:
    """Immutable configuration snapshot handed to the reasoner."""

    rulepack: RulePack
    ontology: Ontology
