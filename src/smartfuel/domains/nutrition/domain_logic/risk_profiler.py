"""Risk profiler — matches rule pack themes against a signal map."""

from __future__ import annotations

from typing import Mapping

from smartfuel.core.rules.models import RulePack


class RiskProfiler:
    """Evaluates each theme's pre-parsed triggers (logical OR).

    Malformed triggers were rejected when the rule pack was loaded, so
    evaluation here cannot fail.
    """

    def __init__(self, rulepack: RulePack) -> None:
        self.rulepack = rulepack

    def identify_themes(self, signals: Mapping[str, float]) -> list[str]:
        """Matched theme names in rule pack declaration order."""
        return [theme.name for theme in self.rulepack.themes if theme.matches(signals)]
