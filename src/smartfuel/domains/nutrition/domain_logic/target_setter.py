"""Target setter — turns matched themes into daily numeric targets."""

from __future__ import annotations

from smartfuel.core.rules.models import RulePack
from smartfuel.domains.nutrition.domain_logic.signal_models import TARGET_TEMPLATES


def format_number(value: float) -> str:
    """Render 1500.0 as ``1500`` and 2.5 as ``2.5``."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


class TargetSetter:
    """First matched theme to declare a target key wins; later ones are skipped."""

    def __init__(self, rulepack: RulePack) -> None:
        self.rulepack = rulepack

    def set_targets(self, themes: list[str]) -> list[str]:
        targets: list[str] = []
        seen: set[str] = set()

        for theme_name in themes:
            theme = self.rulepack.get_theme(theme_name)
            if theme is None or not theme.targets:
                continue
            for field_name, (key, template) in TARGET_TEMPLATES.items():
                value = theme.targets.get(field_name)
                if value is None or key in seen:
                    continue
                targets.append(template.format(format_number(value)))
                seen.add(key)

        return targets
