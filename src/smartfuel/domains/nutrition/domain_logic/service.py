"""SmartFuel service — owns the active reasoner and supports hot reload."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from smartfuel.core.rules.loader import load_config
from smartfuel.core.rules.models import SmartFuelConfig
from smartfuel.domains.nutrition.domain_logic.reasoner import SmartFuelReasoner
from smartfuel.domains.nutrition.domain_logic.signal_models import (
    BiomarkerReading,
    NutritionProfile,
    SmartFuelGuidance,
)

logger = logging.getLogger(__name__)


class SmartFuelService:
    """Holds a single reference to the active reasoner.

    ``reload()`` builds the replacement completely before swapping the
    reference, so each request sees exactly one configuration snapshot.
    """

    def __init__(
        self,
        rulepack_path: str | Path,
        ontology_path: str | Path,
        config: SmartFuelConfig | None = None,
    ) -> None:
        self.rulepack_path = Path(rulepack_path)
        self.ontology_path = Path(ontology_path)
        if config is None:
            config = load_config(self.rulepack_path, self.ontology_path)
        self._reasoner = SmartFuelReasoner(config)

    @property
    def reasoner(self) -> SmartFuelReasoner:
        return self._reasoner

    @property
    def config(self) -> SmartFuelConfig:
        return self._reasoner.config

    def generate_guidance(
        self,
        biomarkers: Iterable[BiomarkerReading],
        nutrition_profile: NutritionProfile | None = None,
        goals: Sequence[str] | None = None,
    ) -> SmartFuelGuidance:
        reasoner = self._reasoner
        return reasoner.generate_guidance(biomarkers, nutrition_profile, goals)

    def reload(self) -> SmartFuelConfig:
        """Reload rule files from disk.

        Raises ConfigurationError and keeps the current snapshot on failure.
        """
        config = load_config(self.rulepack_path, self.ontology_path)
        self._reasoner = SmartFuelReasoner(config)
        logger.info("SmartFuel rules reloaded from %s", self.rulepack_path)
        return config
