"""Static platform rule table.

Rules are loaded from config/platform_rules.yaml. Platforms missing
from the table fall back to DEFAULT_RULE.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import yaml

from ..common.config import Settings
from ..common.models import PlatformRule

logger = logging.getLogger(__name__)

DEFAULT_RULE = PlatformRule(
    platform="*",
    shipping_cost=12.0,
    free_shipping_threshold=99.0,
)


class PlatformRuleTable:
    """PlatformRuleSource backed by a static configuration table.

    Usage:
        rules = PlatformRuleTable.from_yaml("config/platform_rules.yaml")
        rule = rules.fetch_platform_rules("Hema")
    """

    def __init__(
        self,
        rules: Iterable[PlatformRule] = (),
        default: PlatformRule | None = None,
    ) -> None:
        self._rules = {rule.platform: rule for rule in rules}
        self._default = default or DEFAULT_RULE

    @classmethod
    def from_yaml(cls, path: str | Path) -> PlatformRuleTable:
        """Load rules from YAML: a `platforms` list and an optional `default`."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        rules = [PlatformRule(**entry) for entry in data.get("platforms", [])]
        default = None
        if default_data := data.get("default"):
            default = PlatformRule(**{**default_data, "platform": "*"})

        logger.info("Loaded %d platform rules from %s", len(rules), path)
        return cls(rules, default)

    @classmethod
    def from_settings(cls, settings: Settings) -> PlatformRuleTable:
        path = settings.platform_rules_abs_path
        if not path.exists():
            logger.warning("Platform rules file not found: %s, using defaults", path)
            return cls()
        return cls.from_yaml(path)

    @property
    def platforms(self) -> list[str]:
        return sorted(self._rules)

    def fetch_platform_rules(self, platform: str) -> PlatformRule:
        rule = self._rules.get(platform)
        if rule is None:
            return self._default.model_copy(update={"platform": platform})
        return rule
