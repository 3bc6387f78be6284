"""Fault rule table.

Loads the per-code fault rules from YAML once and exposes them as an
immutable lookup. Config source: config/fault_rules.yaml
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

import yaml

from src.common.config import Settings

from .models import FaultRule, PerUnitRule

logger = logging.getLogger(__name__)


class FaultRuleTable:
    """Read-only mapping of fault code to FaultRule.

    Usage:
        table = FaultRuleTable.from_yaml("config/fault_rules.yaml")
        rule = table.get("03")
    """

    def __init__(self, rules: list[FaultRule]) -> None:
        by_code: dict[str, FaultRule] = {}
        for rule in rules:
            if rule.code in by_code:
                raise ValueError(f"Duplicate fault code in rule table: {rule.code}")
            if rule.is_per_order and rule.is_per_unit:
                # Calculator applies per-order then per-unit; per-unit wins.
                logger.warning("Fault %s is both per-order and per-unit", rule.code)
            by_code[rule.code] = rule
        self._rules: Mapping[str, FaultRule] = MappingProxyType(by_code)

    @classmethod
    def from_dicts(cls, entries: list[dict]) -> FaultRuleTable:
        """Build a table from raw dict entries (YAML shape)."""
        rules: list[FaultRule] = []
        for entry in entries:
            try:
                code = str(entry["code"]).zfill(2)
                standard = float(entry["standard_minutes"])
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"Malformed fault rule entry: {entry!r}") from exc
            if standard < 0:
                raise ValueError(f"Fault {code}: standard_minutes must be >= 0")

            per_unit = None
            unit_cfg = entry.get("per_unit")
            if unit_cfg:
                unit_minutes = float(unit_cfg["unit_minutes"])
                if unit_minutes <= 0:
                    raise ValueError(f"Fault {code}: unit_minutes must be > 0")
                default = unit_cfg.get("default_if_unspecified")
                per_unit = PerUnitRule(
                    unit_minutes=unit_minutes,
                    default_if_unspecified=float(default) if default is not None else None,
                    unit_name=unit_cfg.get("unit_name", ""),
                )

            rules.append(FaultRule(
                code=code,
                name=entry.get("name", ""),
                standard_minutes=standard,
                is_per_order=bool(entry.get("per_order", False)),
                per_unit=per_unit,
            ))
        return cls(rules)

    @classmethod
    def from_yaml(cls, path: str | Path) -> FaultRuleTable:
        """Load the rule table from a YAML file with a top-level ``faults`` list."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        table = cls.from_dicts(data.get("faults", []))
        logger.debug("Loaded %d fault rules from %s", len(table), path)
        return table

    def get(self, code: str) -> FaultRule | None:
        return self._rules.get(code)

    def name_for(self, code: str) -> str:
        rule = self._rules.get(code)
        return rule.name if rule else ""

    @property
    def per_order_codes(self) -> list[str]:
        return sorted(c for c, r in self._rules.items() if r.is_per_order)

    @property
    def per_unit_codes(self) -> list[str]:
        return sorted(c for c, r in self._rules.items() if r.is_per_unit)

    @property
    def variable_codes(self) -> list[str]:
        return sorted(c for c, r in self._rules.items() if r.is_variable)

    def __contains__(self, code: object) -> bool:
        return code in self._rules

    def __iter__(self) -> Iterator[FaultRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)


@lru_cache(maxsize=1)
def default_rule_table() -> FaultRuleTable:
    """Process-wide rule table loaded from the configured YAML path."""
    return FaultRuleTable.from_yaml(Settings.load().fault_rules_abs_path)
