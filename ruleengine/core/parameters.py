"""
Engine parameters — the policy switches read by every run.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from ..config import Config


@dataclass(frozen=True)
class RulesEngineParameters:
    priority_threshold: int = sys.maxsize      # inclusive upper bound on priority
    skip_on_first_applied_rule: bool = False
    skip_on_first_non_triggered_rule: bool = False
    skip_on_first_failed_rule: bool = False

    @classmethod
    def from_config(cls, cfg: Config) -> "RulesEngineParameters":
        return cls(
            priority_threshold=int(cfg.priority_threshold),
            skip_on_first_applied_rule=bool(cfg.skip_on_first_applied_rule),
            skip_on_first_non_triggered_rule=bool(cfg.skip_on_first_non_triggered_rule),
            skip_on_first_failed_rule=bool(cfg.skip_on_first_failed_rule),
        )

    def with_overrides(self, overrides: Optional[Dict[str, Any]] = None) -> "RulesEngineParameters":
        """Copy with the non-None values from *overrides* applied."""
        patch = {k: v for k, v in (overrides or {}).items() if v is not None}
        return replace(self, **patch)
