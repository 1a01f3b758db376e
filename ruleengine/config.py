"""
Central configuration for the rules engine and its local API.
All values can be overridden via environment variables or a local config.json.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_ROOT = Path(__file__).parent.parent
_CONFIG_FILE = _ROOT / "config.json"

_TRUTHY = {"1", "true", "yes", "on"}


def _coerce(current, raw: str):
    """Convert an env string to the type of the current value."""
    if isinstance(current, bool):
        return raw.strip().lower() in _TRUTHY
    if current is None:
        # optional fields: keep ints as ints, everything else as text
        return int(raw) if raw.strip().lstrip("-").isdigit() else raw
    return type(current)(raw)


@dataclass
class Config:
    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8765

    # Logging
    log_level: str = "INFO"

    # Rule definitions loaded at API startup (YAML or JSON)
    rules_file: Optional[str] = None

    # Engine parameters
    priority_threshold: int = sys.maxsize
    skip_on_first_applied_rule: bool = False
    skip_on_first_non_triggered_rule: bool = False
    skip_on_first_failed_rule: bool = False

    # Probabilistic gate
    random_seed: Optional[int] = None   # None → fresh entropy each engine

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "Config":
        cfg = cls()
        path = config_file or _CONFIG_FILE
        if path.exists():
            overrides = json.loads(path.read_text())
            for k, v in overrides.items():
                if hasattr(cfg, k):
                    setattr(cfg, k, v)
        # environment variable overrides (RULES_*)
        for k in cfg.__dataclass_fields__:  # type: ignore[attr-defined]
            env_key = f"RULES_{k.upper()}"
            if env_key in os.environ:
                setattr(cfg, k, _coerce(getattr(cfg, k), os.environ[env_key]))
        return cfg


# Module-level singleton
config = Config.load()
