"""
Tests for configuration loading (ruleengine/config.py) and engine parameters.
"""

from __future__ import annotations

import json
import os
import sys

import pytest

from ruleengine.config import Config
from ruleengine.core.parameters import RulesEngineParameters


@pytest.fixture()
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("RULES_"):
            monkeypatch.delenv(key)
    return monkeypatch


class TestConfigLoad:
    def test_defaults(self, clean_env, tmp_path):
        cfg = Config.load(tmp_path / "missing.json")
        assert cfg.priority_threshold == sys.maxsize
        assert cfg.skip_on_first_applied_rule is False
        assert cfg.rules_file is None
        assert cfg.random_seed is None

    def test_config_file_overrides(self, clean_env, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"priority_threshold": 10, "skip_on_first_failed_rule": True, "bogus": 1}))
        cfg = Config.load(path)
        assert cfg.priority_threshold == 10
        assert cfg.skip_on_first_failed_rule is True
        assert not hasattr(cfg, "bogus")

    def test_env_overrides(self, clean_env, tmp_path):
        clean_env.setenv("RULES_PRIORITY_THRESHOLD", "5")
        clean_env.setenv("RULES_SKIP_ON_FIRST_APPLIED_RULE", "yes")
        clean_env.setenv("RULES_SKIP_ON_FIRST_FAILED_RULE", "0")
        clean_env.setenv("RULES_RANDOM_SEED", "42")
        clean_env.setenv("RULES_RULES_FILE", "rules/shop.yml")
        cfg = Config.load(tmp_path / "missing.json")
        assert cfg.priority_threshold == 5
        assert cfg.skip_on_first_applied_rule is True
        assert cfg.skip_on_first_failed_rule is False
        assert cfg.random_seed == 42
        assert cfg.rules_file == "rules/shop.yml"

    def test_env_beats_file(self, clean_env, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"api_port": 9000}))
        clean_env.setenv("RULES_API_PORT", "9100")
        assert Config.load(path).api_port == 9100


class TestRulesEngineParameters:
    def test_defaults(self):
        p = RulesEngineParameters()
        assert p.priority_threshold == sys.maxsize
        assert not (p.skip_on_first_applied_rule or p.skip_on_first_non_triggered_rule
                    or p.skip_on_first_failed_rule)

    def test_from_config(self):
        cfg = Config(priority_threshold=3, skip_on_first_non_triggered_rule=True)
        p = RulesEngineParameters.from_config(cfg)
        assert p.priority_threshold == 3
        assert p.skip_on_first_non_triggered_rule is True

    def test_with_overrides_ignores_none(self):
        p = RulesEngineParameters(priority_threshold=3)
        q = p.with_overrides({"priority_threshold": None, "skip_on_first_applied_rule": True})
        assert q.priority_threshold == 3
        assert q.skip_on_first_applied_rule is True
        assert p.skip_on_first_applied_rule is False

    def test_immutable(self):
        with pytest.raises(Exception):
            RulesEngineParameters().priority_threshold = 1
