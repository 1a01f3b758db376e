"""
Shared pytest fixtures and helpers.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from ruleengine.api.app import create_app
from ruleengine.core.listeners import RuleListener, RulesEngineListener

SHOP_RULES = Path(__file__).parent.parent / "rules" / "shop.yml"


class FixedRandom:
    """Random source that always draws the same value."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def uniform(self, low: float, high: float) -> float:
        self.calls += 1
        return self.value


class RecordingRuleListener(RuleListener):
    """Appends (hook, rule name, ...) tuples to a shared log."""

    def __init__(self, log: list, tag: str = "L", allow: bool = True):
        self.log = log
        self.tag = tag
        self.allow = allow

    def before_evaluate(self, rule, facts):
        self.log.append((self.tag, "before_evaluate", rule.name))
        return self.allow

    def after_evaluate(self, rule, facts, evaluation_result, probabilistic_result):
        self.log.append((self.tag, "after_evaluate", rule.name, evaluation_result, probabilistic_result))

    def on_evaluation_error(self, rule, facts, error):
        self.log.append((self.tag, "on_evaluation_error", rule.name, str(error)))

    def before_execute(self, rule, facts):
        self.log.append((self.tag, "before_execute", rule.name))

    def on_success(self, rule, facts):
        self.log.append((self.tag, "on_success", rule.name))

    def on_failure(self, rule, facts, error):
        self.log.append((self.tag, "on_failure", rule.name, str(error)))


class RecordingEngineListener(RulesEngineListener):
    def __init__(self, log: list):
        self.log = log

    def before_evaluate(self, rules, facts):
        self.log.append(("run", "before_evaluate"))

    def after_execute(self, rules, facts):
        self.log.append(("run", "after_execute"))


@pytest.fixture()
def always():
    """Random source for which every non-zero threshold passes."""
    return FixedRandom(0.0)


@pytest.fixture()
def app():
    """Create a fresh app instance preloaded with the shop rules."""
    return create_app(rules_file=str(SHOP_RULES))


@pytest_asyncio.fixture()
async def client(app):
    """Async HTTP client wired directly to the ASGI app (no server needed)."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
