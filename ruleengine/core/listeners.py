"""
Listeners — observers (and, for rule evaluation, gates) attached to a run.

Two dispatch primitives are kept apart on purpose: ``all_allow`` stops at
the first listener that vetoes, ``notify_all`` always reaches every
listener and ignores return values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from .facts import Facts
from .rules import Rule, Rules


class RuleListener:
    """Per-rule hooks. Override only what you need."""

    def before_evaluate(self, rule: Rule, facts: Facts) -> bool:
        """Return False to skip the rule entirely."""
        return True

    def after_evaluate(
        self,
        rule: Rule,
        facts: Facts,
        evaluation_result: bool,
        probabilistic_result: bool,
    ) -> None:
        pass

    def on_evaluation_error(self, rule: Rule, facts: Facts, error: Exception) -> None:
        pass

    def before_execute(self, rule: Rule, facts: Facts) -> None:
        pass

    def on_success(self, rule: Rule, facts: Facts) -> None:
        pass

    def on_failure(self, rule: Rule, facts: Facts, error: Exception) -> None:
        pass


class RulesEngineListener:
    """Run-level hooks, called once before and once after each run."""

    def before_evaluate(self, rules: Rules, facts: Facts) -> None:
        pass

    def after_execute(self, rules: Rules, facts: Facts) -> None:
        pass


def all_allow(listeners: Sequence[Any], hook: str, *args) -> bool:
    """True unless some listener's *hook* returns falsy; stops at the first veto."""
    for listener in listeners:
        if not getattr(listener, hook)(*args):
            return False
    return True


def notify_all(listeners: Sequence[Any], hook: str, *args) -> None:
    for listener in listeners:
        getattr(listener, hook)(*args)


# ---------------------------------------------------------------------------
# Trace listener: what happened to each rule during a run
# ---------------------------------------------------------------------------

@dataclass
class RuleTrace:
    rule: str
    priority: int
    evaluated: bool = False
    evaluation_result: Optional[bool] = None
    probabilistic_result: Optional[bool] = None
    executed: bool = False
    succeeded: Optional[bool] = None
    error: Optional[str] = None


@dataclass
class TraceListener(RuleListener):
    """Collects one RuleTrace per evaluated rule, in evaluation order."""

    traces: List[RuleTrace] = field(default_factory=list)

    def _current(self, rule: Rule) -> RuleTrace:
        last = self.traces[-1] if self.traces else None
        if last is None or (last.rule, last.priority) != (rule.name, rule.priority):
            self.traces.append(RuleTrace(rule=rule.name, priority=rule.priority))
        return self.traces[-1]

    def after_evaluate(self, rule, facts, evaluation_result, probabilistic_result):
        t = self._current(rule)
        t.evaluated = True
        t.evaluation_result = evaluation_result
        t.probabilistic_result = probabilistic_result

    def on_evaluation_error(self, rule, facts, error):
        t = self._current(rule)
        t.error = f"{type(error).__name__}: {error}"

    def before_execute(self, rule, facts):
        self._current(rule).executed = True

    def on_success(self, rule, facts):
        self._current(rule).succeeded = True

    def on_failure(self, rule, facts, error):
        t = self._current(rule)
        t.succeeded = False
        t.error = f"{type(error).__name__}: {error}"

    def reset(self) -> None:
        self.traces.clear()
