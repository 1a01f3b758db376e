"""
Rules — declarative decision units and the ordered rule set the engine fires.

A rule pairs a condition with an ordered list of actions. Rules are
identified by (name, priority) and iterate in ascending priority order,
ties broken by name, so repeated runs see the same sequence.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple, runtime_checkable

from .facts import Facts

logger = logging.getLogger(__name__)

DEFAULT_NAME = "rule"
DEFAULT_DESCRIPTION = "description"
DEFAULT_PRIORITY = sys.maxsize - 1
MAX_THRESHOLD = 1.0
DEFAULT_THRESHOLD = MAX_THRESHOLD


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------

@runtime_checkable
class Condition(Protocol):
    def evaluate(self, facts: Facts) -> bool: ...


@runtime_checkable
class Action(Protocol):
    def execute(self, facts: Facts) -> None: ...


class FunctionCondition:
    """Adapts a plain ``fn(facts) -> bool`` to the Condition capability."""

    def __init__(self, fn: Callable[[Facts], bool]):
        self._fn = fn

    def evaluate(self, facts: Facts) -> bool:
        return bool(self._fn(facts))


class FunctionAction:
    """Adapts a plain ``fn(facts)`` to the Action capability."""

    def __init__(self, fn: Callable[[Facts], None]):
        self._fn = fn

    def execute(self, facts: Facts) -> None:
        self._fn(facts)


always_true = FunctionCondition(lambda facts: True)
always_false = FunctionCondition(lambda facts: False)


def as_condition(candidate) -> Condition:
    if isinstance(candidate, Condition):
        return candidate
    if callable(candidate):
        return FunctionCondition(candidate)
    raise TypeError(f"not a condition: {candidate!r}")


def as_action(candidate) -> Action:
    if isinstance(candidate, Action):
        return candidate
    if callable(candidate):
        return FunctionAction(candidate)
    raise TypeError(f"not an action: {candidate!r}")


# ---------------------------------------------------------------------------
# Rule
# ---------------------------------------------------------------------------

class Rule:
    """
    Base rule: never matches and does nothing. Subclasses override
    ``evaluate`` and ``execute``.

    threshold is the probability, in [0, MAX_THRESHOLD], that a matching
    rule actually executes; it is clamped by the engine when used.
    """

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        description: str = DEFAULT_DESCRIPTION,
        priority: int = DEFAULT_PRIORITY,
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self.name = name
        self.description = description
        self.priority = priority
        self.threshold = threshold

    def evaluate(self, facts: Facts) -> bool:
        return False

    def execute(self, facts: Facts) -> None:
        pass

    @property
    def key(self) -> Tuple[int, str]:
        """Sort key: priority first, name breaks ties."""
        return (self.priority, self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self.name == other.name and self.priority == other.priority

    def __hash__(self) -> int:
        return hash((self.name, self.priority))

    def __lt__(self, other: "Rule") -> bool:
        return self.key < other.key

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, priority={self.priority}, "
            f"threshold={self.threshold})"
        )


class DefaultRule(Rule):
    """Rule built from a condition and an ordered list of actions."""

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        description: str = DEFAULT_DESCRIPTION,
        priority: int = DEFAULT_PRIORITY,
        threshold: float = DEFAULT_THRESHOLD,
        condition=always_false,
        actions: Optional[Iterable] = None,
    ):
        super().__init__(name, description, priority, threshold)
        self.condition: Condition = as_condition(condition)
        self.actions: List[Action] = [as_action(a) for a in (actions or [])]

    def evaluate(self, facts: Facts) -> bool:
        return bool(self.condition.evaluate(facts))

    def execute(self, facts: Facts) -> None:
        # first failing action stops the rest
        for action in self.actions:
            action.execute(facts)


# ---------------------------------------------------------------------------
# Rule set
# ---------------------------------------------------------------------------

class Rules:
    """
    Duplicate-free rule set iterated in ascending (priority, name) order.

    Registering a rule whose (name, priority) identity is already present
    replaces the existing entry.
    """

    def __init__(self, *rules: Rule):
        self._rules: Dict[Tuple[int, str], Rule] = {}
        self.register(*rules)

    def register(self, *rules: Rule) -> None:
        for rule in rules:
            if rule.key in self._rules:
                logger.warning(
                    "Rule '%s' (priority=%d) already registered, replacing it",
                    rule.name, rule.priority,
                )
            self._rules[rule.key] = rule

    def unregister(self, *rules: Rule) -> None:
        for rule in rules:
            self._rules.pop(rule.key, None)

    def unregister_by_name(self, name: str) -> bool:
        """Remove every rule with this name; True if anything was removed."""
        keys = [k for k, r in self._rules.items() if r.name == name]
        for k in keys:
            del self._rules[k]
        return bool(keys)

    def get(self, name: str) -> Optional[Rule]:
        for rule in self:
            if rule.name == name:
                return rule
        return None

    def clear(self) -> None:
        self._rules.clear()

    def is_empty(self) -> bool:
        return not self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter([self._rules[k] for k in sorted(self._rules)])

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule: object) -> bool:
        return isinstance(rule, Rule) and rule.key in self._rules

    def __repr__(self) -> str:
        return f"Rules({[r.name for r in self]!r})"
