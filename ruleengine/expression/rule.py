"""
Expression-backed conditions, actions and rules.

    rule = (
        ExpressionRule(name="rule1", priority=1, threshold=0.95)
        .when("event['RemoveCount'] > 2")
        .then("event['flagged'] = True")
    )
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from ..core.facts import Facts
from ..core.rules import DEFAULT_DESCRIPTION, DEFAULT_NAME, DEFAULT_PRIORITY, DEFAULT_THRESHOLD, DefaultRule
from .evaluator import compile_action, compile_condition, evaluate, execute

logger = logging.getLogger(__name__)


class ExpressionCondition:
    def __init__(self, expression: str, functions: Optional[Dict[str, Callable[..., Any]]] = None):
        self.expression = expression
        self._functions = functions
        self._program = compile_condition(expression, functions)

    def evaluate(self, facts: Facts) -> bool:
        try:
            return bool(evaluate(self._program, facts, self._functions))
        except Exception:
            logger.error("Unable to evaluate expression: '%s' on facts: %s", self.expression, facts)
            raise

    def __repr__(self) -> str:
        return f"ExpressionCondition({self.expression!r})"


class ExpressionAction:
    def __init__(self, expression: str, functions: Optional[Dict[str, Callable[..., Any]]] = None):
        self.expression = expression
        self._functions = functions
        self._program = compile_action(expression, functions)

    def execute(self, facts: Facts) -> None:
        try:
            execute(self._program, facts, self._functions)
        except Exception:
            logger.error("Unable to execute expression: '%s' on facts: %s", self.expression, facts)
            raise

    def __repr__(self) -> str:
        return f"ExpressionAction({self.expression!r})"


class ExpressionRule(DefaultRule):
    """DefaultRule built fluently from Python expressions; never matches until ``when`` is called."""

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        description: str = DEFAULT_DESCRIPTION,
        priority: int = DEFAULT_PRIORITY,
        threshold: float = DEFAULT_THRESHOLD,
        functions: Optional[Dict[str, Callable[..., Any]]] = None,
    ):
        super().__init__(name, description, priority, threshold)
        self._functions = functions

    def when(self, expression: str) -> "ExpressionRule":
        self.condition = ExpressionCondition(expression, self._functions)
        return self

    def then(self, expression: str) -> "ExpressionRule":
        self.actions.append(ExpressionAction(expression, self._functions))
        return self

    @property
    def expression(self) -> Optional[str]:
        return getattr(self.condition, "expression", None)
