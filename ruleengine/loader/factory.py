"""
Rule Factory — turns rule definitions into expression rules registered in a Rules set.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

from ..core.rules import Rules
from ..expression.rule import ExpressionRule
from .definitions import RuleDefinition, RuleDefinitionError, read_definitions


class RuleFactory:
    def __init__(self, functions: Optional[Dict[str, Callable[..., Any]]] = None):
        self._functions = functions

    def create_rule(self, definition: RuleDefinition) -> ExpressionRule:
        if definition.composite_rule_type:
            raise RuleDefinitionError(
                f"Rule '{definition.name}': composite rules "
                f"({definition.composite_rule_type}) are not supported"
            )
        rule = ExpressionRule(
            name=definition.name,
            description=definition.description,
            priority=definition.priority,
            threshold=definition.threshold,
            functions=self._functions,
        ).when(definition.condition)
        for action in definition.actions:
            rule.then(action)
        return rule

    def create_rules(self, definitions: Iterable[RuleDefinition]) -> Rules:
        rules = Rules()
        for definition in definitions:
            rules.register(self.create_rule(definition))
        return rules

    def create_rules_from_path(self, path: Union[str, Path]) -> Rules:
        return self.create_rules(read_definitions(path))
