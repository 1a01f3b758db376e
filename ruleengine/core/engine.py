"""
Rules Engine — fires an ordered rule set against a fact store.

fire():  evaluate each rule in priority order, pass matching rules through
         the probabilistic gate and execute their actions, honouring the
         engine parameters and notifying listeners at every step.
check(): dry run; evaluates conditions only and reports the results.

Known surprising behaviours, kept for compatibility with existing callers:

* ``fire`` returns True only when the rule set is empty or when
  ``skip_on_first_applied_rule`` stops the run after a successful rule.
  A complete pass returns False even if rules were applied.
* With ``skip_on_first_non_triggered_rule`` set, a condition that raises
  logs that the next rules will be skipped, yet the loop moves on to the
  next rule (no after_evaluate hook for the failing rule). Whether the
  run should stop instead is an open product question.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Tuple

from .facts import Facts
from .gate import RandomSource, make_random_source, passes_threshold
from .listeners import RuleListener, RulesEngineListener, all_allow, notify_all
from .parameters import RulesEngineParameters
from .rules import MAX_THRESHOLD, Rule, Rules

logger = logging.getLogger(__name__)


class RulesEngine:
    """
    Usage:
        engine = RulesEngine(RulesEngineParameters(skip_on_first_applied_rule=True))
        engine.register_rule_listener(TraceListener())
        engine.fire(rules, facts)
    """

    def __init__(
        self,
        parameters: Optional[RulesEngineParameters] = None,
        rule_listeners: Iterable[RuleListener] = (),
        engine_listeners: Iterable[RulesEngineListener] = (),
        random_source: Optional[RandomSource] = None,
    ):
        self._parameters = parameters or RulesEngineParameters()
        self._rule_listeners: list[RuleListener] = list(rule_listeners)
        self._engine_listeners: list[RulesEngineListener] = list(engine_listeners)
        self._random = random_source if random_source is not None else make_random_source()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def parameters(self) -> RulesEngineParameters:
        return self._parameters

    @property
    def rule_listeners(self) -> Tuple[RuleListener, ...]:
        return tuple(self._rule_listeners)

    @property
    def engine_listeners(self) -> Tuple[RulesEngineListener, ...]:
        return tuple(self._engine_listeners)

    def register_rule_listener(self, listener: RuleListener) -> None:
        self._rule_listeners.append(listener)

    def register_rule_listeners(self, listeners: Iterable[RuleListener]) -> None:
        self._rule_listeners.extend(listeners)

    def register_engine_listener(self, listener: RulesEngineListener) -> None:
        self._engine_listeners.append(listener)

    def register_engine_listeners(self, listeners: Iterable[RulesEngineListener]) -> None:
        self._engine_listeners.extend(listeners)

    # ------------------------------------------------------------------
    # Fire
    # ------------------------------------------------------------------

    def fire(self, rules: Rules, facts: Facts) -> bool:
        notify_all(self._engine_listeners, "before_evaluate", rules, facts)
        result = self._do_fire(rules, facts)
        notify_all(self._engine_listeners, "after_execute", rules, facts)
        logger.debug("Fire result: %s", result)
        return result

    def _do_fire(self, rules: Rules, facts: Facts) -> bool:
        if rules.is_empty():
            logger.warning("No rules registered! Nothing to apply")
            return True

        params = self._parameters
        self._log_run(rules, facts)

        for rule in rules:
            name = rule.name
            if rule.priority > params.priority_threshold:
                logger.warning(
                    "Rule priority (%d) exceeded at rule '%s' with priority=%d, next rules will be skipped",
                    params.priority_threshold, name, rule.priority,
                )
                break

            if not all_allow(self._rule_listeners, "before_evaluate", rule, facts):
                logger.debug("Rule '%s' has been skipped before being evaluated", name)
                continue

            evaluation_result = False
            try:
                evaluation_result = bool(rule.evaluate(facts))
            except Exception as exc:
                logger.error("Rule '%s' evaluated with error", name, exc_info=exc)
                notify_all(self._rule_listeners, "on_evaluation_error", rule, facts, exc)
                if params.skip_on_first_non_triggered_rule:
                    logger.warning(
                        "Next rules will be skipped since parameter skip_on_first_non_triggered_rule is set"
                    )
                    continue

            probabilistic_result = False
            if evaluation_result:
                probabilistic_result = passes_threshold(rule.threshold, MAX_THRESHOLD, self._random)
                logger.info(
                    "Rule '%s' has been evaluated to %s, probabilistic result is %s (threshold=%s)",
                    name, evaluation_result, probabilistic_result, rule.threshold,
                )
            notify_all(
                self._rule_listeners, "after_evaluate",
                rule, facts, evaluation_result, probabilistic_result,
            )

            if not (evaluation_result and probabilistic_result):
                logger.info("Rule '%s' has been evaluated to false, actions will not be executed", name)
                continue

            notify_all(self._rule_listeners, "before_execute", rule, facts)
            try:
                rule.execute(facts)
            except Exception as exc:
                logger.error("Rule '%s' performed action with error", name, exc_info=exc)
                notify_all(self._rule_listeners, "on_failure", rule, facts, exc)
                if params.skip_on_first_failed_rule:
                    logger.debug(
                        "Next rules will be skipped since parameter skip_on_first_failed_rule is set"
                    )
                continue

            logger.debug("Rule '%s' performed action successfully", name)
            notify_all(self._rule_listeners, "on_success", rule, facts)
            if params.skip_on_first_applied_rule:
                logger.debug(
                    "Next rules will be skipped since parameter skip_on_first_applied_rule is set"
                )
                return True

        return False

    def _log_run(self, rules: Rules, facts: Facts) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug("%s", self._parameters)
        logger.debug("Registered rules:")
        for rule in rules:
            logger.debug(
                "Rule { name = '%s', description = '%s', priority = '%s', threshold = '%s'}",
                rule.name, rule.description, rule.priority, rule.threshold,
            )
        logger.debug("Known facts:")
        for fact in facts:
            logger.debug("%s", fact)
        logger.debug("Rules evaluation started")

    # ------------------------------------------------------------------
    # Check
    # ------------------------------------------------------------------

    def check(self, rules: Rules, facts: Facts) -> Dict[Rule, bool]:
        """
        Evaluate conditions without executing actions. Rules vetoed by a
        listener are left out of the result; condition errors propagate.
        """
        notify_all(self._engine_listeners, "before_evaluate", rules, facts)
        result = self._do_check(rules, facts)
        notify_all(self._engine_listeners, "after_execute", rules, facts)
        logger.debug("Check result: %s", result)
        return result

    def _do_check(self, rules: Rules, facts: Facts) -> Dict[Rule, bool]:
        logger.debug("Checking rules")
        result: Dict[Rule, bool] = {}
        for rule in rules:
            if all_allow(self._rule_listeners, "before_evaluate", rule, facts):
                result[rule] = bool(rule.evaluate(facts))
        return result
