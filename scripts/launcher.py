"""
Shop-event demo — fires four expression rules against a checkout event so you
can watch priority ordering, the probabilistic gate and skip policies at work.

Usage:
    python scripts/launcher.py                    # rules defined in code
    python scripts/launcher.py --file rules/shop.yml
    python scripts/launcher.py --check            # dry run, conditions only
    python scripts/launcher.py --seed 7 --runs 20 # repeat with a fixed seed
"""

from __future__ import annotations

import argparse
import logging

from ruleengine.core.engine import RulesEngine
from ruleengine.core.facts import Facts
from ruleengine.core.gate import make_random_source
from ruleengine.core.listeners import TraceListener
from ruleengine.core.parameters import RulesEngineParameters
from ruleengine.core.rules import Rules
from ruleengine.expression.rule import ExpressionRule
from ruleengine.loader.factory import RuleFactory


def build_rules() -> Rules:
    return Rules(
        ExpressionRule(name="rule1", priority=1, threshold=0.95)
        .when("event.get('RemoveCount') > 2"),
        ExpressionRule(name="rule2", priority=2, threshold=0.5)
        .when("event.get('SkuCount') >= 4 and event.get('TotalPrice') < 10"),
        ExpressionRule(name="rule3", priority=3, threshold=0.2)
        .when("event.get('GoodsCount') <= 2 or event.get('GoodsCount') > 20"),
        ExpressionRule(name="rule4", priority=4)
        .when("event.get('NoScanCount') >= 2"),
    )


def build_facts() -> Facts:
    return Facts({
        "event": {
            "RemoveCount": 12,
            "SkuCount": 30,
            "TotalPrice": 8,
            "GoodsCount": 24,
            "NoScanCount": 41,
        }
    })


def main() -> None:
    parser = argparse.ArgumentParser(description="Fire the shop-event demo rules")
    parser.add_argument("--file", help="Load rule definitions from YAML/JSON instead")
    parser.add_argument("--check", action="store_true", help="Dry run: evaluate conditions only")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the probabilistic gate")
    parser.add_argument("--runs", type=int, default=1)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    rules = RuleFactory().create_rules_from_path(args.file) if args.file else build_rules()
    parameters = RulesEngineParameters(
        skip_on_first_applied_rule=True,
        skip_on_first_non_triggered_rule=True,
    )
    tracer = TraceListener()
    engine = RulesEngine(parameters, rule_listeners=[tracer], random_source=make_random_source(args.seed))

    if args.check:
        for rule, ok in engine.check(rules, build_facts()).items():
            print(f"  {rule.name:<8} priority={rule.priority:<3} condition={ok}")
        return

    for run in range(1, args.runs + 1):
        tracer.reset()
        facts = build_facts()
        result = engine.fire(rules, facts)
        applied = [t.rule for t in tracer.traces if t.succeeded]
        print(f"run {run:>3}: result={result}  applied={applied or '-'}")
        for t in tracer.traces:
            print(
                f"         {t.rule:<8} condition={t.evaluation_result} "
                f"gate={t.probabilistic_result} executed={t.executed}"
            )


if __name__ == "__main__":
    main()
