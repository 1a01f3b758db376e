"""Tests for rule definition readers and the rule factory."""

import io
import json

import pytest

from conftest import SHOP_RULES
from ruleengine.core.facts import Facts
from ruleengine.core.rules import DEFAULT_PRIORITY
from ruleengine.expression.evaluator import UnsafeExpressionError
from ruleengine.loader.definitions import (
    RuleDefinition,
    RuleDefinitionError,
    read_definitions,
    read_json,
    read_yaml,
)
from ruleengine.loader.factory import RuleFactory

MULTI_DOC = """
name: adult
priority: 1
condition: "person['age'] >= 18"
actions:
  - "person['adult'] = True"
---
name: senior
priority: 2
threshold: 0.3
condition: "person['age'] >= 65"
"""


class TestReaders:
    def test_yaml_multi_document(self):
        defs = read_yaml(MULTI_DOC)
        assert [d.name for d in defs] == ["adult", "senior"]
        assert defs[0].actions == ["person['adult'] = True"]
        assert defs[1].threshold == 0.3
        assert defs[1].actions == []

    def test_yaml_list_document(self):
        defs = read_yaml("- {name: a, condition: 'True'}\n- {name: b, condition: 'False'}\n")
        assert [d.name for d in defs] == ["a", "b"]

    def test_yaml_stream(self):
        assert len(read_yaml(io.StringIO(MULTI_DOC))) == 2

    def test_defaults_applied(self):
        d = read_yaml("condition: 'True'")[0]
        assert d.name == "rule"
        assert d.priority == DEFAULT_PRIORITY
        assert d.threshold == 1.0

    def test_json_list_and_object(self):
        payload = [{"name": "a", "priority": 3, "condition": "x > 1"}]
        assert read_json(json.dumps(payload))[0].priority == 3
        assert read_json(json.dumps(payload[0]))[0].name == "a"

    def test_missing_condition_rejected(self):
        with pytest.raises(RuleDefinitionError):
            read_yaml("name: nope\n")

    def test_non_mapping_rejected(self):
        with pytest.raises(RuleDefinitionError):
            read_yaml("- just a string\n")

    def test_bad_yaml_rejected(self):
        with pytest.raises(RuleDefinitionError):
            read_yaml("name: [unclosed\n")

    def test_bad_json_rejected(self):
        with pytest.raises(RuleDefinitionError):
            read_json("{not json")

    def test_read_definitions_by_suffix(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([{"name": "a", "condition": "True"}]))
        assert read_definitions(path)[0].name == "a"
        assert len(read_definitions(SHOP_RULES)) == 4

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "rules.txt"
        path.write_text("")
        with pytest.raises(RuleDefinitionError):
            read_definitions(path)


class TestRuleFactory:
    def test_create_rules_ordered(self):
        rules = RuleFactory().create_rules(read_yaml(MULTI_DOC))
        assert [r.name for r in rules] == ["adult", "senior"]

    def test_created_rule_behaves(self):
        rule = RuleFactory().create_rule(read_yaml(MULTI_DOC)[0])
        facts = Facts({"person": {"age": 30}})
        assert rule.evaluate(facts) is True
        rule.execute(facts)
        assert facts.get("person")["adult"] is True

    def test_custom_functions_available(self):
        factory = RuleFactory(functions={"double": lambda x: x * 2})
        rule = factory.create_rule(RuleDefinition(condition="double(x) == 4"))
        assert rule.evaluate(Facts({"x": 2})) is True

    def test_composite_rejected(self):
        with pytest.raises(RuleDefinitionError):
            RuleFactory().create_rule(RuleDefinition(condition="True", composite_rule_type="UnitRuleGroup"))

    def test_unsafe_expression_rejected(self):
        with pytest.raises(UnsafeExpressionError):
            RuleFactory().create_rule(RuleDefinition(condition="__import__('os')"))

    def test_shop_rules_from_path(self):
        rules = RuleFactory().create_rules_from_path(SHOP_RULES)
        assert [r.priority for r in rules] == [1, 2, 3, 4]
