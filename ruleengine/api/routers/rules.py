"""
/rules — inspect and replace the loaded rule set.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ...api.schemas import RuleOut, RulesIn, RulesOut
from ...core.rules import Rule, Rules

router = APIRouter(prefix="/rules", tags=["rules"])


def _get_rules(request: Request) -> Rules:
    return request.app.state.rules


def _rule_out(rule: Rule) -> RuleOut:
    condition = getattr(rule, "condition", None)
    actions = getattr(rule, "actions", [])
    return RuleOut(
        name=rule.name,
        description=rule.description,
        priority=rule.priority,
        threshold=rule.threshold,
        condition=getattr(condition, "expression", None),
        actions=[getattr(a, "expression", repr(a)) for a in actions],
    )


@router.get("", response_model=RulesOut)
def list_rules(rules: Rules = Depends(_get_rules)):
    """Return the loaded rules in firing order."""
    return RulesOut(rules=[_rule_out(r) for r in rules])


@router.put("", response_model=RulesOut)
def replace_rules(body: RulesIn, request: Request):
    """Replace the loaded rule set with the posted definitions."""
    try:
        rules = request.app.state.factory.create_rules(body.rules)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    request.app.state.rules = rules
    return RulesOut(rules=[_rule_out(r) for r in rules])


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rule(name: str, rules: Rules = Depends(_get_rules)):
    if not rules.unregister_by_name(name):
        raise HTTPException(status_code=404, detail=f"Rule '{name}' not found")
