"""
/fire and /check — run the loaded rule set against posted facts.
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request, status

from ...api.schemas import CheckRequest, CheckResponse, CheckResultOut, FireRequest, FireResponse, RuleTraceOut
from ...core.engine import RulesEngine
from ...core.facts import Facts
from ...core.listeners import TraceListener

router = APIRouter(tags=["evaluation"])


def _facts(raw: dict) -> Facts:
    try:
        return Facts(raw)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("/fire", response_model=FireResponse)
def fire(req: FireRequest, request: Request):
    """Fire the loaded rules; returns the engine result, resulting facts and a per-rule trace."""
    state = request.app.state
    facts = _facts(req.facts)
    tracer = TraceListener()
    engine = RulesEngine(
        parameters=state.parameters.with_overrides(req.parameters.model_dump()),
        rule_listeners=[tracer],
        random_source=state.random_source,
    )
    result = engine.fire(state.rules, facts)
    return FireResponse(
        result=result,
        facts=facts.as_dict(),
        trace=[RuleTraceOut(**asdict(t)) for t in tracer.traces],
    )


@router.post("/check", response_model=CheckResponse)
def check(req: CheckRequest, request: Request):
    """Evaluate conditions only, one result per rule in firing order; a condition that raises yields 422."""
    state = request.app.state
    engine = RulesEngine(parameters=state.parameters)
    try:
        results = engine.check(state.rules, _facts(req.facts))
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"{type(exc).__name__}: {exc}",
        )
    return CheckResponse(results=[
        CheckResultOut(name=rule.name, priority=rule.priority, result=ok)
        for rule, ok in results.items()
    ])
