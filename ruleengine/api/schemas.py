"""
Pydantic schemas for the FastAPI local API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..loader.definitions import RuleDefinition

# ── Rules ──────────────────────────────────────────────────────────────────

class RuleOut(BaseModel):
    name: str
    description: str
    priority: int
    threshold: float
    condition: Optional[str] = None
    actions: List[str] = Field(default_factory=list)


class RulesOut(BaseModel):
    rules: List[RuleOut]


class RulesIn(BaseModel):
    rules: List[RuleDefinition]


# ── Evaluation ─────────────────────────────────────────────────────────────

class ParametersIn(BaseModel):
    priority_threshold: Optional[int] = None
    skip_on_first_applied_rule: Optional[bool] = None
    skip_on_first_non_triggered_rule: Optional[bool] = None
    skip_on_first_failed_rule: Optional[bool] = None


class FireRequest(BaseModel):
    facts: Dict[str, Any] = Field(default_factory=dict)
    parameters: ParametersIn = Field(default_factory=ParametersIn)


class RuleTraceOut(BaseModel):
    rule: str
    priority: int
    evaluated: bool
    evaluation_result: Optional[bool]
    probabilistic_result: Optional[bool]
    executed: bool
    succeeded: Optional[bool]
    error: Optional[str]


class FireResponse(BaseModel):
    result: bool
    facts: Dict[str, Any]
    trace: List[RuleTraceOut]


class CheckRequest(BaseModel):
    facts: Dict[str, Any] = Field(default_factory=dict)


class CheckResultOut(BaseModel):
    name: str
    priority: int
    result: bool


class CheckResponse(BaseModel):
    results: List[CheckResultOut]
