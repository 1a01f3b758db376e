"""
Sandboxed Python expressions for rule conditions and actions.

Conditions are single expressions (``event['RemoveCount'] > 2``); actions
are statements (``event['audit'] = True``). Source is parsed once, checked
against a node whitelist and compiled; evaluation runs with no builtins
beyond the whitelisted functions and the facts as local names.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Optional

from ..core.facts import Facts


FACTS_NAME = "facts"

# str.format can reach private attributes through its field syntax
_BLOCKED_ATTRIBUTES = frozenset({"format", "format_map"})

ALLOWED_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "abs": abs,
    "all": all,
    "any": any,
    "bool": bool,
    "float": float,
    "int": int,
    "len": len,
    "max": max,
    "min": min,
    "round": round,
    "str": str,
    "sum": sum,
}

_EXPRESSION_NODES = (
    ast.Expression,
    ast.BoolOp, ast.And, ast.Or,
    ast.BinOp, ast.Add, ast.Sub, ast.Mult, ast.Div, ast.FloorDiv, ast.Mod, ast.Pow,
    ast.UnaryOp, ast.Not, ast.USub, ast.UAdd,
    ast.Compare, ast.Eq, ast.NotEq, ast.Gt, ast.GtE, ast.Lt, ast.LtE,
    ast.In, ast.NotIn, ast.Is, ast.IsNot,
    ast.IfExp,
    ast.Name, ast.Load, ast.Constant,
    ast.Attribute, ast.Subscript, ast.Slice,
    ast.List, ast.Tuple, ast.Dict, ast.Set,
    ast.Call, ast.keyword,
)

_STATEMENT_NODES = _EXPRESSION_NODES + (
    ast.Module, ast.Expr, ast.Assign, ast.AugAssign, ast.Store, ast.Pass,
)


class UnsafeExpressionError(ValueError):
    """Raised when an expression uses syntax outside the whitelist."""


class ExpressionSyntaxError(ValueError):
    """Raised when an expression cannot be parsed."""


@dataclass(frozen=True)
class CompiledExpression:
    source: str
    code: Any
    assigned_names: FrozenSet[str] = frozenset()


def _resolve_functions(extra: Optional[Dict[str, Callable[..., Any]]]) -> Dict[str, Callable[..., Any]]:
    functions = dict(ALLOWED_FUNCTIONS)
    if extra:
        functions.update(extra)
    return functions


def _validate(tree: ast.AST, allowed_nodes: tuple, function_names: set) -> None:
    for node in ast.walk(tree):
        if not isinstance(node, allowed_nodes):
            raise UnsafeExpressionError(f"Unsupported expression node: {type(node).__name__}")
        if isinstance(node, ast.Attribute) and (
            node.attr.startswith("_") or node.attr in _BLOCKED_ATTRIBUTES
        ):
            raise UnsafeExpressionError(f"Access to attribute '{node.attr}' is not allowed")
        if isinstance(node, ast.Name) and node.id.startswith("__"):
            raise UnsafeExpressionError(f"Name '{node.id}' is not allowed")
        if isinstance(node, ast.Call):
            func = node.func
            if isinstance(func, ast.Name) and func.id not in function_names:
                raise UnsafeExpressionError(f"Unsupported function call: {func.id}")
            if not isinstance(func, (ast.Name, ast.Attribute)):
                raise UnsafeExpressionError("Unsupported function call")


def _assigned_names(tree: ast.AST) -> FrozenSet[str]:
    names = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store):
            names.add(node.id)
    if FACTS_NAME in names:
        raise UnsafeExpressionError(f"'{FACTS_NAME}' cannot be reassigned")
    return frozenset(names)


def _parse(source: str, mode: str) -> ast.AST:
    try:
        return ast.parse(source.strip(), mode=mode)
    except SyntaxError as exc:
        raise ExpressionSyntaxError(f"Invalid expression '{source}': {exc.msg}") from exc


def compile_condition(
    source: str,
    functions: Optional[Dict[str, Callable[..., Any]]] = None,
) -> CompiledExpression:
    tree = _parse(source, "eval")
    _validate(tree, _EXPRESSION_NODES, set(_resolve_functions(functions)))
    return CompiledExpression(source=source, code=compile(tree, "<condition>", "eval"))


def compile_action(
    source: str,
    functions: Optional[Dict[str, Callable[..., Any]]] = None,
) -> CompiledExpression:
    tree = _parse(source, "exec")
    _validate(tree, _STATEMENT_NODES, set(_resolve_functions(functions)))
    return CompiledExpression(
        source=source,
        code=compile(tree, "<action>", "exec"),
        assigned_names=_assigned_names(tree),
    )


def _namespace(facts: Facts) -> Dict[str, Any]:
    namespace = facts.as_dict()
    namespace[FACTS_NAME] = facts
    return namespace


def evaluate(
    program: CompiledExpression,
    facts: Facts,
    functions: Optional[Dict[str, Callable[..., Any]]] = None,
) -> Any:
    return eval(program.code, {"__builtins__": {}, **_resolve_functions(functions)}, _namespace(facts))


def execute(
    program: CompiledExpression,
    facts: Facts,
    functions: Optional[Dict[str, Callable[..., Any]]] = None,
) -> None:
    namespace = _namespace(facts)
    exec(program.code, {"__builtins__": {}, **_resolve_functions(functions)}, namespace)
    # top-level assignments become facts; assigning None removes the fact
    for name in program.assigned_names:
        if name not in namespace:
            continue
        if namespace[name] is None:
            facts.remove(name)
        else:
            facts.put(name, namespace[name])
