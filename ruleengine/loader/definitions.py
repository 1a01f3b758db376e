"""
Rule definitions — the serialisable description of a rule, read from YAML or JSON.

YAML files hold one rule per document (``---`` separated) or a single list
of rules; JSON files hold a list of rules or a single rule object.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..core.rules import DEFAULT_DESCRIPTION, DEFAULT_NAME, DEFAULT_PRIORITY, DEFAULT_THRESHOLD

Source = Union[str, IO[str]]


class RuleDefinitionError(ValueError):
    """Raised when rule definitions are malformed."""


class RuleDefinition(BaseModel):
    name: str = DEFAULT_NAME
    description: str = DEFAULT_DESCRIPTION
    priority: int = DEFAULT_PRIORITY
    threshold: float = DEFAULT_THRESHOLD
    condition: str = Field(..., min_length=1)
    actions: List[str] = Field(default_factory=list)
    composite_rule_type: Optional[str] = None


def _to_definitions(documents: List[Any]) -> List[RuleDefinition]:
    raw: List[Any] = []
    for doc in documents:
        if doc is None:
            continue
        if isinstance(doc, list):
            raw.extend(doc)
        else:
            raw.append(doc)

    definitions = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise RuleDefinitionError(f"Rule definition #{i} is not a mapping: {item!r}")
        try:
            definitions.append(RuleDefinition.model_validate(item))
        except ValidationError as exc:
            raise RuleDefinitionError(f"Invalid rule definition #{i}: {exc}") from exc
    return definitions


def read_yaml(source: Source) -> List[RuleDefinition]:
    try:
        documents = list(yaml.safe_load_all(source))
    except yaml.YAMLError as exc:
        raise RuleDefinitionError(f"Unable to parse YAML rule definitions: {exc}") from exc
    return _to_definitions(documents)


def read_json(source: Source) -> List[RuleDefinition]:
    text = source if isinstance(source, str) else source.read()
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RuleDefinitionError(f"Unable to parse JSON rule definitions: {exc}") from exc
    return _to_definitions([document])


def read_definitions(path: Union[str, Path]) -> List[RuleDefinition]:
    """Read a definitions file, picking the reader from its suffix."""
    path = Path(path)
    suffix = path.suffix.lower()
    with path.open(encoding="utf-8") as fh:
        if suffix in (".yml", ".yaml"):
            return read_yaml(fh)
        if suffix == ".json":
            return read_json(fh)
    raise RuleDefinitionError(f"Unsupported rule definition file type: {path.name}")
