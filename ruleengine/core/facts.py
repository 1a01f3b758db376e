"""
Facts — the named, mutable key/value store that conditions and actions
read from and write to during a run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional


@dataclass(frozen=True)
class Fact:
    name: str
    value: Any

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("fact name must be a non-empty string")
        if self.value is None:
            raise ValueError(f"fact '{self.name}' must not have a None value")

    def __str__(self) -> str:
        return f"Fact{{name='{self.name}', value={self.value!r}}}"


class Facts:
    """
    Insertion-ordered fact store.

    Usage:
        facts = Facts({"event": {"RemoveCount": 12}})
        facts.put("customer", "gold")
        facts.get("customer")   # "gold"
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._facts: Dict[str, Fact] = {}
        for name, value in (initial or {}).items():
            self.put(name, value)

    def put(self, name: str, value: Any) -> Any:
        """Add or replace a fact; returns the previous value (or None)."""
        previous = self._facts.get(name)
        self._facts[name] = Fact(name, value)
        return previous.value if previous else None

    def add(self, fact: Fact) -> Any:
        return self.put(fact.name, fact.value)

    def get(self, name: str, default: Any = None) -> Any:
        fact = self._facts.get(name)
        return fact.value if fact else default

    def get_fact(self, name: str) -> Optional[Fact]:
        return self._facts.get(name)

    def remove(self, name: str) -> Any:
        fact = self._facts.pop(name, None)
        return fact.value if fact else None

    def clear(self) -> None:
        self._facts.clear()

    def as_dict(self) -> Dict[str, Any]:
        """Shallow copy of the facts as a plain dict."""
        return {name: fact.value for name, fact in self._facts.items()}

    def __getitem__(self, name: str) -> Any:
        return self._facts[name].value

    def __contains__(self, name: object) -> bool:
        return name in self._facts

    def __iter__(self) -> Iterator[Fact]:
        return iter(list(self._facts.values()))

    def __len__(self) -> int:
        return len(self._facts)

    def __repr__(self) -> str:
        return f"Facts({self.as_dict()!r})"
