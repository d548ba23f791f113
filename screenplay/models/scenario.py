"""Scenario data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from screenplay.models.appmap import Action

UNTAGGED = "_untagged"


@dataclass(frozen=True)
class Step:
    """One invocation of an action with concrete parameter values."""

    action: Action
    parameters: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.parameters is not None:
            object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def name(self) -> str:
        return self.action.qualified_name

    def summary(self) -> str:
        """Parameter summary using only parameters flagged for it."""
        if not self.parameters:
            return ""
        parts = []
        for key, value in self.parameters.items():
            spec = self.action.params.get(key)
            if spec is not None and spec.include_in_summary and value is not None:
                parts.append(f"{key}: {value}")
        return " {" + ", ".join(parts) + "}" if parts else ""


@dataclass
class Scenario:
    """An ordered list of steps with a unique title and tags."""

    # Tell pytest not to collect this as a test class
    __test__ = False

    title: str
    tags: tuple[str, ...] = (UNTAGGED,)
    steps: list[Step] = field(default_factory=list)
    in_file: str | None = None
    defined_by: str | None = None
    tag_set: frozenset[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.tags = tuple(self.tags) or (UNTAGGED,)
        self.tag_set = frozenset(self.tags)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tag_set
