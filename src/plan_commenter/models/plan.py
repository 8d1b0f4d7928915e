"""Parsed representation of a Terraform plan JSON document."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

# Returned by PlanDocument.variable for undeclared variables.
MISSING = object()


@dataclass(frozen=True, slots=True)
class ResourceChange:
    """One entry of the plan's ``resource_changes`` list."""

    address: str
    actions: Tuple[str, ...]
    before: Mapping[str, Any] = field(default_factory=dict)
    after: Mapping[str, Any] = field(default_factory=dict)
    # A mapping mirroring the attributes, or ``True`` when the whole object is sensitive.
    before_sensitive: Union[Mapping[str, Any], bool] = field(default_factory=dict)
    after_sensitive: Union[Mapping[str, Any], bool] = field(default_factory=dict)
    importing: Optional[Mapping[str, Any]] = None

    @property
    def is_importing(self) -> bool:
        """Return ``True`` when Terraform marked the resource for import."""

        return self.importing is not None


@dataclass(frozen=True, slots=True)
class PlanDocument:
    """A loaded plan: its origin, input variables and resource changes."""

    path: Path
    resource_changes: Tuple[ResourceChange, ...] = ()
    variables: Mapping[str, Any] = field(default_factory=dict)

    def variable(self, name: str) -> Any:
        """Return the value of plan variable ``name`` or :data:`MISSING` when absent.

        Terraform wraps each variable as ``{"value": ...}``; plain values are
        accepted as well.
        """

        if name not in self.variables:
            return MISSING
        raw = self.variables[name]
        if isinstance(raw, Mapping) and "value" in raw:
            return raw["value"]
        return raw
