"""Change classification models shared by the pipeline and reporting layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class ActionVerb(str, Enum):
    """Raw action verbs Terraform emits in ``change.actions``."""

    NOOP = "no-op"
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class ChangeCategory(str, Enum):
    """Mutually exclusive category assigned to a reported resource change."""

    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"
    REPLACE = "replace"
    IMPORT = "import"

    @property
    def label(self) -> str:
        return self.value.title()


@dataclass(frozen=True, slots=True)
class ResolvedChange:
    """A rendered resource change ready to be placed in a report."""

    address: str
    diff: str
    category: ChangeCategory


@dataclass(slots=True)
class PlanChanges:
    """Per-plan accumulator of category counters and resolved changes."""

    counts: Dict[ChangeCategory, int] = field(
        default_factory=lambda: {category: 0 for category in ChangeCategory}
    )
    changes: List[ResolvedChange] = field(default_factory=list)

    def increment(self, *categories: ChangeCategory) -> None:
        for category in categories:
            self.counts[category] += 1

    def add(self, change: ResolvedChange) -> None:
        self.changes.append(change)

    def count(self, category: ChangeCategory) -> int:
        return self.counts[category]

    def by_category(self, category: ChangeCategory) -> List[ResolvedChange]:
        """Return the changes of ``category`` in their original order."""

        return [change for change in self.changes if change.category is category]

    @property
    def is_empty(self) -> bool:
        return not self.changes


@dataclass(slots=True)
class PlanResult:
    """Classified changes of one plan together with its resolved heading."""

    heading: str
    changes: PlanChanges
