"""Unified diff rendering for a single resource change."""

from __future__ import annotations

import difflib
import re
from typing import Any, Iterable, List, Mapping

import yaml

from ..models import ChangeCategory

RESOURCE_HEADING = "#### Resource: `{address}`"
SEPARATOR = "---"
EMPTY_MAPPING_LINES = frozenset({"+{}", "-{}"})
BACKTICK_RUN = re.compile(r"`+")


def to_canonical_text(attributes: Mapping[str, Any]) -> str:
    """Serialize ``attributes`` as block-style YAML with sorted keys."""

    return yaml.safe_dump(
        dict(attributes),
        sort_keys=True,
        default_flow_style=False,
        allow_unicode=True,
    )


def code_fence(lines: Iterable[str]) -> str:
    """Return a backtick fence longer than any backtick run inside ``lines``."""

    longest = max((len(run) for line in lines for run in BACKTICK_RUN.findall(line)), default=0)
    return "`" * max(3, longest + 1)


class DiffRenderer:
    """Render sanitized before/after attributes as a filtered unified diff."""

    def render(
        self,
        address: str,
        before: Mapping[str, Any],
        after: Mapping[str, Any],
        category: ChangeCategory,
    ) -> str:
        """Return the heading, a separator and the fenced ``+``/``-`` lines of the diff."""

        before_label, after_label = self._labels(category)
        raw_diff = difflib.unified_diff(
            to_canonical_text(before).splitlines(),
            to_canonical_text(after).splitlines(),
            fromfile=address,
            tofile=address,
            fromfiledate=before_label,
            tofiledate=after_label,
            lineterm="",
        )

        body = self._filter(raw_diff)
        fence = code_fence(body)
        lines = [RESOURCE_HEADING.format(address=address), SEPARATOR, f"{fence}diff"]
        lines.extend(body)
        lines.append(fence)
        return "\n".join(lines)

    # ------------------------------------------------------------------
    def _labels(self, category: ChangeCategory) -> tuple[str, str]:
        # Replace shares the additive labelling; its create/destroy halves are
        # already reflected in the counters.
        if category is ChangeCategory.DESTROY:
            return category.value, ""
        return "", category.value

    def _filter(self, diff_lines: Iterable[str]) -> List[str]:
        return [
            line
            for line in diff_lines
            if line.startswith(("+", "-")) and line not in EMPTY_MAPPING_LINES
        ]


__all__ = ["DiffRenderer", "RESOURCE_HEADING", "SEPARATOR", "code_fence", "to_canonical_text"]
