from __future__ import annotations

import json
import logging
import os
from collections import deque
from pathlib import Path
from typing import Any, Iterator, List, Mapping

from ..models import PlanDocument, ResourceChange

logger = logging.getLogger(__name__)


class PlanLoaderError(RuntimeError):
    """Exception raised when terraform plan ingestion fails."""


def find_plan_files(
    lookup_dir: str | os.PathLike[str], plan_name: str, max_depth: int
) -> List[Path]:
    """Breadth-first search for files named ``plan_name`` below ``lookup_dir``.

    The lookup directory itself is depth 0; directories deeper than
    ``max_depth`` are not inspected. Entries are visited in sorted order so the
    result is stable between runs.
    """

    root = Path(lookup_dir)
    if not root.is_dir():
        raise PlanLoaderError(f"Plan lookup directory not found: {root}")

    pending: deque[tuple[Path, int]] = deque([(root, 0)])
    found: List[Path] = []
    while pending:
        current, depth = pending.popleft()
        if depth > max_depth:
            continue

        for entry in sorted(current.iterdir()):
            if entry.is_dir():
                pending.append((entry, depth + 1))
            elif entry.name == plan_name:
                found.append(entry)

    return found


def load_plan_document(path: str | os.PathLike[str]) -> PlanDocument:
    """Parse the ``terraform show -json`` output stored at ``path``."""

    plan_path = Path(path)
    if not plan_path.exists():
        raise PlanLoaderError(f"Terraform plan JSON artifact not found: {plan_path}")

    with plan_path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise PlanLoaderError(f"Invalid JSON in plan artifact: {plan_path}") from exc

    return parse_plan_document(data, plan_path)


def parse_plan_document(data: Any, path: Path) -> PlanDocument:
    if not isinstance(data, Mapping):
        raise PlanLoaderError(f"Plan artifact must contain a JSON object: {path}")

    raw_changes = data.get("resource_changes")
    if not isinstance(raw_changes, list):
        raise PlanLoaderError(f"Plan artifact has no 'resource_changes' list: {path}")

    variables = data.get("variables") or {}
    if not isinstance(variables, Mapping):
        raise PlanLoaderError(f"Plan 'variables' must be an object: {path}")

    changes = tuple(
        _parse_resource_change(entry, path, position)
        for position, entry in enumerate(raw_changes)
    )
    return PlanDocument(path=path, resource_changes=changes, variables=dict(variables))


def _parse_resource_change(entry: Any, path: Path, position: int) -> ResourceChange:
    if not isinstance(entry, Mapping):
        raise PlanLoaderError(f"resource_changes[{position}] is not an object in {path}")

    address = entry.get("address")
    if not isinstance(address, str) or not address:
        raise PlanLoaderError(f"resource_changes[{position}] has no address in {path}")

    change = entry.get("change")
    if not isinstance(change, Mapping):
        raise PlanLoaderError(f"Resource {address} has no 'change' object in {path}")

    actions = change.get("actions")
    if not isinstance(actions, list) or not actions:
        raise PlanLoaderError(f"Resource {address} has no actions in {path}")

    importing = change.get("importing")
    return ResourceChange(
        address=address,
        actions=tuple(str(action) for action in actions),
        before=_mapping(change.get("before")),
        after=_mapping(change.get("after")),
        before_sensitive=_sensitivity(change.get("before_sensitive")),
        after_sensitive=_sensitivity(change.get("after_sensitive")),
        importing=dict(importing) if isinstance(importing, Mapping) else None,
    )


def _mapping(value: Any) -> dict[str, Any]:
    # Terraform emits null for absent state.
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def _sensitivity(value: Any) -> dict[str, Any] | bool:
    # A bare true marks the whole object sensitive and must survive parsing.
    if value is True:
        return True
    return _mapping(value)


class PlanLoader:
    """Discover plan JSON files below a lookup directory and load them lazily."""

    def __init__(
        self,
        lookup_dir: str | os.PathLike[str] = ".",
        *,
        plan_name: str = "tfplan.json",
        max_depth: int = 10,
    ) -> None:
        self.lookup_dir = Path(lookup_dir).resolve()
        self.plan_name = plan_name
        self.max_depth = max_depth

    def discover(self) -> List[Path]:
        paths = find_plan_files(self.lookup_dir, self.plan_name, self.max_depth)
        logger.info(
            "Found %d plan file(s) named %s under %s",
            len(paths),
            self.plan_name,
            self.lookup_dir,
        )
        for path in paths:
            logger.debug("Plan file: %s", path)
        return paths

    def load_all(self) -> Iterator[PlanDocument]:
        """Yield plan documents in discovery order, failing on the first bad one."""

        for path in self.discover():
            yield load_plan_document(path)


__all__ = [
    "PlanLoader",
    "PlanLoaderError",
    "find_plan_files",
    "load_plan_document",
    "parse_plan_document",
]
