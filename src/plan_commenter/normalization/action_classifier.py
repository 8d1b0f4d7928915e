"""Resolve Terraform action verbs into a single reported change category."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..models import ActionVerb, ChangeCategory, PlanChanges, ResourceChange

logger = logging.getLogger(__name__)


class PlanActionError(RuntimeError):
    """Raised when a resource change carries actions that cannot be classified."""


class ActionClassifier:
    """Map the ``actions`` of a resource change onto a :class:`ChangeCategory`."""

    def classify(
        self, change: ResourceChange, plan_changes: PlanChanges
    ) -> Optional[ChangeCategory]:
        """Return the category for ``change`` and bump the matching counters.

        ``None`` means the change is not reported: a true no-op or a data
        source read. Those leave ``plan_changes`` untouched.
        """

        verbs = self._parse_verbs(change.address, change.actions)
        first = verbs[0]

        if ActionVerb.CREATE in verbs and ActionVerb.DELETE in verbs:
            plan_changes.increment(
                ChangeCategory.CREATE, ChangeCategory.DESTROY, ChangeCategory.REPLACE
            )
            return ChangeCategory.REPLACE

        if first is ActionVerb.NOOP:
            if change.is_importing:
                plan_changes.increment(ChangeCategory.IMPORT)
                return ChangeCategory.IMPORT
            logger.debug("Skipping no-op resource %s", change.address)
            return None
        if first is ActionVerb.CREATE:
            plan_changes.increment(ChangeCategory.CREATE)
            return ChangeCategory.CREATE
        if first is ActionVerb.DELETE:
            plan_changes.increment(ChangeCategory.DESTROY)
            return ChangeCategory.DESTROY
        if first is ActionVerb.UPDATE:
            plan_changes.increment(ChangeCategory.UPDATE)
            return ChangeCategory.UPDATE
        if first is ActionVerb.READ:
            logger.debug("Skipping data source read %s", change.address)
            return None

        raise PlanActionError(f"Unhandled action '{first.value}' for resource {change.address}")

    # ------------------------------------------------------------------
    def _parse_verbs(self, address: str, actions: Iterable[str]) -> List[ActionVerb]:
        raw_actions = list(actions)
        if not raw_actions:
            raise PlanActionError(f"Resource {address} has no planned actions")

        verbs: List[ActionVerb] = []
        for raw in raw_actions:
            try:
                verbs.append(ActionVerb(raw))
            except ValueError as exc:
                raise PlanActionError(
                    f"Unsupported action '{raw}' for resource {address}"
                ) from exc
        return verbs


__all__ = ["ActionClassifier", "PlanActionError"]
