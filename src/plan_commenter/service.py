"""Orchestration layer used by the CLI to turn plans into pull request comments."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .adapters import GitHubCommentClient, GitHubError, PlanLoaderError
from .config import CommenterConfig
from .models import MISSING, PlanChanges, PlanDocument, PlanResult, ResolvedChange
from .normalization import ActionClassifier, PlanActionError, SensitiveFieldRedactor
from .rendering import COMMENT_MARKER, DiffRenderer, ReportBuilder, ReportSizeError

logger = logging.getLogger(__name__)


class PlanCommenterService:
    """Classify, redact and render plan changes, then publish the reports."""

    def __init__(
        self,
        config: CommenterConfig | None = None,
        *,
        classifier: ActionClassifier | None = None,
        redactor: SensitiveFieldRedactor | None = None,
        renderer: DiffRenderer | None = None,
        report_builder: ReportBuilder | None = None,
    ) -> None:
        self.config = config or CommenterConfig()
        self._classifier = classifier or ActionClassifier()
        self._redactor = redactor or SensitiveFieldRedactor()
        self._renderer = renderer or DiffRenderer()
        self._report_builder = report_builder or ReportBuilder(
            expand_comment=self.config.expand_comment
        )

    # ------------------------------------------------------------------
    def resolve_heading(self, plan: PlanDocument) -> str:
        """Return the comment heading, optionally taken from a plan variable."""

        variable_name = self.config.heading_plan_variable_name
        if not variable_name:
            return self.config.comment_header

        value = plan.variable(variable_name)
        if value is MISSING or value is None:
            logger.warning(
                "Plan variable '%s' %s in %s; using default heading '%s'",
                variable_name,
                "not found" if value is MISSING else "is null",
                plan.path,
                self.config.comment_header,
            )
            return self.config.comment_header
        return str(value)

    def process_plan(self, plan: PlanDocument) -> PlanResult:
        """Classify and render every resource change of ``plan``."""

        plan_changes = PlanChanges()
        for change in plan.resource_changes:
            category = self._classifier.classify(change, plan_changes)
            if category is None:
                continue

            attributes = self._redactor.redact(
                change.before,
                change.after,
                change.before_sensitive,
                change.after_sensitive,
            )
            diff = self._renderer.render(
                change.address, attributes.before, attributes.after, category
            )
            plan_changes.add(ResolvedChange(address=change.address, diff=diff, category=category))

        logger.info(
            "Plan %s: %s",
            plan.path,
            ", ".join(
                f"{category.value}={count}" for category, count in plan_changes.counts.items()
            ),
        )
        return PlanResult(heading=self.resolve_heading(plan), changes=plan_changes)

    def build_reports(self, plans: Iterable[PlanDocument]) -> List[str]:
        """Process ``plans`` in order and return the comment bodies to publish.

        The first plan that fails to load, classify or fit in a comment aborts
        the whole run.
        """

        results = [self.process_plan(plan) for plan in plans]
        reports = self._report_builder.build_reports(
            results, multiple=self.config.create_multiple_comments
        )
        if not reports:
            logger.info("No resource changes found in %d plan(s); nothing to post", len(results))
        return reports

    def publish(self, reports: Sequence[str], client: GitHubCommentClient) -> int:
        """Clean up earlier comments as configured, then post ``reports``.

        Every report is attempted even when an earlier one fails; failures are
        raised together once all of them were tried.
        """

        if self.config.remove_previous_comments:
            removed = client.remove_comments_by_marker(COMMENT_MARKER)
            logger.info("Removed %d previous plan comment(s)", removed)
        elif self.config.hide_previous_comments:
            hidden = client.hide_comments_by_marker(COMMENT_MARKER)
            logger.info("Hid %d previous plan comment(s)", hidden)

        failures: List[str] = []
        for index, report in enumerate(reports, start=1):
            try:
                client.create_comment(report)
            except GitHubError as exc:
                logger.error("Failed to publish plan comment %d/%d: %s", index, len(reports), exc)
                failures.append(str(exc))

        if failures:
            raise GitHubError(
                f"Failed to publish {len(failures)} of {len(reports)} plan comment(s): "
                + "; ".join(failures)
            )
        return len(reports)


__all__ = [
    "PlanActionError",
    "PlanCommenterService",
    "PlanLoaderError",
    "ReportSizeError",
]
