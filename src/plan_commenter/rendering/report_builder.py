"""Assemble resolved resource changes into Markdown pull request comments."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..models import ChangeCategory, PlanChanges, PlanResult

MAX_COMMENT_BODY_SIZE = 65536
COMMENT_MARKER = "<!-- tf-plan-commenter -->"

CATEGORY_ORDER = (
    ChangeCategory.CREATE,
    ChangeCategory.UPDATE,
    ChangeCategory.REPLACE,
    ChangeCategory.DESTROY,
    ChangeCategory.IMPORT,
)
BADGE_COLORS = {
    ChangeCategory.CREATE: "success",
    ChangeCategory.UPDATE: "yellow",
    ChangeCategory.REPLACE: "orange",
    ChangeCategory.DESTROY: "critical",
    ChangeCategory.IMPORT: "blue",
}


class ReportSizeError(RuntimeError):
    """Raised when a rendered comment does not fit in a single GitHub comment."""

    def __init__(self, actual: int, maximum: int = MAX_COMMENT_BODY_SIZE) -> None:
        super().__init__(
            f"Rendered plan comment is {actual} characters long, "
            f"exceeding the maximum of {maximum}"
        )
        self.actual = actual
        self.maximum = maximum


def render_badge(category: ChangeCategory, count: int) -> str:
    label = category.label
    return f"![{label}](https://img.shields.io/badge/{label}-{count}-{BADGE_COLORS[category]})"


def render_summary(plan_changes: PlanChanges) -> str:
    """Render one badge per category, in a fixed order."""

    return " ".join(
        render_badge(category, plan_changes.count(category)) for category in CATEGORY_ORDER
    )


def visible_categories(plan_changes: PlanChanges) -> List[ChangeCategory]:
    """Return the categories that get their own section.

    Replaced resources also count as created and destroyed, so the Create and
    Destroy sections only appear when their counters exceed the Replace one.
    """

    replace_count = plan_changes.count(ChangeCategory.REPLACE)
    visible: List[ChangeCategory] = []
    for category in CATEGORY_ORDER:
        count = plan_changes.count(category)
        if category in (ChangeCategory.CREATE, ChangeCategory.DESTROY):
            if count > replace_count:
                visible.append(category)
        elif count > 0:
            visible.append(category)
    return visible


class ReportBuilder:
    """Build comment bodies for one or several classified plans."""

    def __init__(self, *, expand_comment: bool = False) -> None:
        self.expand_comment = expand_comment

    # ------------------------------------------------------------------
    def build_reports(
        self, results: Sequence[PlanResult], *, multiple: bool = False
    ) -> List[str]:
        """Return the comment bodies to publish.

        With ``multiple`` every plan with changes gets its own comment,
        otherwise all of them share one. Plans without changes are skipped.
        """

        if multiple:
            reports = (self.build_report(result) for result in results)
            return [report for report in reports if report is not None]

        blocks = [
            self.render_plan_block(result) for result in results if not result.changes.is_empty
        ]
        if not blocks:
            return []
        return [self._finalize("\n\n".join(blocks))]

    def build_report(self, result: PlanResult) -> Optional[str]:
        """Return a single comment for ``result`` or ``None`` when it has no changes."""

        if result.changes.is_empty:
            return None
        return self._finalize(self.render_plan_block(result))

    def render_plan_block(self, result: PlanResult) -> str:
        plan_changes = result.changes
        open_attr = " open" if self.expand_comment else ""

        lines = [
            f"## {result.heading}",
            "",
            render_summary(plan_changes),
            "",
            f"<details{open_attr}>",
            "<summary>Show plan changes</summary>",
            "",
        ]
        for category in visible_categories(plan_changes):
            lines.extend(self._render_section(category, plan_changes))
        lines.append("</details>")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    def _render_section(self, category: ChangeCategory, plan_changes: PlanChanges) -> List[str]:
        lines = [f"### {category.label}", ""]
        for change in plan_changes.by_category(category):
            lines.append(change.diff)
            lines.append("")
        return lines

    def _finalize(self, body: str) -> str:
        report = f"{body}\n\n{COMMENT_MARKER}"
        if len(report) > MAX_COMMENT_BODY_SIZE:
            raise ReportSizeError(len(report))
        return report


__all__ = [
    "COMMENT_MARKER",
    "MAX_COMMENT_BODY_SIZE",
    "ReportBuilder",
    "ReportSizeError",
    "render_summary",
    "visible_categories",
]
