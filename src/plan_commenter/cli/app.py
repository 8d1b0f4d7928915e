"""Command-line interface implementation for the plan commenter."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..adapters import (
    GitHubAuthError,
    GitHubCommentClient,
    GitHubError,
    PlanLoader,
    PlanLoaderError,
    PullRequestContext,
)
from ..adapters.github import DEFAULT_API_URL
from ..config import CommenterConfig, ConfigError, build_config
from ..normalization import PlanActionError
from ..rendering import ReportSizeError
from ..service import PlanCommenterService

FATAL_ERRORS = (ConfigError, PlanLoaderError, PlanActionError, ReportSizeError, GitHubError)

_CONFIG_DESTS = (
    "tf_plan_lookup_dir",
    "tf_plan_lookup_name",
    "tf_plan_lookup_depth",
    "expand_comment",
    "heading_plan_variable_name",
    "comment_header",
    "remove_previous_comments",
    "hide_previous_comments",
    "create_multiple_comments",
    "quiet",
)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with default option values; command-line flags take precedence.",
    )
    parser.add_argument(
        "--lookup-dir",
        dest="tf_plan_lookup_dir",
        default=None,
        help="Directory to search for Terraform plan JSON files.",
    )
    parser.add_argument(
        "--plan-name",
        dest="tf_plan_lookup_name",
        default=None,
        help="File name of the plan JSON files (`terraform show -json` output).",
    )
    parser.add_argument(
        "--max-depth",
        dest="tf_plan_lookup_depth",
        type=int,
        default=None,
        help="Maximum directory depth searched below the lookup directory.",
    )
    parser.add_argument(
        "--expand-comment",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Render the plan details expanded instead of collapsed.",
    )
    parser.add_argument(
        "--heading-variable",
        dest="heading_plan_variable_name",
        default=None,
        help="Plan variable whose value replaces the comment heading.",
    )
    parser.add_argument(
        "--comment-header",
        default=None,
        help="Heading used when no plan variable overrides it.",
    )
    parser.add_argument(
        "--create-multiple-comments",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Create one comment per plan instead of a single combined comment.",
    )
    parser.add_argument(
        "--quiet",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Only log warnings and errors.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="tf-plan-commenter",
        description="Post Terraform plan diffs as pull request comments",
    )
    subparsers = parser.add_subparsers(dest="command")

    comment_parser = subparsers.add_parser(
        "comment", help="Render plan diffs and publish them on the current pull request."
    )
    _add_common_arguments(comment_parser)
    comment_parser.add_argument(
        "--remove-previous-comments",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Delete comments left by earlier runs before posting.",
    )
    comment_parser.add_argument(
        "--hide-previous-comments",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Minimize comments left by earlier runs as outdated before posting.",
    )
    comment_parser.add_argument(
        "--github-token",
        default=None,
        help="Token used for the GitHub API. Defaults to the GITHUB_TOKEN variable.",
    )
    comment_parser.add_argument(
        "--repository",
        default=None,
        metavar="OWNER/REPO",
        help="Target repository. Defaults to the workflow's repository.",
    )
    comment_parser.add_argument(
        "--pr-number",
        type=int,
        default=None,
        help="Target pull request number. Defaults to the workflow event's pull request.",
    )
    comment_parser.add_argument(
        "--api-url",
        default=os.environ.get("GITHUB_API_URL", DEFAULT_API_URL),
        help="GitHub API base URL.",
    )

    render_parser = subparsers.add_parser(
        "render", help="Render plan diffs to stdout without contacting GitHub."
    )
    _add_common_arguments(render_parser)

    return parser


def format_error_command(message: str) -> str:
    """Render ``message`` as a GitHub Actions error workflow command."""

    escaped = message.replace("%", "%25").replace("\r", "").replace("\n", "%0A")
    return f"::error::{escaped}"


def configure_logging(quiet: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING if quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def load_config(args: argparse.Namespace) -> CommenterConfig:
    overrides: Dict[str, Any] = {
        dest: getattr(args, dest) for dest in _CONFIG_DESTS if hasattr(args, dest)
    }
    return build_config(args.config, overrides)


def _resolve_context(args: argparse.Namespace) -> PullRequestContext:
    if args.repository is None and args.pr_number is None:
        return PullRequestContext.from_environment()

    if args.repository is None or args.pr_number is None:
        raise GitHubAuthError("--repository and --pr-number must be given together")
    if "/" not in args.repository:
        raise GitHubAuthError(f"Repository must be in OWNER/REPO form: {args.repository}")

    owner, repo = args.repository.split("/", 1)
    return PullRequestContext(owner=owner, repo=repo, number=args.pr_number)


def _build_reports(service: PlanCommenterService) -> List[str]:
    config = service.config
    loader = PlanLoader(
        config.tf_plan_lookup_dir,
        plan_name=config.tf_plan_lookup_name,
        max_depth=config.tf_plan_lookup_depth,
    )
    return service.build_reports(loader.load_all())


def _handle_render(config: CommenterConfig) -> int:
    reports = _build_reports(PlanCommenterService(config))
    if not reports:
        print("No resource changes detected.")
        return 0

    print("\n\n".join(reports))
    return 0


def _handle_comment(args: argparse.Namespace, config: CommenterConfig) -> int:
    token = args.github_token or os.environ.get("GITHUB_TOKEN", "")
    client = GitHubCommentClient(token, _resolve_context(args), api_url=args.api_url)

    service = PlanCommenterService(config)
    reports = _build_reports(service)
    published = service.publish(reports, client)
    print(f"Published {published} plan comment(s).")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by tests and the ``python -m`` invocation."""

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in ("comment", "render"):
        parser.print_help()
        return 0

    try:
        config = load_config(args)
        configure_logging(config.quiet)
        if args.command == "render":
            return _handle_render(config)
        return _handle_comment(args, config)
    except FATAL_ERRORS as exc:
        print(format_error_command(str(exc)))
        return 2


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
