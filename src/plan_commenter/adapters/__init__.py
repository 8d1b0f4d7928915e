"""Adapter layer for plan ingestion and GitHub comment publication."""

from .github import (
    GitHubAuthError,
    GitHubCommentClient,
    GitHubError,
    IssueComment,
    PullRequestContext,
)
from .plan_loader import PlanLoader, PlanLoaderError, find_plan_files, load_plan_document

__all__ = [
    "GitHubAuthError",
    "GitHubCommentClient",
    "GitHubError",
    "IssueComment",
    "PlanLoader",
    "PlanLoaderError",
    "PullRequestContext",
    "find_plan_files",
    "load_plan_document",
]
