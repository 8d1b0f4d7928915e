"""GitHub pull request comment transport used to publish plan reports."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = 30

GET_COMMENTS_QUERY = """
query comments($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequest(number: $number) {
      comments(last: 100, orderBy: { field: UPDATED_AT, direction: DESC }) {
        nodes {
          id
          body
          isMinimized
        }
      }
    }
  }
}
"""

REMOVE_COMMENT_MUTATION = """
mutation ($id: ID!) {
  deleteIssueComment(input: { id: $id }) {
    clientMutationId
  }
}
"""

MINIMIZE_COMMENT_MUTATION = """
mutation minimizeComment($id: ID!) {
  minimizeComment(input: { classifier: OUTDATED, subjectId: $id }) {
    clientMutationId
  }
}
"""


class GitHubError(RuntimeError):
    """Raised when a GitHub API call fails."""


class GitHubAuthError(GitHubError):
    """Raised when credentials or pull request context are missing or rejected."""


@dataclass(frozen=True, slots=True)
class PullRequestContext:
    """Repository coordinates of the pull request receiving the comments."""

    owner: str
    repo: str
    number: int

    @classmethod
    def from_environment(cls, env: Mapping[str, str] | None = None) -> "PullRequestContext":
        """Build the context from the variables GitHub Actions exports."""

        env = os.environ if env is None else env
        repository = env.get("GITHUB_REPOSITORY", "")
        if "/" not in repository:
            raise GitHubAuthError("GITHUB_REPOSITORY is not set to an owner/repo value")
        owner, repo = repository.split("/", 1)

        event_path = env.get("GITHUB_EVENT_PATH")
        if not event_path:
            raise GitHubAuthError("GITHUB_EVENT_PATH is not set; not running in a workflow?")

        number = _pull_request_number(Path(event_path))
        return cls(owner=owner, repo=repo, number=number)


def _pull_request_number(event_path: Path) -> int:
    try:
        event = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise GitHubAuthError(f"Failed to read workflow event payload: {event_path}") from exc

    for key in ("pull_request", "issue"):
        payload = event.get(key)
        if isinstance(payload, Mapping) and isinstance(payload.get("number"), int):
            return payload["number"]

    raise GitHubAuthError("Workflow event is not associated with a pull request")


@dataclass(frozen=True, slots=True)
class IssueComment:
    id: str
    body: str
    is_minimized: bool = False


class GitHubCommentClient:
    """Create, list, delete and minimize pull request comments."""

    def __init__(
        self,
        token: str,
        context: PullRequestContext,
        *,
        api_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not token:
            raise GitHubAuthError("A GitHub token is required to publish comments")

        self.context = context
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
            }
        )

    # ------------------------------------------------------------------
    def create_comment(self, body: str) -> None:
        context = self.context
        url = (
            f"{self.api_url}/repos/{context.owner}/{context.repo}"
            f"/issues/{context.number}/comments"
        )
        self._request("POST", url, {"body": body})
        logger.info("Created plan comment on PR #%d", context.number)

    def query_comments_by_marker(self, marker: str) -> List[IssueComment]:
        data = self._graphql(
            GET_COMMENTS_QUERY,
            {
                "owner": self.context.owner,
                "name": self.context.repo,
                "number": self.context.number,
            },
        )
        logger.info("Retrieved comments for PR #%d", self.context.number)

        try:
            nodes = data["repository"]["pullRequest"]["comments"]["nodes"]
        except (KeyError, TypeError) as exc:
            raise GitHubError("Unexpected response shape when listing comments") from exc

        comments = [
            IssueComment(
                id=str(node["id"]),
                body=str(node.get("body") or ""),
                is_minimized=bool(node.get("isMinimized")),
            )
            for node in nodes
            if node
        ]
        return [comment for comment in comments if marker in comment.body]

    def remove_comments_by_marker(self, marker: str) -> int:
        """Delete every comment containing ``marker``; return how many were deleted."""

        return self._apply_to_marked(marker, REMOVE_COMMENT_MUTATION, "remove")

    def hide_comments_by_marker(self, marker: str) -> int:
        """Minimize every visible comment containing ``marker`` as outdated."""

        return self._apply_to_marked(marker, MINIMIZE_COMMENT_MUTATION, "hide", skip_minimized=True)

    # ------------------------------------------------------------------
    def _apply_to_marked(
        self, marker: str, mutation: str, verb: str, *, skip_minimized: bool = False
    ) -> int:
        targets = self.query_comments_by_marker(marker)
        if skip_minimized:
            targets = [comment for comment in targets if not comment.is_minimized]

        if not targets:
            logger.info("No previous plan comments found. Skipping the cleanup")
            return 0

        logger.info("%d comment(s) to %s on PR #%d", len(targets), verb, self.context.number)
        handled = 0
        for comment in targets:
            try:
                self._graphql(mutation, {"id": comment.id})
            except GitHubError as exc:
                logger.warning(
                    "Failed to %s comment %s on PR #%d: %s",
                    verb,
                    comment.id,
                    self.context.number,
                    exc,
                )
                continue
            handled += 1
        return handled

    def _graphql(self, query: str, variables: Mapping[str, Any]) -> Mapping[str, Any]:
        payload = self._request(
            "POST", f"{self.api_url}/graphql", {"query": query, "variables": dict(variables)}
        )
        errors = payload.get("errors")
        if errors:
            messages = "; ".join(str(error.get("message", error)) for error in errors)
            raise GitHubError(f"GraphQL request failed: {messages}")
        return payload.get("data") or {}

    def _request(self, method: str, url: str, body: Mapping[str, Any]) -> Mapping[str, Any]:
        try:
            response = self.session.request(method, url, json=body, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise GitHubError(f"{method} {url} failed: {exc}") from exc

        if response.status_code in (401, 403):
            raise GitHubAuthError(
                f"GitHub rejected the credentials ({response.status_code}) for {method} {url}"
            )
        if response.status_code >= 400:
            raise GitHubError(
                f"{method} {url} returned {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GitHubError(f"{method} {url} did not return JSON") from exc
        return data if isinstance(data, Mapping) else {}


__all__ = [
    "GitHubAuthError",
    "GitHubCommentClient",
    "GitHubError",
    "IssueComment",
    "PullRequestContext",
]
