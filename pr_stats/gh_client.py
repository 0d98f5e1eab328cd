# pr_stats/gh_client.py
import logging
from typing import List, Optional
from github import Auth, Github, GithubException

from .models import PullRequestSummary, Review, ReviewComment

log = logging.getLogger("gh_client")

SEARCH_PAGE_SIZE = 100


class GitHubFetchError(RuntimeError):
    """Upstream failure reported with a generic message; the cause is only logged."""


def _login(user) -> str:
    return user.login if user else "unknown"


class GitHubClient:
    """
    One authenticated PyGithub instance bound to a single repository.
    Build it once at startup and hand it to whatever needs GitHub access.
    """

    def __init__(self, token: Optional[str], owner: str, repo: str, gh: Optional[Github] = None):
        self.owner = owner
        self.repo = repo
        if gh is None:
            if token:
                gh = Github(auth=Auth.Token(token), per_page=SEARCH_PAGE_SIZE, retry=None, lazy=True)
            else:
                log.warning("GITHUB_PERSONAL_ACCESS_TOKEN is not set; using unauthenticated GitHub access")
                gh = Github(per_page=SEARCH_PAGE_SIZE, retry=None, lazy=True)
        self._gh = gh

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def _pull(self, pull_number: int):
        repository = self._gh.get_repo(self.full_name)
        return repository.get_pull(pull_number)

    def list_reviews(self, pull_number: int) -> List[Review]:
        """First page of reviews on a PR."""
        try:
            page = self._pull(pull_number).get_reviews().get_page(0)
            return [Review(id=rv.id, user=_login(rv.user), state=rv.state) for rv in page]
        except GithubException as ge:
            msg = getattr(ge, "data", None) or str(ge)
            log.error("GitHub API error listing reviews for PR #%s: %s", pull_number, msg)
            raise GitHubFetchError("Failed to fetch reviews.") from ge
        except Exception as e:
            log.exception("Error listing reviews for PR #%s", pull_number)
            raise GitHubFetchError("Failed to fetch reviews.") from e

    def list_review_comments(self, pull_number: int, review_id: int) -> List[ReviewComment]:
        """First page of comments left under one review."""
        try:
            page = self._pull(pull_number).get_single_review_comments(review_id).get_page(0)
            return [
                ReviewComment(
                    user=_login(c.user),
                    body=c.body or "",
                    created_at=c.created_at,
                    updated_at=c.updated_at,
                )
                for c in page
            ]
        except GithubException as ge:
            msg = getattr(ge, "data", None) or str(ge)
            log.error("GitHub API error listing review comments for PR #%s, Review #%s: %s",
                      pull_number, review_id, msg)
            raise GitHubFetchError("Failed to fetch review comments.") from ge
        except Exception as e:
            log.exception("Error listing review comments for PR #%s, Review #%s", pull_number, review_id)
            raise GitHubFetchError("Failed to fetch review comments.") from e

    def search_pull_requests(self, query: str, page: int) -> List[PullRequestSummary]:
        """
        One page of issue search results, oldest first.
        page is 1-based. Errors from GitHub propagate unchanged.
        """
        results = self._gh.search_issues(query, sort="created", order="asc")
        items = results.get_page(page - 1)
        return [
            PullRequestSummary(
                title=issue.title,
                number=issue.number,
                created_by=_login(issue.user),
                url=issue.html_url,
                state=issue.state,
                created_at=issue.created_at,
                updated_at=issue.updated_at,
                closed_at=issue.closed_at,
            )
            for issue in items
        ]
