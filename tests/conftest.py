"""
Shared fakes for the aggregator and HTTP tests.
"""

import threading
import time
from datetime import datetime, timezone

import pytest

from pr_stats.gh_client import GitHubFetchError
from pr_stats.models import PullRequestSummary, Review, ReviewComment

T0 = datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)


def make_pr(number, author="alice", title=None):
    return PullRequestSummary(
        title=title or f"PR {number}",
        number=number,
        created_by=author,
        url=f"https://github.com/acme/widgets/pull/{number}",
        state="open",
        created_at=T0,
        updated_at=T0,
        closed_at=None,
    )


def make_comment(user="bob", body="nit"):
    return ReviewComment(user=user, body=body, created_at=T0, updated_at=T0)


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient that records every call."""

    def __init__(self, pages=None, reviews=None, comments=None, delay=0.0):
        self.owner = "acme"
        self.repo = "widgets"
        self.pages = pages or {}          # author -> list of pages (lists of PRs)
        self.reviews = reviews or {}      # pr number -> list of Review
        self.comments = comments or {}    # (pr number, review id) -> list of ReviewComment
        self.fail_comments_for = set()
        self.fail_search = False
        self.delay = delay
        self.search_calls = []
        self.review_calls = []
        self.comment_calls = []
        self._lock = threading.Lock()
        self._in_flight = 0
        self.max_in_flight = 0

    @property
    def full_name(self):
        return f"{self.owner}/{self.repo}"

    @property
    def upstream_calls(self):
        return len(self.search_calls) + len(self.review_calls) + len(self.comment_calls)

    def search_pull_requests(self, query, page):
        self.search_calls.append((query, page))
        if self.fail_search:
            raise RuntimeError("search exploded")
        author = query.rsplit("author:", 1)[1]
        pages = self.pages.get(author, [])
        return list(pages[page - 1]) if page <= len(pages) else []

    def list_reviews(self, pull_number):
        with self._lock:
            self.review_calls.append(pull_number)
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            return list(self.reviews.get(pull_number, []))
        finally:
            with self._lock:
                self._in_flight -= 1

    def list_review_comments(self, pull_number, review_id):
        with self._lock:
            self.comment_calls.append((pull_number, review_id))
        if pull_number in self.fail_comments_for:
            raise GitHubFetchError("Failed to fetch review comments.")
        return list(self.comments.get((pull_number, review_id), []))


@pytest.fixture
def fake_client():
    return FakeGitHubClient()


@pytest.fixture
def review():
    def _review(review_id, user="bob"):
        return Review(id=review_id, user=user, state="COMMENTED")
    return _review
