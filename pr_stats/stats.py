# pr_stats/stats.py
import asyncio
import logging
from typing import List, Sequence

from .config import DEFAULT_MAX_CONCURRENCY
from .gh_client import GitHubClient
from .models import PullRequestSummary, StatsReport

log = logging.getLogger("stats")


class PRFetchError(RuntimeError):
    """Aggregation aborted; the underlying cause is chained and logged."""


def build_search_query(full_name: str, username: str, start_date: str) -> str:
    return f"repo:{full_name} is:pr created:>={start_date} author:{username}"


async def _search_user_prs(client: GitHubClient, username: str, start_date: str) -> List[PullRequestSummary]:
    query = build_search_query(client.full_name, username, start_date)
    collected: List[PullRequestSummary] = []
    page = 1
    while True:
        items = await asyncio.to_thread(client.search_pull_requests, query, page)
        log.debug("search page=%s author=%s items=%s", page, username, len(items))
        if not items:
            break
        collected.extend(items)
        page += 1
    log.info("Found %s PRs by %s since %s", len(collected), username, start_date)
    return collected


async def _attach_review_comments(client: GitHubClient, pr: PullRequestSummary,
                                  gate: asyncio.Semaphore) -> PullRequestSummary:
    async with gate:
        reviews = await asyncio.to_thread(client.list_reviews, pr.number)
        # only the first review's comments are counted
        comments = (
            await asyncio.to_thread(client.list_review_comments, pr.number, reviews[0].id)
            if reviews else []
        )
    return pr.model_copy(update={"reviewComments": comments})


async def search_prs_by_date(client: GitHubClient, usernames: Sequence[str], start_date: str,
                             max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> StatsReport:
    """
    Collect every PR opened by `usernames` in the client's repository on or after
    `start_date`, then attach the comments of each PR's first review.

    Authors and search pages are walked one at a time. Review lookups fan out
    across PRs, at most `max_concurrency` at once. Any failure aborts the whole
    report with PRFetchError.
    """
    try:
        prs: List[PullRequestSummary] = []
        for username in usernames:
            prs.extend(await _search_user_prs(client, username, start_date))

        gate = asyncio.Semaphore(max(1, max_concurrency))
        # let every lookup settle so no task outlives the request with an unread error
        team_prs = await asyncio.gather(
            *[_attach_review_comments(client, pr, gate) for pr in prs], return_exceptions=True
        )
        failure = next((r for r in team_prs if isinstance(r, BaseException)), None)
        if failure is not None:
            raise failure
    except Exception as e:
        log.exception("Error searching PRs")
        raise PRFetchError("Failed to fetch PRs.") from e

    total_comments = sum(len(pr.reviewComments) for pr in team_prs)
    log.info("Stats for %s: %s PRs, %s review comments", client.full_name, len(prs), total_comments)
    return StatsReport(totalPRs=len(prs), totalComments=total_comments, teamPrs=list(team_prs))
