import logging
from random import Random
from typing import Tuple

from errors import InvalidInputError, NotFoundError, PRMergedError
from models.entities import PRStatus, PullRequest
from repository.base import Repository
from services.assignment import need_more_reviewers, replace_reviewer, select_reviewers


logger = logging.getLogger(__name__)


async def create_pull_request(
    repo: Repository,
    pull_request_id: str,
    pull_request_name: str,
    author_id: str,
    rng: Random,
) -> PullRequest:
    """
    POST /pullRequest/create
    Create a PR and automatically assign up to 2 active reviewers from the author's team
    Returns the stored PR
    """
    if not pull_request_id or not pull_request_name or not author_id:
        raise InvalidInputError("pull_request_id, pull_request_name and author_id are required")

    try:
        author = await repo.get_user(author_id)
    except NotFoundError:
        logger.warning("author not found for PR create: author_id=%s", author_id)
        raise

    active_users = await repo.get_active_users_by_team(author.team_name)
    reviewers = select_reviewers(author.id, [user.id for user in active_users], rng)

    pr = PullRequest(
        id=pull_request_id,
        title=pull_request_name,
        author_id=author_id,
        status=PRStatus.OPEN,
        reviewers=reviewers,
        need_more_reviewers=need_more_reviewers(reviewers),
    )
    try:
        await repo.create_pr(pr)
    except Exception as e:
        logger.error("failed to create PR: pr_id=%s error=%s", pull_request_id, e)
        raise

    created = await repo.get_pr(pull_request_id)
    logger.info(
        "PR created with auto-assign: pr_id=%s reviewers_count=%d need_more=%s",
        created.id, len(created.reviewers), created.need_more_reviewers,
    )
    return created


async def get_pull_request(repo: Repository, pull_request_id: str) -> PullRequest:
    """
    GET /pullRequest/get
    Returns the PR with its current reviewers
    """
    if not pull_request_id:
        raise InvalidInputError("pull_request_id is required")
    return await repo.get_pr(pull_request_id)


async def merge_pull_request(repo: Repository, pull_request_id: str) -> PullRequest:
    """
    POST /pullRequest/merge
    Mark a PR as merged (idempotent operation)
    Returns the merged PR
    """
    if not pull_request_id:
        raise InvalidInputError("pull_request_id is required")

    await repo.merge_pr(pull_request_id)

    try:
        pr = await repo.get_pr(pull_request_id)
    except NotFoundError:
        logger.warning("PR not found after merge: pr_id=%s", pull_request_id)
        raise

    logger.info("PR merged: pr_id=%s title=%s", pr.id, pr.title)
    return pr


async def reassign_reviewer(
    repo: Repository,
    pull_request_id: str,
    old_reviewer_id: str,
    rng: Random,
) -> Tuple[PullRequest, str]:
    """
    POST /pullRequest/reassign
    Replace one reviewer with a random active member of that reviewer's team
    Returns the updated PR and the id of the new reviewer
    """
    if not pull_request_id or not old_reviewer_id:
        raise InvalidInputError("pull_request_id and old_reviewer_id are required")

    try:
        pr = await repo.get_pr(pull_request_id)
    except NotFoundError:
        logger.warning("PR not found for reassign: pr_id=%s", pull_request_id)
        raise

    if pr.is_merged:
        raise PRMergedError(f"PR {pull_request_id!r} is merged")

    try:
        old_reviewer = await repo.get_user(old_reviewer_id)
    except NotFoundError:
        logger.warning("old reviewer not found for reassign: reviewer_id=%s", old_reviewer_id)
        raise

    # candidates come from the replaced reviewer's team, not the author's
    team_members = await repo.get_active_users_by_team(old_reviewer.team_name)
    updated, new_reviewer_id = replace_reviewer(
        pr, old_reviewer_id, [user.id for user in team_members], rng
    )

    try:
        await repo.update_pr(updated)
    except Exception as e:
        logger.error("failed to update PR for reassign: pr_id=%s error=%s", pull_request_id, e)
        raise

    logger.info(
        "reviewer reassigned: pr_id=%s old=%s new=%s",
        pull_request_id, old_reviewer_id, new_reviewer_id,
    )
    return updated, new_reviewer_id
