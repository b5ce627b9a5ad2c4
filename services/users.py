import logging
from random import Random
from typing import AbstractSet, List

from errors import AppError, InvalidInputError, NotFoundError
from models.entities import DeactivationResult, PullRequest, PullRequestShort, User
from repository.base import Repository
from services.assignment import repair_reviewers


logger = logging.getLogger(__name__)


async def get_review(repo: Repository, user_id: str) -> List[PullRequestShort]:
    """
    GET /users/getReview
    Get PRs where the user is a reviewer
    Returns list of PR short objects
    """
    if not user_id:
        raise InvalidInputError("user_id is required")

    prs = await repo.get_prs_for_reviewer(user_id)
    logger.info("PRs retrieved for user: user_id=%s count=%d", user_id, len(prs))
    return prs


async def set_is_active(repo: Repository, user_id: str, is_active: bool) -> User:
    """
    POST /users/setIsActive
    Update user's is_active flag
    Returns the updated user
    """
    if not user_id:
        raise InvalidInputError("user_id is required")

    try:
        await repo.update_user_active(user_id, is_active)
    except NotFoundError:
        logger.warning("user not found for active update: user_id=%s", user_id)
        raise

    user = await repo.get_user(user_id)
    logger.info("user active updated: user_id=%s is_active=%s", user_id, is_active)
    return user


async def deactivate_team_users(repo: Repository, team_name: str, rng: Random) -> DeactivationResult:
    """
    POST /users/deactivateByTeam
    Deactivate every member of the team, then repair OPEN PRs they were reviewing.

    The deactivation commits on its own. Repairing PRs afterwards is best
    effort: a failure on one PR is logged and the next PR is processed, and
    a failure to list the affected PRs still reports success.
    """
    if not team_name:
        raise InvalidInputError("team_name is required")

    try:
        active_before = await repo.get_active_users_by_team(team_name)
        await repo.deactivate_users_by_team(team_name)
    except AppError as e:
        logger.error("failed to deactivate team users: team_name=%s error=%s", team_name, e)
        raise

    deactivated = frozenset(user.id for user in active_before)
    result = DeactivationResult(team_name=team_name, deactivated_users=sorted(deactivated))

    try:
        open_prs = await repo.get_open_prs_with_reviewers_from_team(team_name)
    except Exception as e:
        logger.error("failed to get open PRs for reassignment: team_name=%s error=%s", team_name, e)
        return result

    for pr in open_prs:
        try:
            repaired = await _repair_pull_request(repo, pr, deactivated, team_name, rng)
        except Exception as e:
            logger.warning("failed to reassign reviewers for PR: pr_id=%s error=%s", pr.id, e)
            continue
        if repaired:
            result.repaired_prs.append(pr.id)

    logger.info(
        "team users deactivated: team_name=%s deactivated_users=%d prs_processed=%d prs_reassigned=%d",
        team_name, len(deactivated), len(open_prs), len(result.repaired_prs),
    )
    return result


async def _repair_pull_request(
    repo: Repository,
    pr: PullRequest,
    deactivated: AbstractSet[str],
    team_name: str,
    rng: Random,
) -> bool:
    if deactivated.isdisjoint(pr.reviewers):
        return False

    active_users = await repo.get_active_users_by_team(team_name)
    updated = repair_reviewers(pr, deactivated, [user.id for user in active_users], rng)
    if updated is None:
        return False

    await repo.update_pr(updated)
    return True
