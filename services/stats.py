import logging
from typing import List, Tuple

from models.entities import AvgCloseTime, CloseTimeBreakdown, TeamMetric, UserAssignment
from repository.base import Repository


logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


def split_duration(average_seconds: float) -> CloseTimeBreakdown:
    """Break a duration in seconds into whole days, hours, minutes and seconds."""
    days = int(average_seconds // SECONDS_PER_DAY)
    remainder = average_seconds - days * SECONDS_PER_DAY
    hours = int(remainder // SECONDS_PER_HOUR)
    remainder -= hours * SECONDS_PER_HOUR
    minutes = int(remainder // SECONDS_PER_MINUTE)
    seconds = int(remainder - minutes * SECONDS_PER_MINUTE)
    return CloseTimeBreakdown(days=days, hours=hours, minutes=minutes, seconds=seconds)


async def get_total_prs(repo: Repository) -> int:
    total = await repo.count_prs()
    logger.info("total PRs fetched: total=%d", total)
    return total


async def get_prs_by_status(repo: Repository) -> Tuple[int, int]:
    open_count, merged_count = await repo.count_prs_by_status()
    logger.info("PRs by status fetched: open=%d merged=%d", open_count, merged_count)
    return open_count, merged_count


async def get_assignments_per_user(repo: Repository) -> List[UserAssignment]:
    assignments = await repo.get_assignments_per_user()
    logger.info("assignments per user fetched: total_users=%d", len(assignments))
    return assignments


async def get_top_reviewers(repo: Repository) -> List[UserAssignment]:
    top = await repo.get_top_reviewers()
    logger.info("top reviewers fetched: top_count=%d", len(top))
    return top


async def get_avg_close_time(repo: Repository) -> AvgCloseTime:
    """Average time from creation to merge, with a days/hours/minutes/seconds breakdown."""
    average_seconds, count = await repo.get_avg_close_time()

    breakdown = split_duration(average_seconds) if count > 0 else CloseTimeBreakdown()
    detail = AvgCloseTime(
        average_seconds=average_seconds,
        breakdown=breakdown,
        merged_prs_count=count,
    )
    logger.info("avg close time fetched: seconds=%.3f merged_count=%d", average_seconds, count)
    return detail


async def get_idle_users_per_team(repo: Repository) -> List[TeamMetric]:
    metrics = await repo.get_idle_users_per_team()
    logger.info("idle users per team fetched: teams_count=%d", len(metrics))
    return metrics


async def get_needy_prs_per_team(repo: Repository) -> List[TeamMetric]:
    metrics = await repo.get_needy_prs_per_team()
    logger.info("needy PRs per team fetched: teams_count=%d", len(metrics))
    return metrics
