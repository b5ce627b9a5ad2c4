"""In-memory repository used by tests and local runs without a database."""
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Tuple

from errors import NotFoundError, PRExistsError, PRMergedError, TeamExistsError
from models.entities import (
    PRStatus,
    PullRequest,
    PullRequestShort,
    Team,
    TeamMember,
    TeamMetric,
    User,
    UserAssignment,
)
from repository.base import Repository, TOP_REVIEWERS_LIMIT


def _copy_pr(pr: PullRequest) -> PullRequest:
    return replace(pr, reviewers=list(pr.reviewers))


def _sorted_metrics(counter: Counter) -> List[TeamMetric]:
    ordered = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return [TeamMetric(team_name=name, count=count) for name, count in ordered]


class InMemoryRepository(Repository):
    """Dict-backed repository.

    Each method runs without awaiting anything, so under asyncio every call
    is atomic just like a single statement against the real store. Entities
    are copied on the way in and out so callers never share state with it.
    """

    def __init__(self):
        self.teams: Dict[str, Team] = {}
        self.users: Dict[str, User] = {}
        self.prs: Dict[str, PullRequest] = {}

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def create_team(self, team: Team) -> None:
        if team.name in self.teams:
            raise TeamExistsError(f"team {team.name!r} already exists")

        self.teams[team.name] = Team(name=team.name)
        for member in team.members:
            self.users[member.user_id] = User(
                id=member.user_id,
                username=member.username,
                team_name=team.name,
                is_active=member.is_active,
            )

    async def get_team(self, name: str) -> Team:
        if name not in self.teams:
            raise NotFoundError(f"team {name!r} not found")

        members = [
            TeamMember(user_id=user.id, username=user.username, is_active=user.is_active)
            for user in sorted(self.users.values(), key=lambda u: u.id)
            if user.team_name == name
        ]
        return Team(name=name, members=members)

    async def upsert_user(self, user: User) -> None:
        self.users[user.id] = replace(user)

    async def get_user(self, user_id: str) -> User:
        if user_id not in self.users:
            raise NotFoundError(f"user {user_id!r} not found")
        return replace(self.users[user_id])

    async def update_user_active(self, user_id: str, is_active: bool) -> None:
        if user_id not in self.users:
            raise NotFoundError(f"user {user_id!r} not found")
        self.users[user_id].is_active = is_active

    async def get_active_users_by_team(self, team_name: str) -> List[User]:
        return [
            replace(user)
            for user in sorted(self.users.values(), key=lambda u: u.id)
            if user.team_name == team_name and user.is_active
        ]

    async def deactivate_users_by_team(self, team_name: str) -> None:
        for user in self.users.values():
            if user.team_name == team_name:
                user.is_active = False

    async def create_pr(self, pr: PullRequest) -> None:
        if pr.id in self.prs:
            raise PRExistsError(f"PR {pr.id!r} already exists")

        self.prs[pr.id] = PullRequest(
            id=pr.id,
            title=pr.title,
            author_id=pr.author_id,
            status=PRStatus.OPEN,
            reviewers=list(pr.reviewers),
            need_more_reviewers=pr.need_more_reviewers,
            created_at=self._now(),
        )

    async def get_pr(self, pr_id: str) -> PullRequest:
        if pr_id not in self.prs:
            raise NotFoundError(f"PR {pr_id!r} not found")
        return _copy_pr(self.prs[pr_id])

    async def update_pr(self, pr: PullRequest) -> None:
        stored = self.prs.get(pr.id)
        if stored is None:
            raise NotFoundError(f"PR {pr.id!r} not found")
        if stored.is_merged:
            raise PRMergedError(f"PR {pr.id!r} is merged")

        stored.reviewers = list(pr.reviewers)
        stored.need_more_reviewers = pr.need_more_reviewers

    async def merge_pr(self, pr_id: str) -> None:
        stored = self.prs.get(pr_id)
        if stored is None or stored.is_merged:
            return
        stored.status = PRStatus.MERGED
        stored.merged_at = self._now()

    async def get_prs_for_reviewer(self, user_id: str) -> List[PullRequestShort]:
        return [
            PullRequestShort(id=pr.id, title=pr.title, author_id=pr.author_id, status=pr.status)
            for pr in sorted(self.prs.values(), key=lambda p: (p.created_at, p.id))
            if user_id in pr.reviewers
        ]

    async def get_open_prs_with_reviewers_from_team(self, team_name: str) -> List[PullRequest]:
        result = []
        for pr in sorted(self.prs.values(), key=lambda p: p.id):
            if pr.is_merged:
                continue
            if any(
                reviewer in self.users and self.users[reviewer].team_name == team_name
                for reviewer in pr.reviewers
            ):
                result.append(_copy_pr(pr))
        return result

    async def count_prs(self) -> int:
        return len(self.prs)

    async def count_prs_by_status(self) -> Tuple[int, int]:
        merged = sum(1 for pr in self.prs.values() if pr.is_merged)
        return len(self.prs) - merged, merged

    async def get_assignments_per_user(self) -> List[UserAssignment]:
        counts = Counter(reviewer for pr in self.prs.values() for reviewer in pr.reviewers)
        assignments = [
            UserAssignment(user_id=user.id, username=user.username, count=counts[user.id])
            for user in self.users.values()
            if user.is_active and counts[user.id] > 0
        ]
        assignments.sort(key=lambda a: (-a.count, a.user_id))
        return assignments

    async def get_top_reviewers(self, limit: int = TOP_REVIEWERS_LIMIT) -> List[UserAssignment]:
        return (await self.get_assignments_per_user())[:limit]

    async def get_avg_close_time(self) -> Tuple[float, int]:
        durations = [
            (pr.merged_at - pr.created_at).total_seconds()
            for pr in self.prs.values()
            if pr.is_merged
        ]
        if not durations:
            return 0.0, 0
        return sum(durations) / len(durations), len(durations)

    async def get_idle_users_per_team(self) -> List[TeamMetric]:
        busy = {reviewer for pr in self.prs.values() if not pr.is_merged for reviewer in pr.reviewers}
        idle = Counter(
            user.team_name
            for user in self.users.values()
            if user.is_active and user.id not in busy
        )
        return _sorted_metrics(idle)

    async def get_needy_prs_per_team(self) -> List[TeamMetric]:
        needy = Counter(
            self.users[pr.author_id].team_name
            for pr in self.prs.values()
            if not pr.is_merged and pr.need_more_reviewers and pr.author_id in self.users
        )
        return _sorted_metrics(needy)
