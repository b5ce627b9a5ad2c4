"""Persistence contract for teams, users and pull requests."""
from abc import ABC, abstractmethod
from typing import List, Tuple

from models.entities import PullRequest, PullRequestShort, Team, TeamMetric, User, UserAssignment


TOP_REVIEWERS_LIMIT = 5


class Repository(ABC):
    """Abstract base class for the service's durable state.

    Every method is atomic with respect to the store. Lookups of missing
    rows raise ``NotFoundError``; store failures raise ``InternalError``.
    """

    @abstractmethod
    async def create_team(self, team: Team) -> None:
        """
        Insert a team and upsert all of its members in one transaction.

        Raises:
            TeamExistsError: If a team with this name already exists
        """
        pass

    @abstractmethod
    async def get_team(self, name: str) -> Team:
        """Return the team with its members ordered by user id."""
        pass

    @abstractmethod
    async def upsert_user(self, user: User) -> None:
        """Insert the user or overwrite its username, team and active flag."""
        pass

    @abstractmethod
    async def get_user(self, user_id: str) -> User:
        pass

    @abstractmethod
    async def update_user_active(self, user_id: str, is_active: bool) -> None:
        """
        Set the active flag of one user.

        Raises:
            NotFoundError: If no row was changed
        """
        pass

    @abstractmethod
    async def get_active_users_by_team(self, team_name: str) -> List[User]:
        """Return active members of the team ordered by user id (possibly empty)."""
        pass

    @abstractmethod
    async def deactivate_users_by_team(self, team_name: str) -> None:
        """Mark every member of the team inactive. Idempotent."""
        pass

    @abstractmethod
    async def create_pr(self, pr: PullRequest) -> None:
        """
        Insert an OPEN pull request stamped with the current time.

        Raises:
            PRExistsError: If the id is already taken
        """
        pass

    @abstractmethod
    async def get_pr(self, pr_id: str) -> PullRequest:
        pass

    @abstractmethod
    async def update_pr(self, pr: PullRequest) -> None:
        """
        Rewrite the reviewer list and the need-more-reviewers flag.

        Status, title, author and timestamps are left untouched.

        Raises:
            NotFoundError: If the PR does not exist
            PRMergedError: If the stored PR is already merged
        """
        pass

    @abstractmethod
    async def merge_pr(self, pr_id: str) -> None:
        """Mark the PR merged now unless it is missing or already merged."""
        pass

    @abstractmethod
    async def get_prs_for_reviewer(self, user_id: str) -> List[PullRequestShort]:
        pass

    @abstractmethod
    async def get_open_prs_with_reviewers_from_team(self, team_name: str) -> List[PullRequest]:
        """Return OPEN PRs where at least one reviewer belongs to the team."""
        pass

    @abstractmethod
    async def count_prs(self) -> int:
        pass

    @abstractmethod
    async def count_prs_by_status(self) -> Tuple[int, int]:
        """Return ``(open, merged)`` counts."""
        pass

    @abstractmethod
    async def get_assignments_per_user(self) -> List[UserAssignment]:
        """
        Count PR assignments per active user.

        Users without assignments are omitted. Ordered by count descending,
        then user id ascending.
        """
        pass

    @abstractmethod
    async def get_top_reviewers(self, limit: int = TOP_REVIEWERS_LIMIT) -> List[UserAssignment]:
        pass

    @abstractmethod
    async def get_avg_close_time(self) -> Tuple[float, int]:
        """Return mean seconds between creation and merge, and the merged count."""
        pass

    @abstractmethod
    async def get_idle_users_per_team(self) -> List[TeamMetric]:
        """Count active users that review no OPEN PR, grouped by team."""
        pass

    @abstractmethod
    async def get_needy_prs_per_team(self) -> List[TeamMetric]:
        """Count OPEN PRs that need more reviewers, grouped by the author's team."""
        pass
