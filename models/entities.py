"""Domain entities passed between the repository, the engine and the services."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


MAX_REVIEWERS = 2


class PRStatus(str, Enum):
    OPEN = "OPEN"
    MERGED = "MERGED"


@dataclass
class TeamMember:
    user_id: str
    username: str
    is_active: bool = True


@dataclass
class Team:
    name: str
    members: List[TeamMember] = field(default_factory=list)


@dataclass
class User:
    id: str
    username: str
    team_name: str
    is_active: bool = True


@dataclass
class PullRequest:
    id: str
    title: str
    author_id: str
    status: PRStatus = PRStatus.OPEN
    reviewers: List[str] = field(default_factory=list)
    need_more_reviewers: bool = True
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None

    @property
    def is_merged(self) -> bool:
        return self.status == PRStatus.MERGED


@dataclass
class PullRequestShort:
    id: str
    title: str
    author_id: str
    status: PRStatus


@dataclass
class UserAssignment:
    user_id: str
    username: str
    count: int


@dataclass
class TeamMetric:
    team_name: str
    count: int


@dataclass
class CloseTimeBreakdown:
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0


@dataclass
class AvgCloseTime:
    average_seconds: float
    breakdown: CloseTimeBreakdown
    merged_prs_count: int


@dataclass
class DeactivationResult:
    team_name: str
    deactivated_users: List[str] = field(default_factory=list)
    repaired_prs: List[str] = field(default_factory=list)
