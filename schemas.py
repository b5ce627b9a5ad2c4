from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional
from datetime import datetime

from models.entities import (
    AvgCloseTime,
    PullRequest,
    PullRequestShort,
    Team,
    TeamMember as TeamMemberEntity,
    TeamMetric,
    User,
    UserAssignment,
)


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail


class MessageResponse(BaseModel):
    message: str


class TeamMember(BaseModel):
    user_id: str
    username: str
    is_active: bool = False

    def to_entity(self) -> TeamMemberEntity:
        return TeamMemberEntity(user_id=self.user_id, username=self.username, is_active=self.is_active)


class TeamRequest(BaseModel):
    team_name: str
    members: List[TeamMember]


class TeamResponse(BaseModel):
    team_name: str
    members: List[TeamMember]

    @classmethod
    def from_entity(cls, team: Team) -> "TeamResponse":
        return cls(
            team_name=team.name,
            members=[
                TeamMember(user_id=m.user_id, username=m.username, is_active=m.is_active)
                for m in team.members
            ],
        )


class TeamEnvelope(BaseModel):
    team: TeamResponse


class AddMemberRequest(BaseModel):
    team_name: str
    member: TeamMember


class UserResponse(BaseModel):
    user_id: str
    username: str
    team_name: str
    is_active: bool

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            user_id=user.id,
            username=user.username,
            team_name=user.team_name,
            is_active=user.is_active,
        )


class UserUpdateResponse(BaseModel):
    user: UserResponse


class SetIsActiveRequest(BaseModel):
    user_id: str
    is_active: bool


class PullRequestShortResponse(BaseModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str

    @classmethod
    def from_entity(cls, pr: PullRequestShort) -> "PullRequestShortResponse":
        return cls(
            pull_request_id=pr.id,
            pull_request_name=pr.title,
            author_id=pr.author_id,
            status=pr.status.value,
        )


class PullRequestResponse(BaseModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    assigned_reviewers: List[str]
    need_more_reviewers: bool
    createdAt: Optional[datetime] = None
    mergedAt: Optional[datetime] = None

    @classmethod
    def from_entity(cls, pr: PullRequest) -> "PullRequestResponse":
        return cls(
            pull_request_id=pr.id,
            pull_request_name=pr.title,
            author_id=pr.author_id,
            status=pr.status.value,
            assigned_reviewers=list(pr.reviewers),
            need_more_reviewers=pr.need_more_reviewers,
            createdAt=pr.created_at,
            mergedAt=pr.merged_at,
        )


class PullRequestCreateRequest(BaseModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str


class PullRequestEnvelope(BaseModel):
    pr: PullRequestResponse


class PullRequestMergeRequest(BaseModel):
    pull_request_id: str


class PullRequestReassignRequest(BaseModel):
    pull_request_id: str
    old_reviewer_id: str = Field(validation_alias=AliasChoices("old_reviewer_id", "old_user_id"))


class PullRequestReassignResponse(BaseModel):
    pr: PullRequestResponse
    replaced_by: str


class GetReviewResponse(BaseModel):
    user_id: str
    pull_requests: List[PullRequestShortResponse]


class DeactivateByTeamRequest(BaseModel):
    team_name: str


class DeactivateByTeamResponse(BaseModel):
    message: str
    team_name: str
    deactivated_users: List[str]
    repaired_prs: List[str]


class PrsTotalResponse(BaseModel):
    total_prs: int


class PrsStatusResponse(BaseModel):
    open_prs: int
    merged_prs: int


class UserAssignmentResponse(BaseModel):
    user_id: str
    username: str
    assignment_count: int

    @classmethod
    def from_entity(cls, assignment: UserAssignment) -> "UserAssignmentResponse":
        return cls(
            user_id=assignment.user_id,
            username=assignment.username,
            assignment_count=assignment.count,
        )


class UserAssignmentsResponse(BaseModel):
    user_assignments: List[UserAssignmentResponse]


class TopReviewersResponse(BaseModel):
    top_reviewers: List[UserAssignmentResponse]


class CloseTimeBreakdownResponse(BaseModel):
    days: int
    hours: int
    minutes: int
    seconds: int


class AvgCloseTimeResponse(BaseModel):
    average_seconds: float
    breakdown: CloseTimeBreakdownResponse
    merged_prs_count: int

    @classmethod
    def from_entity(cls, detail: AvgCloseTime) -> "AvgCloseTimeResponse":
        return cls(
            average_seconds=detail.average_seconds,
            breakdown=CloseTimeBreakdownResponse(
                days=detail.breakdown.days,
                hours=detail.breakdown.hours,
                minutes=detail.breakdown.minutes,
                seconds=detail.breakdown.seconds,
            ),
            merged_prs_count=detail.merged_prs_count,
        )


class TeamMetricResponse(BaseModel):
    team_name: str
    count: int

    @classmethod
    def from_entity(cls, metric: TeamMetric) -> "TeamMetricResponse":
        return cls(team_name=metric.team_name, count=metric.count)


class TeamMetricsResponse(BaseModel):
    team_metrics: List[TeamMetricResponse]


class HealthResponse(BaseModel):
    status: str
