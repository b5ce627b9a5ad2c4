"""PostgreSQL implementation of the repository on top of async SQLAlchemy."""
import logging
from contextlib import asynccontextmanager
from typing import List, Tuple

from sqlalchemy import any_, extract, func, literal, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from errors import InternalError, NotFoundError, PRExistsError, PRMergedError, TeamExistsError
from models import models as tables
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


logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def _to_user(row: tables.User) -> User:
    return User(id=row.id, username=row.name, team_name=row.team_name, is_active=row.is_active)


def _to_pr(row: tables.PullRequest) -> PullRequest:
    return PullRequest(
        id=row.id,
        title=row.title,
        author_id=row.author_id,
        status=PRStatus(row.status),
        reviewers=list(row.reviewers or []),
        need_more_reviewers=row.need_more_reviewers,
        created_at=row.created_at,
        merged_at=row.merged_at,
    )


def _is_unique_violation(exc: IntegrityError) -> bool:
    return getattr(exc.orig, "sqlstate", None) == UNIQUE_VIOLATION


def _upsert_user_statement(user_id: str, username: str, team_name: str, is_active: bool):
    stmt = insert(tables.User).values(
        id=user_id, name=username, team_name=team_name, is_active=is_active
    )
    return stmt.on_conflict_do_update(
        index_elements=[tables.User.id],
        set_={
            "name": stmt.excluded.name,
            "team_name": stmt.excluded.team_name,
            "is_active": stmt.excluded.is_active,
        },
    )


def _assignments_statement():
    count = func.count(tables.PullRequest.id).label("assignment_count")
    return (
        select(tables.User.id, tables.User.name, count)
        .join(tables.PullRequest, tables.User.id == any_(tables.PullRequest.reviewers))
        .where(tables.User.is_active.is_(True))
        .group_by(tables.User.id, tables.User.name)
        .order_by(count.desc(), tables.User.id)
    )


class SqlRepository(Repository):
    """Repository backed by the ``teams``, ``users`` and ``pull_requests`` tables."""

    def __init__(self, session_maker: async_sessionmaker):
        self._session_maker = session_maker

    @asynccontextmanager
    async def _transaction(self, action: str):
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as exc:
            logger.debug("database error while trying to %s: %s", action, exc)
            raise InternalError(f"failed to {action}") from exc

    async def create_team(self, team: Team) -> None:
        async with self._transaction("create team") as session:
            if await session.get(tables.Team, team.name) is not None:
                raise TeamExistsError(f"team {team.name!r} already exists")

            session.add(tables.Team(name=team.name))
            try:
                await session.flush()
            except IntegrityError as exc:
                if _is_unique_violation(exc):
                    raise TeamExistsError(f"team {team.name!r} already exists") from exc
                raise

            for member in team.members:
                await session.execute(
                    _upsert_user_statement(member.user_id, member.username, team.name, member.is_active)
                )

    async def get_team(self, name: str) -> Team:
        async with self._transaction("query team") as session:
            if await session.get(tables.Team, name) is None:
                raise NotFoundError(f"team {name!r} not found")

            result = await session.execute(
                select(tables.User).where(tables.User.team_name == name).order_by(tables.User.id)
            )
            members = [
                TeamMember(user_id=user.id, username=user.name, is_active=user.is_active)
                for user in result.scalars()
            ]

        return Team(name=name, members=members)

    async def upsert_user(self, user: User) -> None:
        async with self._transaction("upsert user") as session:
            await session.execute(
                _upsert_user_statement(user.id, user.username, user.team_name, user.is_active)
            )

    async def get_user(self, user_id: str) -> User:
        async with self._transaction("query user") as session:
            row = await session.get(tables.User, user_id)
            if row is None:
                raise NotFoundError(f"user {user_id!r} not found")
            return _to_user(row)

    async def update_user_active(self, user_id: str, is_active: bool) -> None:
        async with self._transaction("update user active") as session:
            result = await session.execute(
                update(tables.User)
                .where(tables.User.id == user_id)
                .values(is_active=is_active)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(f"user {user_id!r} not found")

    async def get_active_users_by_team(self, team_name: str) -> List[User]:
        async with self._transaction("query active users") as session:
            result = await session.execute(
                select(tables.User)
                .where(tables.User.team_name == team_name, tables.User.is_active.is_(True))
                .order_by(tables.User.id)
            )
            return [_to_user(row) for row in result.scalars()]

    async def deactivate_users_by_team(self, team_name: str) -> None:
        async with self._transaction("deactivate users") as session:
            await session.execute(
                update(tables.User)
                .where(tables.User.team_name == team_name, tables.User.is_active.is_(True))
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )

    async def create_pr(self, pr: PullRequest) -> None:
        async with self._transaction("create PR") as session:
            if await session.get(tables.PullRequest, pr.id) is not None:
                raise PRExistsError(f"PR {pr.id!r} already exists")

            session.add(tables.PullRequest(
                id=pr.id,
                title=pr.title,
                author_id=pr.author_id,
                status=PRStatus.OPEN.value,
                reviewers=list(pr.reviewers),
                need_more_reviewers=pr.need_more_reviewers,
            ))
            try:
                await session.flush()
            except IntegrityError as exc:
                if _is_unique_violation(exc):
                    raise PRExistsError(f"PR {pr.id!r} already exists") from exc
                raise

    async def get_pr(self, pr_id: str) -> PullRequest:
        async with self._transaction("query PR") as session:
            row = await session.get(tables.PullRequest, pr_id)
            if row is None:
                raise NotFoundError(f"PR {pr_id!r} not found")
            return _to_pr(row)

    async def update_pr(self, pr: PullRequest) -> None:
        async with self._transaction("update PR") as session:
            current = await session.get(tables.PullRequest, pr.id)
            if current is None:
                raise NotFoundError(f"PR {pr.id!r} not found")
            if current.status == PRStatus.MERGED.value:
                raise PRMergedError(f"PR {pr.id!r} is merged")

            # the status guard keeps a merge that lands in between from being overwritten
            result = await session.execute(
                update(tables.PullRequest)
                .where(
                    tables.PullRequest.id == pr.id,
                    tables.PullRequest.status != PRStatus.MERGED.value,
                )
                .values(reviewers=list(pr.reviewers), need_more_reviewers=pr.need_more_reviewers)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise PRMergedError(f"PR {pr.id!r} is merged")

    async def merge_pr(self, pr_id: str) -> None:
        async with self._transaction("merge PR") as session:
            await session.execute(
                update(tables.PullRequest)
                .where(
                    tables.PullRequest.id == pr_id,
                    tables.PullRequest.status != PRStatus.MERGED.value,
                )
                .values(status=PRStatus.MERGED.value, merged_at=func.now())
                .execution_options(synchronize_session=False)
            )

    async def get_prs_for_reviewer(self, user_id: str) -> List[PullRequestShort]:
        async with self._transaction("query PRs for reviewer") as session:
            result = await session.execute(
                select(tables.PullRequest)
                .where(literal(user_id) == any_(tables.PullRequest.reviewers))
                .order_by(tables.PullRequest.created_at, tables.PullRequest.id)
            )
            return [
                PullRequestShort(
                    id=row.id, title=row.title, author_id=row.author_id, status=PRStatus(row.status)
                )
                for row in result.scalars()
            ]

    async def get_open_prs_with_reviewers_from_team(self, team_name: str) -> List[PullRequest]:
        reviewer_in_team = (
            select(tables.User.id)
            .where(
                tables.User.team_name == team_name,
                tables.User.id == any_(tables.PullRequest.reviewers),
            )
            .exists()
        )
        async with self._transaction("query open PRs with team reviewers") as session:
            result = await session.execute(
                select(tables.PullRequest)
                .where(tables.PullRequest.status == PRStatus.OPEN.value, reviewer_in_team)
                .order_by(tables.PullRequest.id)
            )
            return [_to_pr(row) for row in result.scalars()]

    async def count_prs(self) -> int:
        async with self._transaction("count PRs") as session:
            total = await session.scalar(select(func.count()).select_from(tables.PullRequest))
        return int(total or 0)

    async def count_prs_by_status(self) -> Tuple[int, int]:
        async with self._transaction("count PRs by status") as session:
            result = await session.execute(
                select(
                    func.count().filter(tables.PullRequest.status == PRStatus.OPEN.value),
                    func.count().filter(tables.PullRequest.status == PRStatus.MERGED.value),
                ).select_from(tables.PullRequest)
            )
            open_count, merged_count = result.one()
        return int(open_count or 0), int(merged_count or 0)

    async def get_assignments_per_user(self) -> List[UserAssignment]:
        async with self._transaction("count assignments per user") as session:
            result = await session.execute(_assignments_statement())
            return [UserAssignment(user_id=row[0], username=row[1], count=row[2]) for row in result.all()]

    async def get_top_reviewers(self, limit: int = TOP_REVIEWERS_LIMIT) -> List[UserAssignment]:
        async with self._transaction("query top reviewers") as session:
            result = await session.execute(_assignments_statement().limit(limit))
            return [UserAssignment(user_id=row[0], username=row[1], count=row[2]) for row in result.all()]

    async def get_avg_close_time(self) -> Tuple[float, int]:
        async with self._transaction("calculate average close time") as session:
            result = await session.execute(
                select(
                    func.avg(extract("epoch", tables.PullRequest.merged_at - tables.PullRequest.created_at)),
                    func.count(),
                )
                .select_from(tables.PullRequest)
                .where(tables.PullRequest.status == PRStatus.MERGED.value)
            )
            avg_seconds, count = result.one()
        return float(avg_seconds or 0.0), int(count or 0)

    async def get_idle_users_per_team(self) -> List[TeamMetric]:
        busy_reviewers = (
            select(func.unnest(tables.PullRequest.reviewers))
            .where(tables.PullRequest.status == PRStatus.OPEN.value)
        )
        count = func.count(tables.User.id).label("count")
        async with self._transaction("query idle users per team") as session:
            result = await session.execute(
                select(tables.User.team_name, count)
                .where(tables.User.is_active.is_(True), tables.User.id.not_in(busy_reviewers))
                .group_by(tables.User.team_name)
                .order_by(count.desc(), tables.User.team_name)
            )
            return [TeamMetric(team_name=row[0], count=row[1]) for row in result.all()]

    async def get_needy_prs_per_team(self) -> List[TeamMetric]:
        count = func.count(tables.PullRequest.id).label("count")
        async with self._transaction("query needy PRs per team") as session:
            result = await session.execute(
                select(tables.User.team_name, count)
                .join(tables.PullRequest, tables.PullRequest.author_id == tables.User.id)
                .where(
                    tables.PullRequest.status == PRStatus.OPEN.value,
                    tables.PullRequest.need_more_reviewers.is_(True),
                )
                .group_by(tables.User.team_name)
                .order_by(count.desc(), tables.User.team_name)
            )
            return [TeamMetric(team_name=row[0], count=row[1]) for row in result.all()]
