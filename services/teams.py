import logging
from typing import List

from errors import InvalidInputError, NotFoundError, TeamExistsError
from models.entities import Team, TeamMember, User
from repository.base import Repository


logger = logging.getLogger(__name__)


def _validate_member(member: TeamMember) -> None:
    if not member.user_id or not member.username:
        raise InvalidInputError("member user_id and username are required")


async def add_team(repo: Repository, team_name: str, members: List[TeamMember]) -> Team:
    """
    POST /team/add
    Create a team and create or update every listed member in one transaction
    Returns the stored team
    """
    if not team_name or not members:
        raise InvalidInputError("team_name and at least one member are required")
    for member in members:
        _validate_member(member)

    try:
        await repo.create_team(Team(name=team_name, members=list(members)))
    except TeamExistsError:
        logger.info("team already exists: team_name=%s", team_name)
        raise
    except Exception as e:
        logger.error("failed to create team: team_name=%s error=%s", team_name, e)
        raise

    team = await repo.get_team(team_name)
    logger.info("team created: team_name=%s members_count=%d", team_name, len(team.members))
    return team


async def get_team(repo: Repository, team_name: str) -> Team:
    """
    GET /team/get
    Returns the team with all of its members
    """
    if not team_name:
        raise InvalidInputError("team_name is required")

    try:
        team = await repo.get_team(team_name)
    except NotFoundError:
        logger.warning("team not found: team_name=%s", team_name)
        raise

    logger.info("team retrieved: team_name=%s members_count=%d", team_name, len(team.members))
    return team


async def add_team_member(repo: Repository, team_name: str, member: TeamMember) -> None:
    """
    POST /team/add-member
    Create or update a user as a member of an existing team.
    A user that belongs to another team is moved to this one.
    """
    if not team_name:
        raise InvalidInputError("team_name is required")
    _validate_member(member)

    try:
        await repo.get_team(team_name)
    except NotFoundError:
        logger.warning("team not found for add member: team_name=%s", team_name)
        raise

    await repo.upsert_user(User(
        id=member.user_id,
        username=member.username,
        team_name=team_name,
        is_active=member.is_active,
    ))
    logger.info("member added to team: team_name=%s user_id=%s", team_name, member.user_id)
