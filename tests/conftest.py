import random

import pytest
from httpx import ASGITransport, AsyncClient

from main import create_app
from models.entities import PRStatus, PullRequest, Team, TeamMember
from repository.memory import InMemoryRepository
from services.assignment import need_more_reviewers


@pytest.fixture(scope="function")
def repo():
    """Fresh in-memory repository for each test."""
    return InMemoryRepository()


@pytest.fixture(scope="function")
def rng():
    return random.Random(42)


@pytest.fixture(scope="function")
async def client(repo, rng):
    """Create a test client bound to the in-memory repository."""
    app = create_app(repository=repo, rng=rng)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def seed_team(repo, team_name, *user_ids, is_active=True):
    members = [TeamMember(user_id=uid, username=uid.upper(), is_active=is_active) for uid in user_ids]
    await repo.create_team(Team(name=team_name, members=members))


async def seed_pr(repo, pr_id, author_id, reviewers, status=PRStatus.OPEN):
    """Store a PR with a fixed reviewer list, bypassing auto-assignment."""
    await repo.create_pr(PullRequest(
        id=pr_id,
        title=pr_id.upper(),
        author_id=author_id,
        reviewers=list(reviewers),
        need_more_reviewers=need_more_reviewers(reviewers),
    ))
    if status == PRStatus.MERGED:
        await repo.merge_pr(pr_id)
