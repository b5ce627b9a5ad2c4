from datetime import datetime, timedelta, timezone

import pytest

from conftest import seed_pr, seed_team
from errors import NotFoundError, PRExistsError, TeamExistsError
from models.entities import PRStatus, PullRequest, Team, TeamMember


@pytest.mark.asyncio
async def test_entities_are_copied(repo):
    await seed_team(repo, "t", "u1", "u2")
    await seed_pr(repo, "pr", "u1", ["u2"])

    pr = await repo.get_pr("pr")
    pr.reviewers.append("u9")
    assert (await repo.get_pr("pr")).reviewers == ["u2"]

    user = await repo.get_user("u1")
    user.is_active = False
    assert (await repo.get_user("u1")).is_active is True


@pytest.mark.asyncio
async def test_duplicates_rejected(repo):
    await repo.create_team(Team(name="t", members=[TeamMember("u1", "A")]))
    with pytest.raises(TeamExistsError):
        await repo.create_team(Team(name="t", members=[]))

    await repo.create_pr(PullRequest(id="pr", title="T", author_id="u1"))
    with pytest.raises(PRExistsError):
        await repo.create_pr(PullRequest(id="pr", title="T", author_id="u1"))


@pytest.mark.asyncio
async def test_missing_entities(repo):
    with pytest.raises(NotFoundError):
        await repo.get_user("ghost")
    with pytest.raises(NotFoundError):
        await repo.update_user_active("ghost", False)
    with pytest.raises(NotFoundError):
        await repo.update_pr(PullRequest(id="ghost", title="T", author_id="a"))

    await repo.merge_pr("ghost")
    assert repo.prs == {}


@pytest.mark.asyncio
async def test_open_prs_with_team_reviewers(repo):
    await seed_team(repo, "t", "u1", "u2")
    await seed_team(repo, "ext", "a1", "o1")
    await seed_pr(repo, "pr-2", "a1", ["o1", "u2"])
    await seed_pr(repo, "pr-1", "a1", ["u1"])
    await seed_pr(repo, "pr-3", "a1", ["o1"])
    await seed_pr(repo, "pr-4", "a1", ["u1"], status=PRStatus.MERGED)

    prs = await repo.get_open_prs_with_reviewers_from_team("t")
    assert [pr.id for pr in prs] == ["pr-1", "pr-2"]


@pytest.mark.asyncio
async def test_deactivate_users_by_team(repo):
    await seed_team(repo, "t", "u1", "u2")
    await seed_team(repo, "other", "o1")

    await repo.deactivate_users_by_team("t")
    await repo.deactivate_users_by_team("missing")

    assert await repo.get_active_users_by_team("t") == []
    assert [u.id for u in await repo.get_active_users_by_team("other")] == ["o1"]


@pytest.mark.asyncio
async def test_prs_for_reviewer_ordered_by_creation(repo):
    await seed_team(repo, "t", "u1", "u2")
    await seed_pr(repo, "pr-c", "u1", ["u2"])
    await seed_pr(repo, "pr-b", "u1", ["u2"])
    await seed_pr(repo, "pr-a", "u1", ["u2"])
    await seed_pr(repo, "pr-x", "u2", ["u1"])

    created = datetime(2025, 1, 1, tzinfo=timezone.utc)
    repo.prs["pr-c"].created_at = created
    repo.prs["pr-b"].created_at = created + timedelta(minutes=5)
    repo.prs["pr-a"].created_at = created + timedelta(minutes=5)

    prs = await repo.get_prs_for_reviewer("u2")
    assert [pr.id for pr in prs] == ["pr-c", "pr-a", "pr-b"]
