import random

import pytest

from errors import NoCandidateError, NotAssignedError
from models.entities import PullRequest
from services.assignment import (
    need_more_reviewers,
    repair_reviewers,
    replace_reviewer,
    select_reviewers,
)


def make_pr(reviewers, author_id="a"):
    return PullRequest(
        id="pr",
        title="PR",
        author_id=author_id,
        reviewers=list(reviewers),
        need_more_reviewers=need_more_reviewers(reviewers),
    )


def test_need_more_reviewers():
    assert need_more_reviewers([]) is True
    assert need_more_reviewers(["u1"]) is True
    assert need_more_reviewers(["u1", "u2"]) is False


def test_select_excludes_author():
    for seed in range(50):
        picked = select_reviewers("a", ["a", "u1", "u2", "u3"], random.Random(seed))
        assert len(picked) == 2
        assert "a" not in picked
        assert len(set(picked)) == 2
        assert set(picked) <= {"u1", "u2", "u3"}


def test_select_small_pools():
    rng = random.Random(1)
    assert select_reviewers("a", [], rng) == []
    assert select_reviewers("a", ["a"], rng) == []
    assert select_reviewers("a", ["a", "u1"], rng) == ["u1"]


def test_select_ignores_duplicates_and_excluded():
    rng = random.Random(3)
    picked = select_reviewers("a", ["u1", "u1", "u2", "u3"], rng, excluded=["u3"])
    assert sorted(picked) == ["u1", "u2"]


def test_select_respects_slots():
    rng = random.Random(5)
    assert len(select_reviewers("a", ["u1", "u2", "u3"], rng, slots=1)) == 1
    assert select_reviewers("a", ["u1", "u2", "u3"], rng, slots=0) == []


def test_select_is_reproducible_with_seed():
    pool = ["u%d" % i for i in range(10)]
    first = select_reviewers("a", pool, random.Random(7))
    second = select_reviewers("a", pool, random.Random(7))
    assert first == second


def test_select_covers_every_pair():
    seen = set()
    rng = random.Random(11)
    for _ in range(300):
        seen.add(frozenset(select_reviewers("a", ["u1", "u2", "u3"], rng)))
    assert seen == {frozenset(p) for p in (("u1", "u2"), ("u1", "u3"), ("u2", "u3"))}


def test_replace_keeps_slot():
    pr = make_pr(["u1", "u2"])
    updated, new_id = replace_reviewer(pr, "u1", ["a", "u1", "u2", "u3"], random.Random(0))
    assert new_id == "u3"
    assert updated.reviewers == ["u3", "u2"]
    assert updated.need_more_reviewers is False
    assert pr.reviewers == ["u1", "u2"]


def test_replace_never_returns_excluded():
    pr = make_pr(["u1"])
    pool = ["a", "u1", "u2", "u3", "u4"]
    for seed in range(50):
        updated, new_id = replace_reviewer(pr, "u1", pool, random.Random(seed))
        assert new_id in {"u2", "u3", "u4"}
        assert updated.reviewers == [new_id]
        assert updated.need_more_reviewers is True


def test_replace_not_assigned():
    pr = make_pr(["u1"])
    with pytest.raises(NotAssignedError):
        replace_reviewer(pr, "u2", ["u2", "u3"], random.Random(0))


def test_replace_no_candidate():
    pr = make_pr(["u1", "u2"])
    with pytest.raises(NoCandidateError):
        replace_reviewer(pr, "u1", ["a", "u1", "u2"], random.Random(0))


def test_repair_untouched_pr():
    pr = make_pr(["u1", "u2"])
    assert repair_reviewers(pr, {"x"}, ["u3"], random.Random(0)) is None


def test_repair_empty_pool_drops_reviewers():
    pr = make_pr(["u1", "u2"])
    updated = repair_reviewers(pr, {"u1", "u2"}, [], random.Random(0))
    assert updated.reviewers == []
    assert updated.need_more_reviewers is True


def test_repair_keeps_order_when_dropping():
    pr = make_pr(["u1", "x1"])
    updated = repair_reviewers(pr, {"u1"}, ["a", "x1"], random.Random(0))
    assert updated.reviewers == ["x1"]
    assert updated.need_more_reviewers is True


def test_repair_replaces_each_stale_reviewer():
    pr = make_pr(["u1", "u2"])
    for seed in range(30):
        updated = repair_reviewers(pr, {"u1", "u2"}, ["a", "v1", "v2", "v3"], random.Random(seed))
        assert len(updated.reviewers) == 2
        assert len(set(updated.reviewers)) == 2
        assert set(updated.reviewers) <= {"v1", "v2", "v3"}
        assert updated.need_more_reviewers is False


def test_repair_runs_out_of_candidates():
    pr = make_pr(["u1", "u2"])
    updated = repair_reviewers(pr, {"u1", "u2"}, ["v1"], random.Random(0))
    assert updated.reviewers == ["v1"]
    assert updated.need_more_reviewers is True
