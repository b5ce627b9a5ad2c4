"""Reviewer assignment rules.

Pure functions over entities and candidate id lists. The only source of
non-determinism is the ``random.Random`` passed in by the caller, so tests
get reproducible picks by seeding it.

Candidate pools are user ids; duplicates in a pool are ignored. The author
of a PR is never picked, and a PR never holds more than ``MAX_REVIEWERS``
distinct reviewers.
"""
from dataclasses import replace
from random import Random
from typing import Collection, Iterable, List, Optional, Tuple

from errors import NoCandidateError, NotAssignedError
from models.entities import MAX_REVIEWERS, PullRequest


def need_more_reviewers(reviewers: Collection[str]) -> bool:
    return len(reviewers) < MAX_REVIEWERS


def _eligible(candidate_pool: Iterable[str], exclude: Collection[str]) -> List[str]:
    return [candidate for candidate in dict.fromkeys(candidate_pool) if candidate not in exclude]


def select_reviewers(
    author_id: str,
    candidate_pool: Iterable[str],
    rng: Random,
    slots: int = MAX_REVIEWERS,
    excluded: Iterable[str] = (),
) -> List[str]:
    """Pick up to ``slots`` reviewers uniformly at random.

    The author and every id in ``excluded`` are filtered out before the
    shuffle. Fewer than ``slots`` ids come back when the pool is too small.
    """
    candidates = _eligible(candidate_pool, {author_id, *excluded})
    rng.shuffle(candidates)
    return candidates[:min(len(candidates), slots)]


def replace_reviewer(
    pr: PullRequest,
    old_reviewer_id: str,
    candidate_pool: Iterable[str],
    rng: Random,
) -> Tuple[PullRequest, str]:
    """Swap one reviewer for a random eligible candidate.

    The new reviewer takes the slot of the old one, so the position of the
    other reviewer is preserved. The old reviewer stays excluded and can not
    be picked again.

    Returns:
        The updated copy of ``pr`` and the id of the new reviewer

    Raises:
        NotAssignedError: If ``old_reviewer_id`` does not review this PR
        NoCandidateError: If nobody in the pool can take the slot
    """
    if old_reviewer_id not in pr.reviewers:
        raise NotAssignedError(f"{old_reviewer_id!r} is not a reviewer of PR {pr.id!r}")

    candidates = _eligible(candidate_pool, {pr.author_id, *pr.reviewers})
    if not candidates:
        raise NoCandidateError(f"no replacement for {old_reviewer_id!r} on PR {pr.id!r}")

    new_reviewer_id = rng.choice(candidates)
    reviewers = list(pr.reviewers)
    reviewers[reviewers.index(old_reviewer_id)] = new_reviewer_id
    updated = replace(pr, reviewers=reviewers, need_more_reviewers=need_more_reviewers(reviewers))
    return updated, new_reviewer_id


def repair_reviewers(
    pr: PullRequest,
    deactivated: Collection[str],
    candidate_pool: Iterable[str],
    rng: Random,
) -> Optional[PullRequest]:
    """Replace or drop reviewers that were just deactivated.

    When no candidate is left after excluding the author and the current
    reviewers, the deactivated reviewers are simply removed. Otherwise each
    of them, in list order, gets the first eligible id of a freshly shuffled
    pool, or is removed once the pool runs dry.

    Returns:
        The updated copy of ``pr``, or None when none of its reviewers
        were deactivated
    """
    stale = [reviewer for reviewer in pr.reviewers if reviewer in deactivated]
    if not stale:
        return None

    exclude = {pr.author_id, *pr.reviewers}
    candidates = _eligible(candidate_pool, exclude)
    reviewers = list(pr.reviewers)

    if not candidates:
        reviewers = [reviewer for reviewer in reviewers if reviewer not in deactivated]
    else:
        for old_reviewer_id in stale:
            rng.shuffle(candidates)
            new_reviewer_id = next((c for c in candidates if c not in exclude), None)
            if new_reviewer_id is None:
                reviewers.remove(old_reviewer_id)
            else:
                reviewers[reviewers.index(old_reviewer_id)] = new_reviewer_id
                exclude.add(new_reviewer_id)

    return replace(pr, reviewers=reviewers, need_more_reviewers=need_more_reviewers(reviewers))
