"""
Compatibility filter.

Maps a subject and a population of users to the users the subject may be
shown as dating candidates. Pure and deterministic: no I/O, output sorted
by user ID, so pool refreshes built on it are idempotent.
"""

import logging
from typing import Iterable, List, Optional

from swipematch.models.user import Gender, Sexuality, UserProfile

logger = logging.getLogger(__name__)

# Orientations that accept candidates of any gender
OPEN_ORIENTATIONS = {Sexuality.BISEXUAL.value, Sexuality.PANSEXUAL.value}


def _orientation(sexuality: Optional[str]) -> Optional[str]:
    # "lesbian" is stored by the onboarding screen for gay women
    if sexuality == Sexuality.LESBIAN.value:
        return Sexuality.GAY.value
    return sexuality


def is_compatible(subject: UserProfile, candidate: UserProfile) -> bool:
    """Whether ``candidate``'s declared gender and orientation suit ``subject``"""
    gender = subject.gender
    sexuality = _orientation(subject.sexuality)

    # Unknown inputs on the subject side match everyone
    if not gender or not sexuality:
        return True
    if sexuality in OPEN_ORIENTATIONS:
        return True

    candidate_gender = candidate.gender
    candidate_sexuality = _orientation(candidate.sexuality)

    if sexuality == Sexuality.STRAIGHT.value:
        if gender == Gender.MALE.value:
            return candidate_gender == Gender.FEMALE.value and candidate_sexuality != Sexuality.GAY.value
        if gender == Gender.FEMALE.value:
            return candidate_gender == Gender.MALE.value and candidate_sexuality != Sexuality.GAY.value

    if sexuality == Sexuality.GAY.value:
        if gender == Gender.MALE.value:
            return candidate_gender == Gender.MALE.value and candidate_sexuality != Sexuality.STRAIGHT.value
        if gender == Gender.FEMALE.value:
            return candidate_gender == Gender.FEMALE.value and candidate_sexuality != Sexuality.STRAIGHT.value

    # Outside the rule table: only candidates without a declared orientation
    return candidate_sexuality is None


def eligible_candidates(
    subject: UserProfile,
    all_users: Iterable[UserProfile],
    exclude_ids: Iterable[str] = (),
) -> List[UserProfile]:
    """Daters compatible with ``subject``, excluding the subject and ``exclude_ids``"""
    excluded = set(exclude_ids)
    excluded.add(subject.id)

    candidates = []
    for candidate in all_users:
        if candidate.id in excluded:
            continue
        if not candidate.is_dater:
            continue
        if not is_compatible(subject, candidate):
            logger.debug("Candidate %s not compatible with %s", candidate.id, subject.id)
            continue
        candidates.append(candidate)
        excluded.add(candidate.id)

    candidates.sort(key=lambda user: user.id)
    return candidates
