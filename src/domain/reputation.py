"""
Reputation policy - Pure folds over stored reviews.

A domain's reputation score is always recomputed from every review stored
for it; there is no incremental update path that could drift from the fold.

Two variants exist and are not interchangeable:
- UNWEIGHTED: score = sum(rating)
- WEIGHTED:   score = sum(rating * max(weight, 1))

The weight is the reviewer's own reputation snapshot taken when the review
was submitted. The floor of 1 keeps a zero- or negative-weight reviewer
from nullifying or flipping the sign of their rating.

Scores and weights saturate at the signed 64-bit range so that every
storage backend can hold them; weighted reputation compounds along chains
of reviewers and would otherwise outgrow a BIGINT column.
"""

from collections.abc import Iterable

from .ports import DomainRecord, ReputationMode, Review

MIN_SCORE = -(2**63)
MAX_SCORE = 2**63 - 1


def clamp_score(value: int) -> int:
    return max(MIN_SCORE, min(value, MAX_SCORE))


def effective_weight(weight: int) -> int:
    return max(weight, 1)


def fold_reputation(reviews: Iterable[Review], mode: ReputationMode) -> int:
    """Compute a reputation score from reviews under the given mode."""
    if mode == ReputationMode.UNWEIGHTED:
        return clamp_score(sum(review.rating for review in reviews))
    return clamp_score(sum(review.rating * effective_weight(review.weight) for review in reviews))


def reviewer_weight(owned_domains: Iterable[DomainRecord]) -> int:
    """
    Reviewer weight: total reputation of the domains the reviewer owns.

    Identities owning no domains weigh 0, which the fold floors to 1.
    """
    return clamp_score(sum(record.reputation_score for record in owned_domains))
