"""
Review & reputation engine - Peer reviews and score recomputation.

Each identity may review a name once. Every accepted review triggers a
full recomputation of the name's reputation score, written in the same
unit of work as the review itself.
"""

from dataclasses import dataclass, replace

from .context import CallContext
from .exceptions import AlreadyReviewed, RatingOutOfBounds
from .ports import DomainRecord, RegistryStore, ReputationMode, Review
from .registry import DomainRegistry
from .reputation import fold_reputation, reviewer_weight
from .validation import MAX_COMMENT_BYTES, MAX_RATING, MIN_RATING, require_text


@dataclass
class ReviewEngine:
    domains: DomainRegistry
    mode: ReputationMode = ReputationMode.WEIGHTED

    def submit_review(self, ctx: CallContext, name: str, rating: int, comment: str) -> Review:
        """
        Store the caller's review of name and recompute its reputation.

        The rating bound is checked before anything else, so an
        out-of-range rating is rejected whether or not the name exists.

        Raises:
            RatingOutOfBounds: rating outside [-5, 5]
            InvalidData: comment longer than 256 bytes
            NotFound: name is not registered
            AlreadyReviewed: caller already reviewed name
        """
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise RatingOutOfBounds("rating must be an integer")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise RatingOutOfBounds(f"rating {rating} outside [{MIN_RATING}, {MAX_RATING}]")
        require_text(comment, "comment", MAX_COMMENT_BYTES, allow_empty=True)

        record = self.domains.require_domain(ctx.store, name)
        if ctx.store.get_review(record.name, ctx.caller) is not None:
            raise AlreadyReviewed(record.name)

        review = Review(
            name=record.name,
            reviewer=ctx.caller,
            rating=rating,
            comment=comment,
            reviewed_at=ctx.height,
            weight=reviewer_weight(ctx.store.list_domains(ctx.caller)),
        )
        ctx.store.insert_review(review)
        record = self._apply_score(ctx.store, record, ctx.height)

        ctx.emit(
            "ReviewSubmitted",
            domain=record.name,
            reviewer=ctx.caller,
            rating=rating,
            reputation_score=record.reputation_score,
        )
        return review

    def list_reviews(self, store: RegistryStore, name: str) -> list[Review]:
        record = self.domains.require_domain(store, name)
        return store.list_reviews(record.name)

    def compute_reputation(self, store: RegistryStore, name: str) -> int:
        """Fold every stored review for name. Reads only."""
        record = self.domains.require_domain(store, name)
        return fold_reputation(store.list_reviews(record.name), self.mode)

    def _apply_score(self, store: RegistryStore, record: DomainRecord, height: int) -> DomainRecord:
        score = fold_reputation(store.list_reviews(record.name), self.mode)
        record = replace(record, reputation_score=score, updated_at=height)
        store.update_domain(record)
        return record
