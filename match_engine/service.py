# service.py
import logging
from typing import Any, List, Optional, Sequence

from . import config
from .aggregator import DEFAULT_WEIGHTS, ScoringWeights
from .db import MongoDBManager
from .exceptions import CandidateNotFound, JobNotFound, ScoringError
from .finder import MatchFinder
from .models import Match, MatchDetails, ScoreBreakdown, ScoredMatch
from .persister import MatchPersister

logger = logging.getLogger(__name__)


class JobMatchingService:
    """The engine's three operations over one store."""

    def __init__(
        self,
        db: Optional[MongoDBManager] = None,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        persist_workers: int = config.MATCH_PERSIST_WORKERS,
        finder: Optional[MatchFinder] = None,
    ) -> None:
        self.db = db or MongoDBManager()
        self.finder = finder or MatchFinder(self.db, weights=weights)
        self.persister = MatchPersister(self.db, max_workers=persist_workers)

    def compute_matches_for_candidate(self, candidate_id: Any) -> List[ScoredMatch]:
        return self.finder.find_matches_for_candidate(candidate_id)

    def compute_matches_for_job(self, job_id: Any) -> List[ScoredMatch]:
        return self.finder.find_matches_for_job(job_id)

    def persist_matches(self, scored: Sequence[ScoredMatch]) -> List[Match]:
        return self.persister.persist_matches(scored)

    def run_for_candidate(self, candidate_id: Any) -> List[Match]:
        scored = self.compute_matches_for_candidate(candidate_id)
        # The anchor may have been deleted while the pool was scored
        if self.db.get_candidate(candidate_id) is None:
            raise CandidateNotFound(candidate_id)
        saved = self.persist_matches(scored)
        logger.info("Matching for candidate %s saved %d matches", candidate_id, len(saved))
        return saved

    def run_for_job(self, job_id: Any) -> List[Match]:
        scored = self.compute_matches_for_job(job_id)
        if self.db.get_job(job_id) is None:
            raise JobNotFound(job_id)
        saved = self.persist_matches(scored)
        logger.info("Matching for job %s saved %d matches", job_id, len(saved))
        return saved

    def create_manual_match(self, candidate_id: Any, job_id: Any) -> Match:
        """Create the match for one pair on a recruiter's request.

        An existing match for the pair is returned untouched. Otherwise the
        pair is scored; a pair that cannot be scored gets the default score.
        """
        existing = self.db.get_pair_match(candidate_id, job_id)
        if existing is not None:
            return Match.from_document(existing)

        try:
            scored = self.finder.score_pair(candidate_id, job_id)
        except ScoringError as exc:
            logger.warning(
                "Could not score pair %s/%s, using default score: %s", candidate_id, job_id, exc
            )
            candidate = self.db.get_candidate(candidate_id)
            job = self.db.get_job(job_id)
            scored = ScoredMatch(
                candidate_id=candidate["_id"],
                job_id=job["_id"],
                match_score=config.MANUAL_MATCH_DEFAULT_SCORE,
                score_breakdown=ScoreBreakdown(),
                match_details=MatchDetails(),
            )

        doc = self.db.insert_match_if_absent(scored)
        logger.info("Manual match for candidate %s and job %s: %s", candidate_id, job_id, doc["_id"])
        return Match.from_document(doc)
