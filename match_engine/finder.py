# finder.py
import logging
from typing import Any, Callable, Dict, List, Tuple

from . import config
from .aggregator import DEFAULT_WEIGHTS, ScoringWeights, compute_match_score
from .db import MongoDBManager
from .exceptions import CandidateNotFound, JobNotFound, PairSkipped, ScoringError
from .models import Candidate, Job, ScoredMatch

logger = logging.getLogger(__name__)


class MatchFinder:
    """Scores one anchor candidate or job against a bounded pool of the other side."""

    def __init__(
        self,
        db: MongoDBManager,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        min_score: int = config.MIN_MATCH_SCORE,
        job_scan_limit: int = config.JOB_SCAN_LIMIT,
        candidate_scan_limit: int = config.CANDIDATE_SCAN_LIMIT,
        candidate_result_limit: int = config.CANDIDATE_RESULT_LIMIT,
        job_result_limit: int = config.JOB_RESULT_LIMIT,
    ) -> None:
        self.db = db
        self.weights = weights
        self.min_score = min_score
        self.job_scan_limit = job_scan_limit
        self.candidate_scan_limit = candidate_scan_limit
        self.candidate_result_limit = candidate_result_limit
        self.job_result_limit = job_result_limit

    # ---------- Public API ----------
    def find_matches_for_candidate(self, candidate_id: Any) -> List[ScoredMatch]:
        doc = self.db.get_candidate(candidate_id)
        if not doc:
            raise CandidateNotFound(candidate_id)
        candidate = Candidate.from_document(doc)

        jobs = self.db.list_active_jobs(self.job_scan_limit)
        logger.info("Scoring candidate %s against %d active jobs", candidate_id, len(jobs))

        return self._collect(
            jobs,
            lambda job_doc: compute_match_score(
                candidate, Job.from_document(job_doc), self.weights
            ),
            pair_ids=lambda job_doc: (candidate.candidate_id, job_doc.get("_id")),
            limit=self.candidate_result_limit,
        )

    def find_matches_for_job(self, job_id: Any) -> List[ScoredMatch]:
        doc = self.db.get_job(job_id)
        if not doc:
            raise JobNotFound(job_id)
        job = Job.from_document(doc)

        candidates = self.db.list_active_candidates(self.candidate_scan_limit)
        logger.info("Scoring job %s against %d active candidates", job_id, len(candidates))

        return self._collect(
            candidates,
            lambda candidate_doc: compute_match_score(
                Candidate.from_document(candidate_doc), job, self.weights
            ),
            pair_ids=lambda candidate_doc: (candidate_doc.get("_id"), job.job_id),
            limit=self.job_result_limit,
        )

    def score_pair(self, candidate_id: Any, job_id: Any) -> ScoredMatch:
        """Score one pair regardless of threshold; raises ScoringError on a malformed document."""
        candidate_doc = self.db.get_candidate(candidate_id)
        if not candidate_doc:
            raise CandidateNotFound(candidate_id)
        job_doc = self.db.get_job(job_id)
        if not job_doc:
            raise JobNotFound(job_id)

        return self._score_pair(
            lambda doc: compute_match_score(
                Candidate.from_document(doc), Job.from_document(job_doc), self.weights
            ),
            candidate_doc,
        )

    # ---------- Internals ----------
    def _collect(
        self,
        pool: List[Dict],
        score: Callable[[Dict], ScoredMatch],
        pair_ids: Callable[[Dict], Tuple[Any, Any]],
        limit: int,
    ) -> List[ScoredMatch]:
        matches: List[ScoredMatch] = []

        for doc in pool:
            candidate_id, job_id = pair_ids(doc)
            try:
                result = self._score_pair(score, doc)
            except ScoringError as exc:
                skipped = PairSkipped(candidate_id, job_id, str(exc))
                logger.warning("%s", skipped)
                continue

            if result.match_score >= self.min_score:
                matches.append(result)

        # Stable sort keeps scan order for equal scores
        matches.sort(key=lambda m: m.match_score, reverse=True)
        return matches[:limit]

    @staticmethod
    def _score_pair(score: Callable[[Dict], ScoredMatch], doc: Dict) -> ScoredMatch:
        try:
            return score(doc)
        except (TypeError, ValueError, AttributeError, KeyError) as exc:
            raise ScoringError(f"{type(exc).__name__}: {exc}") from exc

