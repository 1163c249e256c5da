# triggers.py
"""Entry points that start matching batches.

Event triggers (job created, resume parsed, jobs imported) hand the batch to a
background executor and return at once; the caller's response never waits on
or depends on the batch. Manual re-runs execute in the caller's thread and
return counts.
"""
import functools
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional

from . import config
from .exceptions import CandidateNotFound
from .models import Candidate, Job, Match
from .notifications import (
    LoggingNotifier,
    MatchNotifier,
    build_match_payload,
    select_for_notification,
)
from .service import JobMatchingService

logger = logging.getLogger(__name__)


class BackgroundDispatcher:
    """Runs submitted work on a bounded pool that outlives the request."""

    def __init__(self, max_workers: int = config.BACKGROUND_WORKERS) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="match-trigger",
        )

    def submit(self, name: str, fn: Callable, *args: Any, **kwargs: Any) -> Future:
        logger.info("Scheduling background task %s", name)
        future = self._executor.submit(fn, *args, **kwargs)
        future.add_done_callback(functools.partial(self._log_outcome, name))
        return future

    @staticmethod
    def _log_outcome(name: str, future: Future) -> None:
        if future.cancelled():
            logger.warning("Background task %s was cancelled", name)
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Background task %s failed: %s", name, exc, exc_info=exc)
        else:
            logger.info("Background task %s finished", name)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


class MatchTriggers:
    def __init__(
        self,
        service: JobMatchingService,
        dispatcher: Optional[BackgroundDispatcher] = None,
        notifier: Optional[MatchNotifier] = None,
    ) -> None:
        self.service = service
        self.db = service.db
        self.dispatcher = dispatcher or BackgroundDispatcher()
        self.notifier = notifier or LoggingNotifier()

    # ---------- Event triggers ----------
    def on_job_created(self, job_id: Any) -> Future:
        return self.dispatcher.submit(f"job-created:{job_id}", self.service.run_for_job, job_id)

    def on_resume_parsed(self, candidate_id: Any, parsed_data: Optional[Dict] = None) -> Future:
        return self.dispatcher.submit(
            f"resume-parsed:{candidate_id}",
            self._match_parsed_candidate,
            candidate_id,
            parsed_data,
        )

    def on_jobs_imported(self, job_ids: Iterable[Any]) -> Future:
        job_ids = list(job_ids)
        return self.dispatcher.submit(
            f"jobs-imported:{len(job_ids)}",
            self._match_imported_jobs,
            job_ids,
        )

    # ---------- Manual re-runs ----------
    def rerun_for_candidate(self, candidate_id: Any) -> Dict[str, int]:
        saved = self.service.run_for_candidate(candidate_id)
        high = [m for m in saved if m.match_score >= config.HIGH_MATCH_SCORE]
        self._notify_candidate(candidate_id, saved, only_new=False)
        return {"total_matches": len(saved), "high_matches": len(high)}

    def rerun_for_job(self, job_id: Any) -> Dict[str, int]:
        saved = self.service.run_for_job(job_id)
        return {"total_matches": len(saved)}

    # ---------- Background bodies ----------
    def _match_parsed_candidate(self, candidate_id: Any, parsed_data: Optional[Dict]) -> List[Match]:
        if parsed_data:
            if self.db.apply_parsed_resume(candidate_id, parsed_data) is None:
                raise CandidateNotFound(candidate_id)
            logger.info("Updated profile of candidate %s from parsed resume", candidate_id)

        saved = self.service.run_for_candidate(candidate_id)
        if not saved:
            logger.info("No matching jobs found for candidate %s", candidate_id)
            return saved

        self._notify_candidate(candidate_id, saved, only_new=True)
        return saved

    def _match_imported_jobs(self, job_ids: List[Any]) -> int:
        logger.info("Starting auto-matching for %d imported jobs", len(job_ids))
        total = 0
        for job_id in job_ids:
            try:
                saved = self.service.run_for_job(job_id)
            except Exception as exc:
                logger.error("Matching failed for imported job %s: %s", job_id, exc, exc_info=exc)
                continue
            total += len(saved)
        logger.info("Auto-matching of imported jobs saved %d matches", total)
        return total

    def _notify_candidate(self, candidate_id: Any, matches: List[Match], only_new: bool) -> int:
        picked = select_for_notification(matches, only_new=only_new)
        if not picked:
            return 0

        doc = self.db.get_candidate(candidate_id)
        candidate = Candidate.from_document(doc) if doc else None
        if candidate is None or not candidate.email:
            logger.warning("Candidate %s has no email, skipping notifications", candidate_id)
            return 0

        sent = 0
        for match in picked:
            job_doc = self.db.get_job(match.job_id)
            if not job_doc:
                continue
            payload = build_match_payload(Job.from_document(job_doc), match)
            try:
                self.notifier.send_match_notification(candidate.email, payload)
                sent += 1
            except Exception as exc:
                logger.error(
                    "Failed to notify %s about job %s: %s", candidate.email, match.job_id, exc
                )
        return sent
