# exceptions.py
from typing import Any


class MatchEngineError(Exception):
    """Base class for matching engine errors."""


class StoreUnavailable(MatchEngineError):
    """Raised when the MongoDB store cannot be reached."""


class NotFound(MatchEngineError):
    """The anchor entity of a matching batch does not exist."""

    entity = "Entity"

    def __init__(self, entity_id: Any) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found: {entity_id}")


class CandidateNotFound(NotFound):
    entity = "Candidate"


class JobNotFound(NotFound):
    entity = "Job"


class ScoringError(MatchEngineError):
    """A pair could not be scored because a document has an unexpected shape."""


class PairSkipped(MatchEngineError):
    """One (candidate, job) pair was dropped from a batch."""

    def __init__(self, candidate_id: Any, job_id: Any, reason: str) -> None:
        self.candidate_id = candidate_id
        self.job_id = job_id
        self.reason = reason
        super().__init__(
            f"Skipped pair candidate={candidate_id} job={job_id}: {reason}"
        )


class PersistenceError(PairSkipped):
    """The store failed to upsert one pair."""
