# persister.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from . import config
from .db import MongoDBManager
from .exceptions import PersistenceError
from .models import Match, ScoredMatch

logger = logging.getLogger(__name__)


class MatchPersister:
    """Upserts finder results, one independent atomic write per pair.

    Writes run on a bounded thread pool. A pair that fails is logged and left
    out of the result; the rest of the batch is still written. Results come
    back highest score first.
    """

    def __init__(
        self,
        db: MongoDBManager,
        max_workers: int = config.MATCH_PERSIST_WORKERS,
    ) -> None:
        self.db = db
        self.max_workers = max(1, max_workers)

    def persist_matches(self, scored: Sequence[ScoredMatch]) -> List[Match]:
        if not scored:
            return []

        if self.max_workers == 1 or len(scored) == 1:
            outcomes = [self._persist_one(s) for s in scored]
        else:
            workers = min(self.max_workers, len(scored))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="match-persist") as pool:
                outcomes = list(pool.map(self._persist_one, scored))

        saved = [m for m in outcomes if m is not None]
        saved.sort(key=lambda m: m.match_score, reverse=True)

        skipped = len(scored) - len(saved)
        if skipped:
            logger.warning("Persisted %d of %d matches, %d skipped", len(saved), len(scored), skipped)
        else:
            logger.info("Persisted %d matches", len(saved))
        return saved

    def _persist_one(self, scored: ScoredMatch) -> Optional[Match]:
        try:
            doc = self.db.upsert_match(scored)
            if doc is None:
                raise RuntimeError("upsert returned no document")
            return Match.from_document(doc)
        except Exception as exc:
            failure = PersistenceError(scored.candidate_id, scored.job_id, str(exc))
            logger.warning("%s", failure, exc_info=exc)
            return None
