# notifications.py
import logging
from typing import Dict, List, Protocol, Sequence

from . import config
from .models import Job, Match

logger = logging.getLogger(__name__)


class MatchNotifier(Protocol):
    """Sends a "new job match" message to a candidate."""

    def send_match_notification(self, email: str, payload: Dict) -> None:
        ...


class LoggingNotifier:
    """Default notifier used when no delivery service is wired in."""

    def send_match_notification(self, email: str, payload: Dict) -> None:
        logger.info(
            "Match notification for %s: %s at %s (%s%%)",
            email,
            payload.get("job_title"),
            payload.get("company"),
            payload.get("match_score"),
        )


def build_match_payload(job: Job, match: Match) -> Dict:
    return {
        "job_title": job.title,
        "company": job.company_name,
        "match_score": match.match_score,
        "location": job.location.display() if job.location else "",
        "job_id": str(job.job_id),
    }


def select_for_notification(
    matches: Sequence[Match],
    min_score: int = config.HIGH_MATCH_SCORE,
    limit: int = config.NOTIFY_TOP_N,
    only_new: bool = False,
) -> List[Match]:
    picked = [
        m for m in matches
        if m.match_score >= min_score and (m.is_new or not only_new)
    ]
    picked.sort(key=lambda m: m.match_score, reverse=True)
    return picked[:limit]
