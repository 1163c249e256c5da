# db.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument, errors

from .config import (
    MONGO_URI,
    DB_NAME,
    CANDIDATE_COLLECTION,
    JOB_COLLECTION,
    MATCH_COLLECTION,
)
from .exceptions import StoreUnavailable
from .models import MATCH_STATUSES, EmploymentRecord, ScoredMatch
from .utils import total_experience_years

logger = logging.getLogger(__name__)

# Most recently created first; _id breaks ties between equal timestamps
SCAN_ORDER = [("created_at", DESCENDING), ("_id", DESCENDING)]

PROFILE_FIELDS = ("name", "phone", "skills", "education", "certifications")


def as_object_id(value: Any) -> Any:
    """Turn a 24-char hex string into an ObjectId; leave anything else alone."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def _now() -> datetime:
    # naive UTC, the same shape pymongo hands back on reads
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MongoDBManager:
    def __init__(self, client: Optional[Any] = None) -> None:
        try:
            self.client = client if client is not None else MongoClient(MONGO_URI)
            self.db = self.client[DB_NAME]

            self.candidates = self.db[CANDIDATE_COLLECTION]
            self.jobs = self.db[JOB_COLLECTION]
            self.matches = self.db[MATCH_COLLECTION]

            self.ensure_indexes()

        except errors.PyMongoError as exc:
            raise StoreUnavailable(f"MongoDB connection failed: {exc}") from exc

    def ensure_indexes(self) -> None:
        # At most one match per (candidate, job) pair
        self.matches.create_index(
            [("candidate_id", ASCENDING), ("job_id", ASCENDING)],
            unique=True,
            name="candidate_job_unique",
        )
        self.matches.create_index([("match_score", DESCENDING)])
        self.candidates.create_index([("status", ASCENDING), ("created_at", DESCENDING)])
        self.jobs.create_index([("status", ASCENDING), ("created_at", DESCENDING)])

    # ---------- Candidate ----------
    def insert_candidate(self, candidate: Dict) -> Any:
        candidate.setdefault("created_at", _now())
        candidate.setdefault("status", "active")
        return self.candidates.insert_one(candidate).inserted_id

    def get_candidate(self, candidate_id: Any) -> Optional[Dict]:
        return self.candidates.find_one({"_id": as_object_id(candidate_id)})

    def list_active_candidates(self, limit: int) -> List[Dict]:
        if limit <= 0:
            return []
        cursor = self.candidates.find({"status": "active"}).sort(SCAN_ORDER).limit(limit)
        return list(cursor)

    def apply_parsed_resume(self, candidate_id: Any, parsed: Dict) -> Optional[Dict]:
        """Copy parsed resume fields onto the candidate profile.

        Only fields present in ``parsed`` replace stored values. A non-empty
        experience list replaces the employment history and recomputes the
        total years from it. Returns the updated document, or None if the
        candidate does not exist.
        """
        updates: Dict[str, Any] = {}
        for key in PROFILE_FIELDS:
            if parsed.get(key):
                updates[key] = parsed[key]

        jobs = parsed.get("experience") or []
        if jobs:
            records = [EmploymentRecord.from_document(j) for j in jobs]
            updates["experience"] = {
                "total_years": total_experience_years(records),
                "jobs": jobs,
            }

        updates["updated_at"] = _now()
        return self.candidates.find_one_and_update(
            {"_id": as_object_id(candidate_id)},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )

    # ---------- Job ----------
    def insert_job(self, job: Dict) -> Any:
        job.setdefault("created_at", _now())
        job.setdefault("status", "active")
        return self.jobs.insert_one(job).inserted_id

    def get_job(self, job_id: Any) -> Optional[Dict]:
        return self.jobs.find_one({"_id": as_object_id(job_id)})

    def list_active_jobs(self, limit: int) -> List[Dict]:
        if limit <= 0:
            return []
        cursor = self.jobs.find({"status": "active"}).sort(SCAN_ORDER).limit(limit)
        return list(cursor)

    # ---------- Match ----------
    def upsert_match(self, scored: ScoredMatch) -> Dict:
        """Create or re-score the match for one pair in a single atomic write.

        Score fields are always overwritten; workflow fields are only written
        when the document is inserted.
        """
        now = _now()
        key = {"candidate_id": scored.candidate_id, "job_id": scored.job_id}
        update = {
            "$set": {**scored.score_fields(), "updated_at": now},
            "$inc": {"times_scored": 1},
            "$setOnInsert": {
                "status": "pending",
                "recruiter_notes": None,
                "candidate_interested": None,
                "created_at": now,
            },
        }
        try:
            return self.matches.find_one_and_update(
                key, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except errors.DuplicateKeyError:
            # A concurrent upsert inserted the pair first; this write is now an update
            logger.debug("Upsert raced on pair %s/%s, retrying", scored.candidate_id, scored.job_id)
            return self.matches.find_one_and_update(
                key, update, upsert=True, return_document=ReturnDocument.AFTER
            )

    def insert_match_if_absent(self, scored: ScoredMatch) -> Dict:
        """Create the match for one pair, or return the existing one unchanged."""
        now = _now()
        key = {"candidate_id": scored.candidate_id, "job_id": scored.job_id}
        update = {
            "$setOnInsert": {
                **scored.score_fields(),
                "status": "pending",
                "recruiter_notes": None,
                "candidate_interested": None,
                "times_scored": 1,
                "created_at": now,
                "updated_at": now,
            },
        }
        try:
            return self.matches.find_one_and_update(
                key, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except errors.DuplicateKeyError:
            return self.matches.find_one(key)

    def get_pair_match(self, candidate_id: Any, job_id: Any) -> Optional[Dict]:
        return self.matches.find_one(
            {"candidate_id": as_object_id(candidate_id), "job_id": as_object_id(job_id)}
        )

    def get_match(self, match_id: Any) -> Optional[Dict]:
        return self.matches.find_one({"_id": as_object_id(match_id)})

    def find_matches(
        self,
        candidate_id: Any = None,
        job_id: Any = None,
        min_score: int = 30,
        status: Optional[str] = None,
        limit: int = 50,
    ) -> List[Dict]:
        query: Dict[str, Any] = {"match_score": {"$gte": min_score}}
        if candidate_id is not None:
            query["candidate_id"] = as_object_id(candidate_id)
        if job_id is not None:
            query["job_id"] = as_object_id(job_id)
        if status:
            query["status"] = status

        cursor = self.matches.find(query).sort([("match_score", DESCENDING), ("_id", ASCENDING)])
        if limit > 0:
            cursor = cursor.limit(limit)
        return list(cursor)

    def update_match_status(
        self,
        match_id: Any,
        status: str,
        notes: Optional[str] = None,
    ) -> Optional[Dict]:
        if status not in MATCH_STATUSES:
            raise ValueError(f"Unknown match status: {status}")
        updates: Dict[str, Any] = {"status": status, "updated_at": _now()}
        if notes:
            updates["recruiter_notes"] = notes
        return self.matches.find_one_and_update(
            {"_id": as_object_id(match_id)},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )

    def set_candidate_interest(self, match_id: Any, interested: bool) -> Optional[Dict]:
        return self.matches.find_one_and_update(
            {"_id": as_object_id(match_id)},
            {"$set": {"candidate_interested": bool(interested), "updated_at": _now()}},
            return_document=ReturnDocument.AFTER,
        )
