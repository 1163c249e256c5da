# models.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional


MATCH_STATUSES = (
    "pending",
    "viewed",
    "shortlisted",
    "rejected",
    "interviewing",
    "hired",
)


# ---------- Document helpers ----------
def _sub(doc: Optional[Dict], key: str) -> Optional[Dict]:
    if not doc:
        return None
    value = doc.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise TypeError(f"'{key}' must be an object, got {type(value).__name__}")
    return value


def _number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    return float(value)


def _str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# ---------- Shared ----------
@dataclass
class Skills:
    technical: List[str] = field(default_factory=list)
    soft: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Optional[Dict]) -> "Skills":
        if not doc:
            return cls()
        return cls(
            technical=_str_list(doc.get("technical")),
            soft=_str_list(doc.get("soft")),
        )


@dataclass
class Location:
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    remote: bool = False

    @classmethod
    def from_document(cls, doc: Optional[Dict]) -> Optional["Location"]:
        if doc is None:
            return None
        return cls(
            city=_text(doc.get("city")),
            state=_text(doc.get("state")),
            country=_text(doc.get("country")),
            remote=bool(doc.get("remote", False)),
        )

    def is_blank(self) -> bool:
        return not (self.city or self.state or self.country)

    def display(self) -> str:
        parts = [p for p in (self.city, self.country) if p]
        if parts:
            return ", ".join(parts)
        return "Remote" if self.remote else ""


@dataclass
class Range:
    """A numeric min/max pair where either bound may be missing."""

    min: Optional[float] = None
    max: Optional[float] = None

    @classmethod
    def from_document(cls, doc: Optional[Dict]) -> Optional["Range"]:
        if doc is None:
            return None
        return cls(min=_number(doc.get("min")), max=_number(doc.get("max")))

    def is_empty(self) -> bool:
        return not self.min and not self.max


@dataclass
class SalaryRange(Range):
    currency: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Optional[Dict]) -> Optional["SalaryRange"]:
        if doc is None:
            return None
        return cls(
            min=_number(doc.get("min")),
            max=_number(doc.get("max")),
            currency=_text(doc.get("currency")),
        )


# ---------- Candidate ----------
@dataclass
class EmploymentRecord:
    company: Optional[str] = None
    position: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    current: bool = False
    description: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict) -> "EmploymentRecord":
        return cls(
            company=_text(doc.get("company")),
            position=_text(doc.get("position")),
            start_date=doc.get("start_date"),
            end_date=doc.get("end_date"),
            current=bool(doc.get("current", False)),
            description=doc.get("description"),
        )


@dataclass
class CandidateExperience:
    total_years: float = 0.0
    jobs: List[EmploymentRecord] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Optional[Dict]) -> "CandidateExperience":
        if not doc:
            return cls()
        years = _number(doc.get("total_years")) or 0.0
        return cls(
            total_years=max(0.0, years),
            jobs=[EmploymentRecord.from_document(j) for j in doc.get("jobs") or []],
        )


@dataclass
class Preferences:
    expected_salary: Optional[SalaryRange] = None
    job_type: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Optional[Dict]) -> Optional["Preferences"]:
        if doc is None:
            return None
        return cls(
            expected_salary=SalaryRange.from_document(_sub(doc, "expected_salary")),
            job_type=_str_list(doc.get("job_type")),
        )


@dataclass
class Candidate:
    candidate_id: Any
    email: str = ""
    name: str = ""
    skills: Skills = field(default_factory=Skills)
    experience: CandidateExperience = field(default_factory=CandidateExperience)
    location: Optional[Location] = None
    preferences: Optional[Preferences] = None
    status: str = "active"

    @classmethod
    def from_document(cls, doc: Dict) -> "Candidate":
        return cls(
            candidate_id=doc.get("_id"),
            email=doc.get("email") or "",
            name=doc.get("name") or "",
            skills=Skills.from_document(_sub(doc, "skills")),
            experience=CandidateExperience.from_document(_sub(doc, "experience")),
            location=Location.from_document(_sub(doc, "location")),
            preferences=Preferences.from_document(_sub(doc, "preferences")),
            status=doc.get("status") or "active",
        )


# ---------- Job ----------
@dataclass
class JobRequirements:
    skills: Skills = field(default_factory=Skills)
    experience: Optional[Range] = None

    @classmethod
    def from_document(cls, doc: Optional[Dict]) -> "JobRequirements":
        if not doc:
            return cls()
        return cls(
            skills=Skills.from_document(_sub(doc, "skills")),
            experience=Range.from_document(_sub(doc, "experience")),
        )


@dataclass
class Job:
    job_id: Any
    title: str = ""
    company_name: Optional[str] = None
    requirements: JobRequirements = field(default_factory=JobRequirements)
    location: Optional[Location] = None
    salary: Optional[SalaryRange] = None
    job_type: Optional[str] = None
    status: str = "active"

    @classmethod
    def from_document(cls, doc: Dict) -> "Job":
        company = _sub(doc, "company") or {}
        return cls(
            job_id=doc.get("_id"),
            title=doc.get("title") or "",
            company_name=_text(company.get("name")),
            requirements=JobRequirements.from_document(_sub(doc, "requirements")),
            location=Location.from_document(_sub(doc, "location")),
            salary=SalaryRange.from_document(_sub(doc, "salary")),
            job_type=_text(doc.get("job_type")),
            status=doc.get("status") or "active",
        )


# ---------- Match ----------
@dataclass
class ScoreBreakdown:
    skills_match: int = 0
    experience_match: int = 0
    location_match: int = 0
    salary_match: int = 0
    job_type_match: int = 0


@dataclass
class MatchDetails:
    matching_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    experience_difference: int = 0
    salary_compatibility: str = ""
    location_compatibility: str = ""


@dataclass
class ScoredMatch:
    """One finder result, not yet persisted."""

    candidate_id: Any
    job_id: Any
    match_score: int
    score_breakdown: ScoreBreakdown
    match_details: MatchDetails

    def score_fields(self) -> Dict:
        return {
            "match_score": self.match_score,
            "score_breakdown": asdict(self.score_breakdown),
            "match_details": asdict(self.match_details),
        }


@dataclass
class Match:
    match_id: Any
    candidate_id: Any
    job_id: Any
    match_score: int
    score_breakdown: ScoreBreakdown
    match_details: MatchDetails
    status: str = "pending"
    recruiter_notes: Optional[str] = None
    candidate_interested: Optional[bool] = None
    times_scored: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_new(self) -> bool:
        """True when the last score write created this match."""
        return self.times_scored == 1

    @classmethod
    def from_document(cls, doc: Dict) -> "Match":
        return cls(
            match_id=doc.get("_id"),
            candidate_id=doc["candidate_id"],
            job_id=doc["job_id"],
            match_score=int(doc.get("match_score") or 0),
            score_breakdown=ScoreBreakdown(**(doc.get("score_breakdown") or {})),
            match_details=MatchDetails(**(doc.get("match_details") or {})),
            status=doc.get("status") or "pending",
            recruiter_notes=doc.get("recruiter_notes"),
            candidate_interested=doc.get("candidate_interested"),
            times_scored=int(doc.get("times_scored") or 0),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )
