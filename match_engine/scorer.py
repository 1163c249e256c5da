# scorer.py
from typing import List, Optional

from .models import CandidateExperience, Location, Preferences, Range, SalaryRange, Skills
from .utils import clamp_score, lower_set


# ---------- Skills Score ----------
def skills_similarity(
    candidate_skills: Optional[Skills],
    job_skills: Optional[Skills],
) -> float:
    """Jaccard similarity of the technical skill sets, 0-100."""
    candidate_tech = lower_set(candidate_skills.technical if candidate_skills else [])
    job_tech = lower_set(job_skills.technical if job_skills else [])

    union = candidate_tech | job_tech
    if not union:
        return 0.0

    return clamp_score(len(candidate_tech & job_tech) / len(union) * 100)


# ---------- Experience Score ----------
def experience_match(
    candidate_experience: Optional[CandidateExperience],
    job_experience: Optional[Range],
) -> float:
    if job_experience is None or job_experience.is_empty():
        return 100.0

    years = candidate_experience.total_years if candidate_experience else 0.0
    min_required = job_experience.min or 0.0
    max_required = job_experience.max or min_required + 10

    if min_required <= years <= max_required:
        return 100.0
    if years < min_required:
        # 20 points per year short
        return clamp_score(100 - (min_required - years) * 20)
    # 10 points per year over
    return clamp_score(100 - (years - max_required) * 10)


# ---------- Location Score ----------
def _same(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a and b and a.lower() == b.lower())


def location_match(
    candidate_location: Optional[Location],
    job_location: Optional[Location],
) -> float:
    if job_location is None or job_location.remote:
        return 100.0
    # A job location with no city, state or country places no constraint
    if job_location.is_blank():
        return 100.0
    if candidate_location is None or candidate_location.is_blank():
        return 50.0

    if _same(candidate_location.city, job_location.city):
        return 100.0
    if _same(candidate_location.state, job_location.state):
        return 75.0
    if _same(candidate_location.country, job_location.country):
        return 50.0
    return 25.0


# ---------- Salary Score ----------
def salary_match(
    candidate_preferences: Optional[Preferences],
    job_salary: Optional[SalaryRange],
) -> float:
    expected = candidate_preferences.expected_salary if candidate_preferences else None
    if expected is None or expected.is_empty():
        return 100.0
    if job_salary is None or job_salary.is_empty():
        return 100.0

    candidate_min = expected.min or 0.0
    candidate_max = expected.max or candidate_min * 1.5
    job_min = job_salary.min or 0.0
    job_max = job_salary.max or job_min * 1.3

    if candidate_max < candidate_min:
        candidate_min, candidate_max = candidate_max, candidate_min
    if job_max < job_min:
        job_min, job_max = job_max, job_min

    if candidate_min <= job_max and candidate_max >= job_min:
        width = candidate_max - candidate_min
        if width == 0:
            return 100.0
        overlap = min(candidate_max, job_max) - max(candidate_min, job_min)
        return clamp_score(overlap / width * 100)

    if candidate_min > job_max:
        if candidate_min <= 0:
            return 0.0
        gap = candidate_min - job_max
        return clamp_score(100 - gap / candidate_min * 100)

    # candidate would accept less than the job offers
    return 50.0


# ---------- Job Type Score ----------
def job_type_match(
    candidate_preferences: Optional[Preferences],
    job_type: Optional[str],
) -> float:
    preferred: List[str] = candidate_preferences.job_type if candidate_preferences else []
    if not preferred:
        return 100.0
    if job_type and job_type.lower() in lower_set(preferred):
        return 100.0
    return 0.0
