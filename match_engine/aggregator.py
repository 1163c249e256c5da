# aggregator.py
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .labels import location_compatibility_label, salary_compatibility_label
from .models import Candidate, Job, MatchDetails, ScoreBreakdown, ScoredMatch
from .scorer import (
    experience_match,
    job_type_match,
    location_match,
    salary_match,
    skills_similarity,
)
from .utils import lower_set, round_half_up


# ---------- Weights ----------
@dataclass(frozen=True)
class ScoringWeights:
    skills: float = 0.40
    experience: float = 0.25
    location: float = 0.15
    salary: float = 0.10
    job_type: float = 0.10

    def __post_init__(self) -> None:
        if any(w < 0 for w in self.as_tuple()):
            raise ValueError("Scoring weights must not be negative")
        if not math.isclose(math.fsum(self.as_tuple()), 1.0, abs_tol=1e-9):
            raise ValueError(
                f"Scoring weights must sum to 1.0, got {math.fsum(self.as_tuple())}"
            )

    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return (self.skills, self.experience, self.location, self.salary, self.job_type)


DEFAULT_WEIGHTS = ScoringWeights()


# ---------- Final Score ----------
def compute_match_score(
    candidate: Candidate,
    job: Job,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoredMatch:
    requirements = job.requirements

    sub_scores = np.array(
        [
            skills_similarity(candidate.skills, requirements.skills),
            experience_match(candidate.experience, requirements.experience),
            location_match(candidate.location, job.location),
            salary_match(candidate.preferences, job.salary),
            job_type_match(candidate.preferences, job.job_type),
        ],
        dtype=float,
    )
    skills, experience, location, salary, job_type = (float(s) for s in sub_scores)

    overall = float(np.dot(np.array(weights.as_tuple(), dtype=float), sub_scores))

    candidate_tech = lower_set(candidate.skills.technical)
    job_tech = lower_set(requirements.skills.technical)
    job_min = requirements.experience.min if requirements.experience else None

    return ScoredMatch(
        candidate_id=candidate.candidate_id,
        job_id=job.job_id,
        match_score=min(100, max(0, round_half_up(overall))),
        score_breakdown=ScoreBreakdown(
            skills_match=round_half_up(skills),
            experience_match=round_half_up(experience),
            location_match=round_half_up(location),
            salary_match=round_half_up(salary),
            job_type_match=round_half_up(job_type),
        ),
        match_details=MatchDetails(
            matching_skills=sorted(candidate_tech & job_tech),
            missing_skills=sorted(job_tech - candidate_tech),
            experience_difference=round_half_up(
                candidate.experience.total_years - (job_min or 0)
            ),
            salary_compatibility=salary_compatibility_label(salary),
            location_compatibility=location_compatibility_label(location),
        ),
    )
