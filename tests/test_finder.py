"""
Tests for finder.py - bounded scans, threshold, ordering and limits.
"""

import logging

import pytest
from bson import ObjectId

from match_engine import config
from match_engine.exceptions import CandidateNotFound, JobNotFound, NotFound
from match_engine.finder import MatchFinder

from conftest import REMOTE, skills

# Scores 14: no shared skills, far under-qualified, other country, wrong job type
POOR_JOB = {
    "requirements": {"skills": skills("cobol"), "experience": {"min": 10, "max": 12}},
    "location": {"city": "Berlin", "country": "Germany", "remote": False},
    "job_type": "contract",
}


@pytest.fixture
def finder(db) -> MatchFinder:
    return MatchFinder(db)


@pytest.fixture
def python_dev(add_candidate):
    return add_candidate(
        skills=skills("python", "django", "postgres"),
        experience={"total_years": 4, "jobs": []},
        location={"city": "Austin", "state": "TX", "country": "USA"},
        preferences={"job_type": ["full-time"]},
    )


class TestFinderDefaults:
    """Caps and threshold come from config."""

    def test_defaults(self, finder):
        assert finder.job_scan_limit == config.JOB_SCAN_LIMIT == 100
        assert finder.candidate_scan_limit == config.CANDIDATE_SCAN_LIMIT == 200
        assert finder.candidate_result_limit == 20
        assert finder.job_result_limit == 50
        assert finder.min_score == 30


class TestFindMatchesForCandidate:
    """One candidate against the active jobs."""

    def test_missing_candidate(self, finder):
        with pytest.raises(CandidateNotFound):
            finder.find_matches_for_candidate(ObjectId())

    def test_not_found_is_common_base(self, finder):
        with pytest.raises(NotFound) as excinfo:
            finder.find_matches_for_candidate("nobody")
        assert "nobody" in str(excinfo.value)

    def test_threshold_filters_noise(self, finder, python_dev, add_job):
        good = add_job(requirements={"skills": skills("python", "django")})
        add_job(**POOR_JOB)

        matches = finder.find_matches_for_candidate(python_dev)

        assert [m.job_id for m in matches] == [good]
        assert all(m.match_score >= 30 for m in matches)

    def test_sorted_by_score_descending(self, finder, python_dev, add_job):
        add_job(requirements={"skills": skills("python")})
        add_job(requirements={"skills": skills("python", "django", "postgres")}, location=REMOTE)
        add_job(requirements={"skills": skills("python", "django")})
        add_job(requirements={"skills": skills("java")}, location={"city": "Dallas", "state": "TX"})

        matches = finder.find_matches_for_candidate(python_dev)
        scores = [m.match_score for m in matches]

        assert len(matches) == 4
        assert scores == sorted(scores, reverse=True)
        assert scores[0] == 100

    def test_inactive_jobs_not_scanned(self, finder, python_dev, add_job):
        add_job(requirements={"skills": skills("python")}, status="closed")
        add_job(requirements={"skills": skills("python")}, status="draft")
        assert finder.find_matches_for_candidate(python_dev) == []

    def test_result_limit(self, db, python_dev, add_job):
        for _ in range(5):
            add_job(requirements={"skills": skills("python")})
        finder = MatchFinder(db, candidate_result_limit=2)
        assert len(finder.find_matches_for_candidate(python_dev)) == 2

    def test_scan_limit_takes_newest_jobs(self, db, python_dev, add_job):
        ids = [add_job(requirements={"skills": skills("python")}) for _ in range(5)]
        finder = MatchFinder(db, job_scan_limit=3)

        matches = finder.find_matches_for_candidate(python_dev)

        assert {m.job_id for m in matches} == set(ids[-3:])

    def test_equal_scores_keep_scan_order(self, finder, python_dev, add_job):
        ids = [add_job(requirements={"skills": skills("python")}) for _ in range(3)]
        matches = finder.find_matches_for_candidate(python_dev)
        assert [m.job_id for m in matches] == list(reversed(ids))

    def test_malformed_job_is_skipped(self, finder, python_dev, add_job, caplog):
        good = add_job(requirements={"skills": skills("python")})
        bad = add_job(requirements={"skills": skills("python")}, location="Austin, TX")

        with caplog.at_level(logging.WARNING, logger="match_engine.finder"):
            matches = finder.find_matches_for_candidate(python_dev)

        assert [m.job_id for m in matches] == [good]
        assert str(bad) in caplog.text


class TestFindMatchesForJob:
    """One job against the active candidates."""

    def test_missing_job(self, finder):
        with pytest.raises(JobNotFound):
            finder.find_matches_for_job(ObjectId())

    def test_scores_active_candidates(self, finder, add_candidate, add_job):
        strong = add_candidate(skills=skills("go", "grpc"))
        weak = add_candidate(skills=skills("go"))
        add_candidate(skills=skills("go", "grpc"), status="inactive")
        job_id = add_job(requirements={"skills": skills("go", "grpc")}, location=REMOTE)

        matches = finder.find_matches_for_job(job_id)

        assert [m.candidate_id for m in matches] == [strong, weak]
        assert all(m.job_id == job_id for m in matches)
        assert matches[0].match_score > matches[1].match_score

    def test_threshold_and_limits(self, db, add_candidate, add_job):
        job_id = add_job(**POOR_JOB)
        add_candidate(
            skills=skills("python"),
            location={"city": "Austin", "country": "USA"},
            preferences={"job_type": ["full-time"]},
        )
        for _ in range(4):
            add_candidate(skills=skills("cobol"), experience={"total_years": 11, "jobs": []})

        finder = MatchFinder(db, job_result_limit=3, candidate_scan_limit=10)
        matches = finder.find_matches_for_job(job_id)

        assert len(matches) == 3
        assert all(m.match_score >= 30 for m in matches)

    def test_candidate_scan_limit(self, db, add_candidate, add_job):
        ids = [add_candidate(skills=skills("go")) for _ in range(4)]
        job_id = add_job(requirements={"skills": skills("go")})

        matches = MatchFinder(db, candidate_scan_limit=2).find_matches_for_job(job_id)

        assert {m.candidate_id for m in matches} == set(ids[-2:])
