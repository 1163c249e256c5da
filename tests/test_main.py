"""
Tests for main.py - the operator CLI.
"""

import pytest
from bson import ObjectId

import match_engine.main as cli
import match_engine.service
from match_engine.main import build_parser, format_matches, main

from conftest import REMOTE, skills


@pytest.fixture(autouse=True)
def cli_env(db, monkeypatch, tmp_path):
    """Point the CLI at the mongomock store and a temporary log file."""
    real_service = match_engine.service.JobMatchingService
    monkeypatch.setattr(
        match_engine.service,
        "JobMatchingService",
        lambda: real_service(db=db, persist_workers=1),
    )
    monkeypatch.setattr(cli, "LOG_DIR", tmp_path)
    monkeypatch.setattr(cli, "LOG_FILE", tmp_path / "match_engine.log")


class TestParser:
    def test_matches_requires_one_anchor(self):
        parser = build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["matches"])
        with pytest.raises(SystemExit):
            parser.parse_args(["matches", "--candidate-id", "a", "--job-id", "b"])

    def test_matches_defaults(self):
        args = build_parser().parse_args(["matches", "--job-id", "j1"])
        assert args.min_score == 30
        assert args.top == 20


class TestFormatMatches:
    def test_table_columns(self):
        table = format_matches([
            {
                "candidate_id": "c1",
                "job_id": "j1",
                "match_score": 88,
                "score_breakdown": {"skills_match": 75, "experience_match": 100, "location_match": 100},
                "status": "pending",
            },
        ])
        header, _, row = table.splitlines()
        for column in ("Rank", "Candidate", "Job", "Score", "Skill", "Exp", "Loc", "Status"):
            assert column in header
        assert "c1" in row and "88" in row and "pending" in row


class TestMain:
    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_match_job(self, add_candidate, add_job, capsys):
        add_candidate(skills=skills("go"))
        add_candidate(skills=skills("go"))
        job_id = add_job(requirements={"skills": skills("go")}, location=REMOTE)

        assert main(["match-job", "--id", str(job_id)]) == 0
        assert "Matching completed: 2 matches" in capsys.readouterr().out

    def test_match_candidate(self, add_candidate, add_job, capsys):
        candidate_id = add_candidate(skills=skills("go"), email="")
        add_job(requirements={"skills": skills("go")}, location=REMOTE)

        assert main(["match-candidate", "--id", str(candidate_id)]) == 0
        assert "Matching completed: 1 matches, 1 high" in capsys.readouterr().out

    def test_show_matches(self, db, add_candidate, add_job, capsys):
        add_candidate(skills=skills("go"))
        job_id = add_job(requirements={"skills": skills("go")}, location=REMOTE)
        main(["match-job", "--id", str(job_id)])
        capsys.readouterr()

        assert main(["matches", "--job-id", str(job_id)]) == 0
        out = capsys.readouterr().out
        header_cells = [c.strip() for c in out.splitlines()[0].strip("|").split("|")]
        assert header_cells[0] == "Rank"
        assert "100" in out

    def test_show_matches_empty(self, capsys):
        assert main(["matches", "--candidate-id", str(ObjectId())]) == 0
        assert "No matches found." in capsys.readouterr().out

    def test_create_match(self, db, add_candidate, add_job, capsys):
        candidate_id = add_candidate(skills=skills("go"))
        job_id = add_job(requirements={"skills": skills("go")}, location=REMOTE)

        assert main(["create-match", "--candidate-id", str(candidate_id), "--job-id", str(job_id)]) == 0
        assert main(["create-match", "--candidate-id", str(candidate_id), "--job-id", str(job_id)]) == 0

        assert "score 100 (pending)" in capsys.readouterr().out
        assert db.matches.count_documents({}) == 1

    def test_missing_job(self):
        assert main(["match-job", "--id", str(ObjectId())]) == 2
