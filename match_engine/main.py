# main.py
import argparse
import logging
import sys
from typing import List, Optional

from tabulate import tabulate

from .config import LOG_DIR, LOG_FILE, MIN_MATCH_SCORE
from .exceptions import NotFound


# ---------- Logging Setup ----------
def setup_logging() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(),
        ],
    )


# ---------- Output ----------
def format_matches(matches: List[dict]) -> str:
    table = [
        [
            idx + 1,
            str(m["candidate_id"]),
            str(m["job_id"]),
            m["match_score"],
            m.get("score_breakdown", {}).get("skills_match"),
            m.get("score_breakdown", {}).get("experience_match"),
            m.get("score_breakdown", {}).get("location_match"),
            m.get("status"),
        ]
        for idx, m in enumerate(matches)
    ]
    return tabulate(
        table,
        headers=["Rank", "Candidate", "Job", "Score", "Skill", "Exp", "Loc", "Status"],
        tablefmt="github",
    )


# ---------- CLI ----------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="match-engine",
        description="Candidate/job matching engine",
    )
    subparsers = parser.add_subparsers(dest="command")

    # ---- match-candidate ----
    cand_parser = subparsers.add_parser(
        "match-candidate", help="Re-run matching for one candidate"
    )
    cand_parser.add_argument("--id", required=True, help="Candidate ID")

    # ---- match-job ----
    job_parser = subparsers.add_parser(
        "match-job", help="Re-run matching for one job"
    )
    job_parser.add_argument("--id", required=True, help="Job ID")

    # ---- create-match ----
    create_parser = subparsers.add_parser(
        "create-match", help="Create the match for one candidate/job pair"
    )
    create_parser.add_argument("--candidate-id", required=True, help="Candidate ID")
    create_parser.add_argument("--job-id", required=True, help="Job ID")

    # ---- matches ----
    list_parser = subparsers.add_parser(
        "matches", help="Show stored matches for a candidate or a job"
    )
    anchor = list_parser.add_mutually_exclusive_group(required=True)
    anchor.add_argument("--candidate-id", help="Candidate ID")
    anchor.add_argument("--job-id", help="Job ID")
    list_parser.add_argument(
        "--min-score",
        type=int,
        default=MIN_MATCH_SCORE,
        help=f"Lowest score to show (default {MIN_MATCH_SCORE})",
    )
    list_parser.add_argument(
        "--top",
        type=int,
        default=20,
        help="How many matches to show (default 20)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    # Store-backed modules are imported lazily so --help works without MongoDB
    from .service import JobMatchingService
    from .triggers import MatchTriggers

    try:
        service = JobMatchingService()

        if args.command == "match-candidate":
            result = MatchTriggers(service).rerun_for_candidate(args.id)
            print(
                f"Matching completed: {result['total_matches']} matches, "
                f"{result['high_matches']} high"
            )

        elif args.command == "match-job":
            result = MatchTriggers(service).rerun_for_job(args.id)
            print(f"Matching completed: {result['total_matches']} matches")

        elif args.command == "create-match":
            match = service.create_manual_match(args.candidate_id, args.job_id)
            print(f"Match {match.match_id}: score {match.match_score} ({match.status})")

        elif args.command == "matches":
            matches = service.db.find_matches(
                candidate_id=args.candidate_id,
                job_id=args.job_id,
                min_score=args.min_score,
                limit=args.top,
            )
            if not matches:
                print("No matches found.")
            else:
                print(format_matches(matches))

    except NotFound as exc:
        logging.error("Command failed: %s", exc)
        return 2
    except Exception as exc:
        logging.error("Command failed", exc_info=exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
