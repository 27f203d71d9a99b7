"""
Command-line interface for kviz-scoring

Loads quiz results from a JSON export or the Kviz API and prints
leaderboards, progress series, scores and per-question reviews.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .client import KvizClient
from .config import config
from .errors import KvizError
from .leaderboard import compute_leaderboard
from .progress import progress_series
from .quiz.grading import review_attempt
from .quiz.schema import Attempt, LeaderboardRow, TimeWindow
from .quiz.scoring import count_correct, score_attempt
from .records import decode_attempts

NO_RESULTS = "No results yet"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_attempts_from_file(path: Path) -> List[Attempt]:
    """Read a JSON array of result records."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)
    except OSError as e:
        raise KvizError(f"Could not read {path}: {e}")
    except json.JSONDecodeError as e:
        raise KvizError(f"{path} is not valid JSON: {e}")
    if not isinstance(records, list):
        raise KvizError(f"{path} must contain a JSON array of results")
    return decode_attempts(records)


async def load_attempts_from_api(api_url: Optional[str], token: Optional[str]) -> List[Attempt]:
    """Fetch every result from the Kviz API."""
    async with KvizClient(base_url=api_url, token=token) as client:
        return await client.fetch_results()


def load_attempts(args: argparse.Namespace) -> List[Attempt]:
    if args.file:
        return load_attempts_from_file(Path(args.file))
    return asyncio.run(load_attempts_from_api(args.api_url, args.token))


def format_leaderboard(leaderboard: dict[str, List[LeaderboardRow]]) -> str:
    """Render leaderboards as plain-text tables."""
    if not leaderboard:
        return NO_RESULTS

    blocks = []
    for quiz_name, rows in leaderboard.items():
        lines = [quiz_name, "=" * len(quiz_name), f"{'Pos':>4}  {'User':<20} {'Score':>6}  Date"]
        for row in rows:
            lines.append(
                f"{row.rank:>4}  {row.username:<20} {row.score:>5}%  "
                f"{row.quiz_done:%Y-%m-%d %H:%M}"
            )
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def cmd_leaderboard(args: argparse.Namespace, attempts: List[Attempt]) -> str:
    leaderboard = compute_leaderboard(attempts, quiz_name=args.quiz, window=args.window)
    if args.json:
        return json.dumps(
            {quiz: [r.to_dict() for r in rows] for quiz, rows in leaderboard.items()},
            indent=2,
        )
    return format_leaderboard(leaderboard)


def cmd_progress(args: argparse.Namespace, attempts: List[Attempt]) -> str:
    points = progress_series(attempts, args.quiz, args.username)
    if args.json:
        return json.dumps([p.to_dict() for p in points], indent=2)
    if not points:
        return NO_RESULTS
    return "\n".join(f"{p.date:%Y-%m-%d %H:%M}  {p.score:>3}%" for p in points)


def cmd_score(args: argparse.Namespace, attempts: List[Attempt]) -> str:
    if args.json:
        return json.dumps(
            [
                {
                    "id": a.id,
                    "quiz_name": a.quiz_name,
                    "username": a.username,
                    "quiz_done": a.quiz_done.isoformat(),
                    "correct": count_correct(a),
                    "total": len(a.questions),
                    "score": score_attempt(a),
                }
                for a in attempts
            ],
            indent=2,
        )
    if not attempts:
        return NO_RESULTS
    return "\n".join(
        f"#{a.id:<5} {a.quiz_name:<24} {a.username:<20} "
        f"{count_correct(a)}/{len(a.questions)}  {score_attempt(a):>3}%"
        for a in attempts
    )


def cmd_review(args: argparse.Namespace, attempts: List[Attempt]) -> str:
    attempt = next((a for a in attempts if a.id == args.result_id), None)
    if attempt is None:
        raise KvizError(f"No result with id {args.result_id}")

    reviews = review_attempt(attempt)
    if args.json:
        return json.dumps([r.to_dict() for r in reviews], indent=2)

    lines = [f"{attempt.quiz_name} by {attempt.username}: {score_attempt(attempt)}%"]
    for review in reviews:
        mark = "correct" if review.is_correct else "incorrect"
        lines.append(f"  Q{review.question.id}. {review.question.prompt} [{mark}]")
        lines.append(f"      answer: {review.user_answer!r}  expected: {review.correct!r}")
    return "\n".join(lines)


COMMANDS = {
    "leaderboard": cmd_leaderboard,
    "progress": cmd_progress,
    "score": cmd_score,
    "review": cmd_review,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kviz-scoring",
        description="Quiz scoring, leaderboards and progress for Kviz results",
        epilog="Example: kviz-scoring --file results.json leaderboard --window weekly",
    )
    parser.add_argument("--file", "-f", help="JSON file with an array of result records")
    parser.add_argument("--api-url", help="Kviz API root (default: $KVIZ_API_URL)")
    parser.add_argument("--token", help="Bearer token (default: $KVIZ_API_TOKEN)")
    parser.add_argument(
        "--log-level",
        default=config.logging.level,
        type=str.upper,
        choices=LOG_LEVELS,
        help=f"Log level (default: {config.logging.level})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    board_parser = subparsers.add_parser("leaderboard", help="Rank each user's best attempt per quiz")
    board_parser.add_argument("--quiz", help="Only this quiz (default: all)")
    board_parser.add_argument(
        "--window",
        choices=[w.value for w in TimeWindow],
        default=TimeWindow.ALL.value,
        help="Time window (default: all)",
    )
    board_parser.add_argument("--json", action="store_true", help="Output as JSON")

    progress_parser = subparsers.add_parser("progress", help="Score trend of one user on one quiz")
    progress_parser.add_argument("quiz", help="Quiz name")
    progress_parser.add_argument("username", help="User to follow")
    progress_parser.add_argument("--json", action="store_true", help="Output as JSON")

    score_parser = subparsers.add_parser("score", help="Score every attempt")
    score_parser.add_argument("--json", action="store_true", help="Output as JSON")

    review_parser = subparsers.add_parser("review", help="Per-question review of one result")
    review_parser.add_argument("result_id", type=int, help="Result id")
    review_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # argparse does not check the env-provided default against choices
    if args.log_level not in LOG_LEVELS:
        print(f"Error: Unknown log level {args.log_level!r}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=args.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        attempts = load_attempts(args)
        print(COMMANDS[args.command](args, attempts))
    except KvizError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
