"""Command line entry point for fitmatch."""

import argparse
import asyncio
import json
import sys
from datetime import date
from pathlib import Path

from fitmatch import __version__
from fitmatch.config.settings import Settings
from fitmatch.errors import MatchingError, error_envelope, success_envelope
from fitmatch.utils.logging import configure_logging


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}") from e


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--profile", type=Path, required=True, help="Path to profile (YAML or JSON)"
    )
    parser.add_argument("--job", type=Path, required=True, help="Path to job (YAML or JSON)")
    parser.add_argument(
        "--today",
        type=_iso_date,
        default=None,
        help="Reference date for open-ended roles (YYYY-MM-DD, default: today)",
    )


def _add_db_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--db", type=Path, default=None, help="SQLite DB path (defaults to settings)"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="fitmatch",
        description="fitmatch: profile to job matching and recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fitmatch score --profile profile.yaml --job job.yaml
  python -m fitmatch history record --profile profile.yaml --job job.yaml
  python -m fitmatch recommendations reject <id> --reason "Not relevant"
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available commands",
    )

    score_parser = subparsers.add_parser(
        "score",
        help="Score a profile against a job (files -> MatchResult)",
    )
    _add_input_args(score_parser)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Detailed analysis with strengths, gaps and suggestions",
    )
    _add_input_args(analyze_parser)

    recommend_parser = subparsers.add_parser(
        "recommend",
        help="Generate and store recommendations for a profile/job pair",
    )
    _add_input_args(recommend_parser)
    _add_db_arg(recommend_parser)
    recommend_parser.add_argument(
        "--max", type=int, default=None, help="Maximum number of recommendations"
    )
    recommend_parser.add_argument(
        "--type",
        dest="types",
        action="append",
        default=None,
        help="Only generate this recommendation type (repeatable)",
    )
    recommend_parser.add_argument(
        "--min-priority",
        choices=["high", "medium", "low"],
        default=None,
        help="Drop recommendations below this priority",
    )

    # History
    history_parser = subparsers.add_parser("history", help="Match history and trends")
    history_sub = history_parser.add_subparsers(dest="history_cmd", required=True)

    history_record = history_sub.add_parser(
        "record", help="Store profile version and job, score and record the match"
    )
    _add_input_args(history_record)
    _add_db_arg(history_record)

    history_trend = history_sub.add_parser("trend", help="Score trend over profile versions")
    history_trend.add_argument("--profile-id", required=True)
    history_trend.add_argument("--job-id", required=True)
    _add_db_arg(history_trend)

    history_list = history_sub.add_parser("list", help="Recorded matches, newest first")
    history_list_target = history_list.add_mutually_exclusive_group(required=True)
    history_list_target.add_argument("--profile-id", default=None)
    history_list_target.add_argument("--job-id", default=None)
    _add_db_arg(history_list)

    # Recommendations
    recs_parser = subparsers.add_parser(
        "recommendations", help="List and resolve stored recommendations"
    )
    recs_sub = recs_parser.add_subparsers(dest="recs_cmd", required=True)

    recs_list = recs_sub.add_parser("list", help="List recommendations for a profile")
    recs_list.add_argument("--profile-id", required=True)
    recs_list.add_argument("--job-id", default=None)
    _add_db_arg(recs_list)

    recs_complete = recs_sub.add_parser("complete", help="Mark a recommendation completed")
    recs_complete.add_argument("recommendation_id")
    _add_db_arg(recs_complete)

    recs_reject = recs_sub.add_parser("reject", help="Reject a recommendation with a reason")
    recs_reject.add_argument("recommendation_id")
    recs_reject.add_argument("--reason", required=True)
    _add_db_arg(recs_reject)

    return parser


async def _run_recommend(parsed: argparse.Namespace, db_path: Path) -> object:
    from fitmatch.job.repository import JobRepository
    from fitmatch.loader import load_job, load_profile
    from fitmatch.profile.repository import ProfileRepository
    from fitmatch.recommendations.models import GenerationOptions, Priority, RecommendationType
    from fitmatch.recommendations.repository import RecommendationRepository
    from fitmatch.recommendations.service import RecommendationService

    profile = load_profile(parsed.profile)
    job = load_job(parsed.job)
    try:
        options = GenerationOptions(
            max_recommendations=parsed.max,
            types=[RecommendationType(value) for value in parsed.types]
            if parsed.types
            else None,
            min_priority=Priority(parsed.min_priority) if parsed.min_priority else None,
        )
    except ValueError as e:
        raise MatchingError.validation(f"Invalid recommendation options: {e}") from e

    repo = RecommendationRepository(db_path)
    await repo.initialize()
    try:
        service = RecommendationService(
            repo, profiles=ProfileRepository(db_path), jobs=JobRepository(db_path)
        )
        return await service.generate_for(profile, job, options, today=parsed.today)
    finally:
        await repo.close()


async def _run_history(parsed: argparse.Namespace, db_path: Path, logger) -> object:
    from fitmatch.engine import MatchingService
    from fitmatch.history.repository import MatchHistoryRepository
    from fitmatch.history.service import MatchHistoryTracker
    from fitmatch.job.repository import JobRepository
    from fitmatch.loader import load_job, load_profile
    from fitmatch.profile.repository import ProfileRepository

    profiles = ProfileRepository(db_path)
    jobs = JobRepository(db_path)
    history = MatchHistoryRepository(db_path)
    for repo in (profiles, jobs, history):
        await repo.initialize()

    try:
        tracker = MatchHistoryTracker(history)

        if parsed.history_cmd == "record":
            profile = load_profile(parsed.profile)
            job = load_job(parsed.job)

            latest = await profiles.latest_version(profile.id)
            if latest is None or profile.version > latest:
                await profiles.save_version(profile)
            elif profile.version < latest:
                logger.warning(
                    "Profile %s file is version %d but v%d is stored; scoring v%d",
                    profile.id,
                    profile.version,
                    latest,
                    latest,
                )
            await jobs.save(job)

            service = MatchingService(profiles, jobs, tracker)
            return await service.calculate_match(profile.id, job.id, today=parsed.today)

        if parsed.history_cmd == "trend":
            return await tracker.get_trend(parsed.profile_id, parsed.job_id)

        if parsed.profile_id:
            return await tracker.get_profile_history(parsed.profile_id)
        return await tracker.get_job_history(parsed.job_id)
    finally:
        for repo in (profiles, jobs, history):
            await repo.close()


async def _run_recommendations(parsed: argparse.Namespace, db_path: Path) -> object:
    from fitmatch.job.repository import JobRepository
    from fitmatch.profile.repository import ProfileRepository
    from fitmatch.recommendations.repository import RecommendationRepository
    from fitmatch.recommendations.service import RecommendationService

    repo = RecommendationRepository(db_path)
    await repo.initialize()
    try:
        service = RecommendationService(
            repo, profiles=ProfileRepository(db_path), jobs=JobRepository(db_path)
        )
        if parsed.recs_cmd == "list":
            if parsed.job_id:
                return await service.get_recommendations_for_profile_and_job(
                    parsed.profile_id, parsed.job_id
                )
            return await service.get_recommendations_for_profile(parsed.profile_id)
        if parsed.recs_cmd == "complete":
            return await service.mark_as_completed(parsed.recommendation_id)
        return await service.mark_as_rejected(parsed.recommendation_id, parsed.reason)
    finally:
        await repo.close()


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Load settings
    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Configure logging
    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    # If no mode specified, show help
    if parsed.mode is None:
        parser.print_help()
        return 0

    db_path = getattr(parsed, "db", None) or settings.db_path

    try:
        if parsed.mode in {"score", "analyze"}:
            from fitmatch.loader import load_job, load_profile, validate_profile
            from fitmatch.matching.analyzer import DetailedAnalyzer
            from fitmatch.matching.scorer import MatchScorer

            profile = load_profile(parsed.profile)
            job = load_job(parsed.job)
            for warning in validate_profile(profile):
                logger.warning("Profile %s: %s", profile.id, warning)

            if parsed.mode == "score":
                data = MatchScorer().score(profile, job, today=parsed.today)
            else:
                data = DetailedAnalyzer().analyze(profile, job, today=parsed.today)
        elif parsed.mode == "recommend":
            data = asyncio.run(_run_recommend(parsed, db_path))
        elif parsed.mode == "history":
            data = asyncio.run(_run_history(parsed, db_path, logger))
        elif parsed.mode == "recommendations":
            data = asyncio.run(_run_recommendations(parsed, db_path))
        else:
            print(f"Unknown mode: {parsed.mode}", file=sys.stderr)
            return 1
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MatchingError as e:
        logger.error("%s", e)
        _print_json(error_envelope(e))
        return 1

    _print_json(success_envelope(data))
    return 0


if __name__ == "__main__":
    sys.exit(main())
