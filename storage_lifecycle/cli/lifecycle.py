# storage_lifecycle/cli/lifecycle.py
"""
CLI commands for storage lifecycle management.

Usage:
    python -m storage_lifecycle.cli.lifecycle run
    python -m storage_lifecycle.cli.lifecycle lifecycle --max-concurrency 16
    python -m storage_lifecycle.cli.lifecycle recommend --json
    python -m storage_lifecycle.cli.lifecycle reap
    python -m storage_lifecycle.cli.lifecycle stats
    python -m storage_lifecycle.cli.lifecycle config
"""

import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv

load_dotenv()


def get_catalog(settings):
    """Get the configured file catalog."""
    from storage_lifecycle.storage.factory import get_file_catalog

    return get_file_catalog(settings.STORAGE_PROVIDER, **settings.catalog_kwargs())


def _emit_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _runner_kwargs(args, settings) -> dict:
    return {
        "max_concurrency": args.max_concurrency or settings.LIFECYCLE_MAX_CONCURRENCY,
        "run_timeout_seconds": args.timeout or settings.LIFECYCLE_RUN_TIMEOUT_SECONDS,
    }


def _print_lifecycle(stats) -> None:
    print(f"Status: {stats.status.value}")
    print(f"Listed: {stats.files_listed}")
    print(f"Processed: {stats.files_processed}")
    print(f"Deleted: {stats.files_deleted} ({stats.total_size_freed} bytes freed)")
    print(f"Tiered to Cool: {stats.files_tiered_to_cool}")
    print(f"Tiered to Archive: {stats.files_tiered_to_archive}")
    print(f"Compressed: {stats.files_compressed}")
    print(f"Skipped: {stats.files_skipped}")
    print(f"Errors: {stats.errors}")
    print(f"Estimated savings: ${stats.estimated_cost_savings:.4f}/month")
    print(f"Execution time: {stats.execution_time_ms}ms")

    if stats.error_messages:
        print("\nErrors:")
        for error in stats.error_messages:
            print(f"  - {error}")


def _print_recommendations(report) -> None:
    print(f"Total potential savings: ${report.total_potential_savings:.4f}/month")
    if not report.recommendations:
        print("  No recommendations")
    for rec in report.recommendations:
        print(f"  [{rec.type.value}] {rec.description}: ${rec.potential_savings:.4f}/month")
    if report.errors:
        print(f"  ({report.errors} files could not be inspected)")


def cmd_run(args, settings):
    """Run the full scheduled cleanup job."""
    from storage_lifecycle.services.lifecycle import RunStatus, run_scheduled_cleanup

    result = asyncio.run(
        run_scheduled_cleanup(
            get_catalog(settings),
            settings.cost_optimization_config(),
            **_runner_kwargs(args, settings),
        )
    )

    if args.json:
        _emit_json(result.to_dict())
    else:
        print("\n=== Scheduled Storage Cleanup ===\n")
        _print_lifecycle(result.lifecycle)
        print("\nRecommendations:")
        _print_recommendations(result.recommendations)
        print(f"\nTemporary files deleted: {result.temporary_files_deleted}")
        print(f"Duration: {result.duration_ms}ms\n")

    if result.status is RunStatus.FAILED:
        sys.exit(1)


def cmd_lifecycle(args, settings):
    """Run one lifecycle pass."""
    from storage_lifecycle.services.lifecycle import RunStatus, run_lifecycle

    stats = asyncio.run(
        run_lifecycle(
            get_catalog(settings),
            settings.cost_optimization_config(),
            **_runner_kwargs(args, settings),
        )
    )

    if args.json:
        _emit_json(stats.to_dict())
    else:
        print("\n=== Lifecycle Pass ===\n")
        _print_lifecycle(stats)
        print()

    if stats.status is RunStatus.FAILED:
        sys.exit(1)


def cmd_recommend(args, settings):
    """Show cost optimization recommendations without changing anything."""
    from storage_lifecycle.services.lifecycle import CostOptimizationAdvisor

    advisor = CostOptimizationAdvisor(get_catalog(settings), settings.cost_optimization_config())
    report = asyncio.run(advisor.recommend())

    if args.json:
        _emit_json(report.to_dict())
    else:
        print("\n=== Cost Optimization Recommendations ===\n")
        _print_recommendations(report)
        print()


def cmd_reap(args, settings):
    """Delete expired temporary files."""
    from storage_lifecycle.services.lifecycle import TemporaryFileReaper

    reaper = TemporaryFileReaper(get_catalog(settings), settings.cost_optimization_config())
    deleted = asyncio.run(reaper.reap())

    if args.json:
        _emit_json({"temporary_files_deleted": deleted})
    else:
        print(f"Temporary files deleted: {deleted}")


def cmd_stats(args, settings):
    """Show storage inventory statistics."""
    from storage_lifecycle.services.lifecycle import collect_storage_stats

    stats = asyncio.run(collect_storage_stats(get_catalog(settings)))

    if args.json:
        _emit_json(stats.to_dict())
        return

    print("\n=== Storage Stats ===\n")
    print(f"Total files: {stats.total_files}")
    print(f"Total size: {stats.total_size} bytes")
    print(f"Last modified: {stats.last_modified.isoformat() if stats.last_modified else '-'}")
    print("\nBy category:")
    for category, count in sorted(stats.files_by_category.items()):
        print(f"  {category}: {count}")
    print("\nBy age:")
    for bucket, count in stats.files_by_age.items():
        print(f"  {bucket}: {count}")
    if stats.errors:
        print(f"\nErrors: {stats.errors}")
    print()


def cmd_config(args, settings):
    """Show the effective lifecycle policy."""
    config = settings.cost_optimization_config()

    if args.json:
        _emit_json({"storage_provider": settings.STORAGE_PROVIDER, **config.to_dict()})
        return

    print("\n=== Lifecycle Configuration ===\n")
    print(f"Storage provider: {settings.STORAGE_PROVIDER}")
    for key, value in config.to_dict().items():
        print(f"  {key}: {value}")
    print()


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Storage Lifecycle Management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Daily job: lifecycle pass, recommendations, temp file cleanup
  python -m storage_lifecycle.cli.lifecycle run

  # Preview savings without touching storage
  python -m storage_lifecycle.cli.lifecycle recommend

  # Lifecycle pass with a 10 minute budget
  python -m storage_lifecycle.cli.lifecycle lifecycle --timeout 600
        """,
    )
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON output")

    # --json is also accepted after the subcommand without resetting a top-level --json
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", default=argparse.SUPPRESS, help="Print machine-readable JSON output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # run command
    run_parser = subparsers.add_parser("run", parents=[common], help="Run the full scheduled cleanup")
    run_parser.set_defaults(func=cmd_run)

    # lifecycle command
    lifecycle_parser = subparsers.add_parser("lifecycle", parents=[common], help="Run one lifecycle pass")
    lifecycle_parser.set_defaults(func=cmd_lifecycle)

    for sub in (run_parser, lifecycle_parser):
        sub.add_argument("--max-concurrency", type=int, default=None, help="Parallel per-object workers")
        sub.add_argument("--timeout", type=float, default=None, help="Run budget in seconds")

    # recommend command
    recommend_parser = subparsers.add_parser("recommend", parents=[common], help="Show cost optimization recommendations")
    recommend_parser.set_defaults(func=cmd_recommend)

    # reap command
    reap_parser = subparsers.add_parser("reap", parents=[common], help="Delete expired temporary files")
    reap_parser.set_defaults(func=cmd_reap)

    # stats command
    stats_parser = subparsers.add_parser("stats", parents=[common], help="Show storage statistics")
    stats_parser.set_defaults(func=cmd_stats)

    # config command
    config_parser = subparsers.add_parser("config", parents=[common], help="Show the effective lifecycle policy")
    config_parser.set_defaults(func=cmd_config)

    args = parser.parse_args(argv)

    from storage_lifecycle.config import get_settings
    from storage_lifecycle.logging_config import configure_logging

    settings = get_settings()
    configure_logging(json_format=settings.LOG_FORMAT == "json", level=settings.LOG_LEVEL)

    args.func(args, settings)


if __name__ == "__main__":
    main()
