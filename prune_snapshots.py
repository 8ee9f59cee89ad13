#!/usr/bin/env python3
import argparse
import os
import sys

from pydantic import ValidationError as ModelValidationError

from snapshot_retention.errors import ListingError, ValidationError
from snapshot_retention.models import ConfigFile, RetentionPolicy
from snapshot_retention.repositories import PolicyRepository
from snapshot_retention.services.snapshot_pruning_service import SnapshotPruningService
from snapshot_retention.utils.logging import setup_logger

DEFAULT_CONFIG_FILE = "retention.yaml"


class UsageParser(argparse.ArgumentParser):
    def error(self, message: str):
        self.print_usage(sys.stderr)
        sys.stderr.write(f"{self.prog}: error: {message}\n")
        sys.exit(1)


def build_parser() -> UsageParser:
    parser = UsageParser(prog="prune-snapshots", description="Snapshot retention of GCE disks")
    parser.add_argument("-p", dest="project", help="Google project name [REQUIRED]")
    parser.add_argument("-d", dest="daily", type=int, help="Days to keep daily snapshots (default: 7)")
    parser.add_argument("-w", dest="weekly", type=int, help="Weeks to keep Sunday snapshots (default: 4)")
    parser.add_argument("-m", dest="monthly", type=int, help="Months to keep 1st-of-month snapshots (default: 12)")
    parser.add_argument("-y", dest="yearly", type=int, help="Years to keep January 1st snapshots (default: 5)")
    parser.add_argument("-n", dest="dry_run", action="store_true", help="Print the configuration and the would-be deletions without deleting anything")
    parser.add_argument("-c", dest="config", help=f"YAML configuration file (default: $RETENTION_CONFIG_FILE or {DEFAULT_CONFIG_FILE})")
    parser.add_argument("-j", dest="workers", type=int, help="Number of concurrent deletions (default: 1)")
    return parser


def _pick(*values):
    return next((v for v in values if v is not None), None)


def resolve_policy(args: argparse.Namespace, config: ConfigFile) -> RetentionPolicy:
    defaults = RetentionPolicy()
    section = config.retention
    try:
        return RetentionPolicy(
            daily=_pick(args.daily, section.daily, defaults.daily),
            weekly=_pick(args.weekly, section.weekly, defaults.weekly),
            monthly=_pick(args.monthly, section.monthly, defaults.monthly),
            yearly=_pick(args.yearly, section.yearly, defaults.yearly),
        )
    except ModelValidationError as e:
        raise ValidationError(f"Invalid retention policy: {e}") from e


def print_configuration(policy: RetentionPolicy, project: str, dry_run: bool) -> None:
    print(f"DAILY_RETENTION={policy.daily}")
    print(f"WEEKLY_RETENTION={policy.weekly}")
    print(f"MONTHLY_RETENTION={policy.monthly}")
    print(f"YEARLY_RETENTION={policy.yearly}")
    print(f"PROJECT={project}")
    print(f"DRY_RUN={str(dry_run).lower()}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = setup_logger("SnapshotRetention")

    try:
        config_file = args.config or os.environ.get("RETENTION_CONFIG_FILE", DEFAULT_CONFIG_FILE)
        config = PolicyRepository(config_file).load()
        project = _pick(args.project, config.project)
        if not project:
            parser.error("the following arguments are required: -p")
        policy = resolve_policy(args, config)
        workers = _pick(args.workers, config.workers, 1)
        if workers < 1:
            raise ValidationError(f"Worker count must be positive, got {workers}")
    except ValidationError as e:
        logger.error(str(e))
        parser.print_usage(sys.stderr)
        return 1

    if args.dry_run:
        print_configuration(policy, project, args.dry_run)

    try:
        logger.info(f"Starting snapshot retention for project {project}")
        service = SnapshotPruningService(project, policy, dry_run=args.dry_run, workers=workers)
        report = service.run()
    except (ValidationError, ListingError) as e:
        logger.error(f"Snapshot retention run failed: {e}")
        return 1

    if not report.ok:
        logger.error(f"{len(report.failures)} snapshot deletion(s) failed: {', '.join(report.failures)}")
        return 1
    logger.info("Snapshot retention run completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
