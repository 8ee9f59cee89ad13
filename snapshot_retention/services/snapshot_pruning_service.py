import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable

from typing_extensions import override

from snapshot_retention.classifier import classify, daily_cutoff, is_candidate
from snapshot_retention.errors import DeletionError
from snapshot_retention.models import Classification, PruneReport, RetentionPolicy, Snapshot
from snapshot_retention.repositories import SnapshotRepository
from snapshot_retention.services.service import Service
from snapshot_retention.utils.logging import setup_logger

DRY_RUN_LINE = "Dry run - would delete {name}"


class SnapshotPruningService(Service):
    def __init__(
        self,
        project: str,
        policy: RetentionPolicy,
        dry_run: bool = False,
        workers: int = 1,
        now: datetime | None = None,
        output: Callable[[str], None] = print,
    ):
        self.repo: SnapshotRepository = SnapshotRepository(project)
        self.project: str = project
        self.policy: RetentionPolicy = policy
        self.dry_run: bool = dry_run
        self.workers: int = max(1, workers)
        self.now: datetime = now if now is not None else datetime.now().astimezone()
        self.output: Callable[[str], None] = output
        self.logger: logging.Logger = setup_logger("SnapshotPruningService")

    @override
    def run(self) -> PruneReport:
        cutoff = daily_cutoff(self.policy, self.now)
        self.logger.info(f"Reviewing all snapshots older than {cutoff.date().isoformat()} in {self.project}")

        # the whole inventory is listed before anything is classified
        snapshots = self.repo.find_candidates(cutoff)
        report = PruneReport()
        to_delete: list[str] = []

        for snapshot in snapshots:
            if not is_candidate(snapshot, self.policy, self.now):
                self.logger.warning(f"Skipping {snapshot.name}: protected or within daily retention")
                continue
            classification = self.classify(snapshot)
            report.decisions.append((snapshot.name, classification))
            if classification.keep:
                self.output(classification.describe(snapshot.name))
            elif self.dry_run:
                self.output(DRY_RUN_LINE.format(name=snapshot.name))
            else:
                self.output(classification.describe(snapshot.name))
                to_delete.append(snapshot.name)

        self.delete_all(to_delete, report)
        self.logger.info(
            f"Kept {len(report.kept)}, deleted {len(report.deleted)}, failed {len(report.failures)} snapshot(s)"
        )
        return report

    def classify(self, snapshot: Snapshot) -> Classification:
        return classify(snapshot.creation_timestamp, self.policy, self.now)

    def delete_all(self, names: list[str], report: PruneReport) -> None:
        if not names:
            return
        if self.workers == 1:
            for name in names:
                self._record(name, self._delete(name), report)
            return
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = {name: executor.submit(self._delete, name) for name in names}
            for name, future in futures.items():
                self._record(name, future.result(), report)

    def _delete(self, name: str) -> DeletionError | None:
        try:
            self.repo.delete(name)
            return None
        except DeletionError as e:
            return e

    def _record(self, name: str, error: DeletionError | None, report: PruneReport) -> None:
        if error is None:
            report.deleted.append(name)
            self.logger.info(f"Snapshot {name} has been deleted.")
        else:
            report.failures[name] = str(error)
            self.logger.error(str(error))
