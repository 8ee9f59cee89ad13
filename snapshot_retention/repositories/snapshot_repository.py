from datetime import datetime

from snapshot_retention.clients.gcloud_client import GcloudClient
from snapshot_retention.errors import ValidationError
from snapshot_retention.models import Snapshot, SnapshotsList
from snapshot_retention.models.snapshot import PROTECTED_LABEL, PROTECTED_VALUE


class SnapshotRepository:
    def __init__(self, project: str, client: GcloudClient | None = None):
        if not project:
            raise ValidationError("A project is required")
        self.project: str = project
        self.client: GcloudClient = client or GcloudClient()

    def find_candidates(self, created_before: datetime) -> list[Snapshot]:
        raw = self.client.list_snapshots(
            self.project,
            created_before,
            exclude_label=(PROTECTED_LABEL, PROTECTED_VALUE),
        )
        try:
            parsed = SnapshotsList(snapshots=[
                {
                    "name": item.get("name"),
                    "creation_timestamp": item.get("creationTimestamp"),
                    "labels": item.get("labels") or {},
                }
                for item in raw
            ])
        except Exception as e:
            raise ValidationError(f"Invalid snapshot listing for {self.project}: {e}") from e
        return parsed.snapshots

    def delete(self, name: str) -> None:
        self.client.delete_snapshot(self.project, name)
