import json
import logging
import os
import subprocess
from datetime import datetime

from snapshot_retention.errors import DeletionError, ListingError

logger = logging.getLogger(__name__)


class GcloudClient:
    def __init__(self, binary: str | None = None):
        self.binary: str = binary or os.environ.get("GCLOUD_BIN", "gcloud")

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        cmd = [self.binary, *args]
        logger.debug(f"Running {' '.join(cmd)}")
        return subprocess.run(cmd, check=False, capture_output=True, text=True, env=os.environ)

    def list_snapshots(self, project: str, created_before: datetime, exclude_label: tuple[str, str] | None = None) -> list[dict]:
        query = f"creationTimestamp<'{created_before.isoformat()}'"
        if exclude_label:
            key, value = exclude_label
            query += f" AND labels.{key}!={value}"
        args = ["compute", "snapshots", "list", "--project", project, "--filter", query, "--format", "json"]
        try:
            result = self._run(args)
        except OSError as e:
            raise ListingError(f"Unable to run {self.binary}: {e}") from e
        if result.returncode != 0:
            logger.error(f"Snapshot listing failed with code {result.returncode}")
            raise ListingError(f"Failed to list snapshots in {project}: {result.stderr.strip()}")
        try:
            data = json.loads(result.stdout or "[]")
        except json.JSONDecodeError as e:
            raise ListingError(f"Unreadable snapshot listing for {project}: {e}") from e
        if not isinstance(data, list):
            raise ListingError(f"Unexpected snapshot listing for {project}: {type(data).__name__}")
        return data

    def delete_snapshot(self, project: str, name: str) -> None:
        args = ["compute", "snapshots", "delete", name, "--project", project, "--quiet"]
        try:
            result = self._run(args)
        except OSError as e:
            raise DeletionError(name, f"unable to run {self.binary}: {e}") from e
        if result.returncode != 0:
            logger.error(f"Deleting {name} failed with code {result.returncode}")
            raise DeletionError(name, result.stderr.strip() or f"exit code {result.returncode}")
