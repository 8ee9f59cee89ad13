from pydantic import Field, PositiveInt
from pydantic.dataclasses import dataclass

from snapshot_retention.models.snapshot import Snapshot

@dataclass(frozen=True)
class RetentionSection:
    daily: int | None = None
    weekly: int | None = None
    monthly: int | None = None
    yearly: int | None = None

@dataclass(frozen=True)
class ConfigFile:
    project: str | None = None
    workers: PositiveInt | None = None
    retention: RetentionSection = Field(default_factory=RetentionSection)

@dataclass(frozen=True)
class SnapshotsList:
    snapshots: list[Snapshot]
