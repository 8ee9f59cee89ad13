from .classification import Classification
from .prune_report import PruneReport
from .retention_policy import RetentionPolicy
from .snapshot import Snapshot
from .wrappers import ConfigFile, RetentionSection, SnapshotsList

__all__ = [
    "Classification",
    "ConfigFile",
    "PruneReport",
    "RetentionPolicy",
    "RetentionSection",
    "Snapshot",
    "SnapshotsList",
]
