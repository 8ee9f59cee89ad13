from .policy_repository import PolicyRepository
from .snapshot_repository import SnapshotRepository

__all__ = [
    'PolicyRepository',
    'SnapshotRepository'
]
