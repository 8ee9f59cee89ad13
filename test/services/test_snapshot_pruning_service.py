from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from snapshot_retention.errors import DeletionError, ListingError
from snapshot_retention.models import Classification, RetentionPolicy, Snapshot
from snapshot_retention.services.snapshot_pruning_service import SnapshotPruningService

NOW = datetime(2024, 3, 10, 12, 0)


@pytest.fixture
def snapshots():
    return [
        Snapshot(name="weekly-0218", creation_timestamp=datetime(2024, 2, 18, 2)),
        Snapshot(name="monthly-0201", creation_timestamp=datetime(2024, 2, 1, 2)),
        Snapshot(name="old-0204", creation_timestamp=datetime(2024, 2, 4, 2)),
        Snapshot(name="daily-0227", creation_timestamp=datetime(2024, 2, 27, 2)),
        Snapshot(name="yearly-2020", creation_timestamp=datetime(2020, 1, 1, 2)),
    ]


@pytest.fixture
def mock_repo():
    with patch("snapshot_retention.services.snapshot_pruning_service.SnapshotRepository") as mock:
        repo = MagicMock()
        mock.return_value = repo
        yield repo


@pytest.fixture
def lines():
    return []


def make_service(lines, dry_run=False, workers=1):
    svc = SnapshotPruningService(
        "proj",
        RetentionPolicy(daily=7, weekly=4, monthly=12, yearly=5),
        dry_run=dry_run,
        workers=workers,
        now=NOW,
        output=lines.append,
    )
    svc.logger = MagicMock()
    return svc


def test_run_classifies_and_deletes(mock_repo, snapshots, lines):
    mock_repo.find_candidates.return_value = snapshots
    service = make_service(lines)

    report = service.run()

    mock_repo.find_candidates.assert_called_once_with(datetime(2024, 3, 3, 12, 0))
    assert lines == [
        "Valid weekly - keeping weekly-0218",
        "Valid monthly - keeping monthly-0201",
        "Deleting old-0204",
        "Deleting daily-0227",
        "Valid yearly - keeping yearly-2020",
    ]
    assert [c.args[0] for c in mock_repo.delete.call_args_list] == ["old-0204", "daily-0227"]
    assert report.deleted == ["old-0204", "daily-0227"]
    assert report.kept == ["weekly-0218", "monthly-0201", "yearly-2020"]
    assert report.ok


def test_dry_run_never_deletes(mock_repo, snapshots, lines):
    mock_repo.find_candidates.return_value = snapshots
    service = make_service(lines, dry_run=True)

    report = service.run()

    mock_repo.delete.assert_not_called()
    assert "Dry run - would delete old-0204" in lines
    assert "Deleting old-0204" not in lines
    assert report.deleted == []
    assert report.ok


def test_dry_run_is_repeatable(mock_repo, snapshots):
    mock_repo.find_candidates.return_value = snapshots
    first, second = [], []

    first_report = make_service(first, dry_run=True).run()
    second_report = make_service(second, dry_run=True).run()

    assert first == second
    assert first_report.decisions == second_report.decisions


def test_deletion_failure_does_not_abort_run(mock_repo, snapshots, lines):
    mock_repo.find_candidates.return_value = snapshots

    def delete_side_effect(name):
        if name == "old-0204":
            raise DeletionError(name, "resource is in use")

    mock_repo.delete.side_effect = delete_side_effect
    service = make_service(lines)

    report = service.run()

    assert mock_repo.delete.call_count == 2
    assert report.deleted == ["daily-0227"]
    assert list(report.failures) == ["old-0204"]
    assert "resource is in use" in report.failures["old-0204"]
    assert not report.ok
    service.logger.error.assert_called_once()


def test_concurrent_deletions(mock_repo, snapshots, lines):
    mock_repo.find_candidates.return_value = snapshots
    mock_repo.delete.side_effect = [None, DeletionError("daily-0227", "not found")]
    service = make_service(lines, workers=4)

    report = service.run()

    assert mock_repo.delete.call_count == 2
    assert len(report.deleted) + len(report.failures) == 2
    assert not report.ok


def test_listing_error_is_fatal(mock_repo, lines):
    mock_repo.find_candidates.side_effect = ListingError("permission denied")
    service = make_service(lines)

    with pytest.raises(ListingError):
        service.run()
    mock_repo.delete.assert_not_called()
    assert lines == []


def test_non_candidates_are_skipped(mock_repo, lines):
    mock_repo.find_candidates.return_value = [
        Snapshot(name="recent", creation_timestamp=datetime(2024, 3, 5)),
        Snapshot(name="protected", creation_timestamp=datetime(2024, 2, 6), labels={"delete": "never"}),
        Snapshot(name="old", creation_timestamp=datetime(2024, 2, 6)),
    ]
    service = make_service(lines)

    report = service.run()

    assert report.decisions == [("old", Classification.DELETE)]
    mock_repo.delete.assert_called_once_with("old")
    assert service.logger.warning.call_count == 2


def test_empty_inventory(mock_repo, lines):
    mock_repo.find_candidates.return_value = []
    report = make_service(lines).run()
    assert lines == []
    assert report.ok
    mock_repo.delete.assert_not_called()
