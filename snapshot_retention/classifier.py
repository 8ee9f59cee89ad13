"""Retention classification of a single snapshot.

A snapshot is kept by the coarser tiers only when it sits on the tier's
anchor day: a Sunday for weekly, the 1st of a month for monthly and
January 1st for yearly. The tiers are checked in that order and the first
one whose window still covers the snapshot wins. Everything here is pure:
the result only depends on the timestamp, ``now`` and the policy.
"""
from datetime import date, datetime, timedelta

from snapshot_retention.errors import ValidationError
from snapshot_retention.models import Classification, RetentionPolicy, Snapshot
from snapshot_retention.utils.calendar_math import subtract_months, subtract_weeks, subtract_years

SUNDAY = 6

TimestampLike = datetime | date | str


def parse_timestamp(value: TimestampLike) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValidationError(f"Malformed timestamp {value!r}: {e}") from e
    raise ValidationError(f"Unsupported timestamp type: {type(value).__name__}")


def _calendar_date(timestamp: datetime, now: datetime) -> date:
    # calendar positions are read in the timezone of the reference time
    if timestamp.tzinfo is not None and now.tzinfo is not None:
        timestamp = timestamp.astimezone(now.tzinfo)
    return timestamp.date()


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now().astimezone()


def classify(
    creation_timestamp: TimestampLike,
    policy: RetentionPolicy,
    now: datetime | None = None,
) -> Classification:
    now = _now(now)
    created = _calendar_date(parse_timestamp(creation_timestamp), now)
    today = now.date()

    if created > today:
        return Classification.KEEP_DAILY
    if created.weekday() == SUNDAY and created >= subtract_weeks(today, policy.weekly):
        return Classification.KEEP_WEEKLY
    if created.day == 1 and created >= subtract_months(today, policy.monthly):
        return Classification.KEEP_MONTHLY
    if created.day == 1 and created.month == 1 and created >= subtract_years(today, policy.yearly):
        return Classification.KEEP_YEARLY
    return Classification.DELETE


def daily_cutoff(policy: RetentionPolicy, now: datetime | None = None) -> datetime:
    now = _now(now)
    try:
        return now - timedelta(days=policy.daily)
    except OverflowError:
        return datetime.min.replace(tzinfo=now.tzinfo)


def is_candidate(snapshot: Snapshot, policy: RetentionPolicy, now: datetime | None = None) -> bool:
    """Daily pre-filter: only unprotected snapshots strictly older than the daily cutoff."""
    if snapshot.protected:
        return False
    now = _now(now)
    cutoff = daily_cutoff(policy, now)
    created = snapshot.creation_timestamp
    if (created.tzinfo is None) != (cutoff.tzinfo is None):
        # mixed naive/aware values: compare wall-clock time in now's zone
        created = created.astimezone(now.tzinfo).replace(tzinfo=None) if created.tzinfo else created
        cutoff = cutoff.replace(tzinfo=None)
    return created < cutoff
