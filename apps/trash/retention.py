"""Retention window arithmetic for trashed records."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.utils import timezone

RETENTION_DAYS = 30


@dataclass(frozen=True)
class RetentionStatus:
    days_left: int
    eligible_for_purge: bool
    label: str

    def as_dict(self):
        return {
            'days_left': self.days_left,
            'eligible_for_purge': self.eligible_for_purge,
            'label': self.label,
        }


def retention_days() -> int:
    return getattr(settings, 'TRASH_RETENTION_DAYS', RETENTION_DAYS)


def retention_status(deleted_at: datetime, now: Optional[datetime] = None) -> RetentionStatus:
    """
    Days left before a trashed record is due for purge.

    ``days_left = retention - floor(elapsed / 1 day)``. The value is
    informational; nothing purges automatically when it reaches zero.
    """
    now = now or timezone.now()
    elapsed_days = (now - deleted_at) // timedelta(days=1)
    days_left = retention_days() - elapsed_days

    if days_left <= 0:
        return RetentionStatus(days_left, True, 'Will be deleted soon')
    if days_left == 1:
        return RetentionStatus(days_left, False, '1 day')
    return RetentionStatus(days_left, False, f'{days_left} days')


def purge_cutoff(now: Optional[datetime] = None) -> datetime:
    """Rows deleted at or before this moment are eligible for purge."""
    now = now or timezone.now()
    return now - timedelta(days=retention_days())
