import dataclasses
from datetime import datetime, timezone as dt_timezone

from django.conf import settings

from backend.core.exceptions import OperationNotSupported
from backend.core.repositories import InMemoryRepository
from .models import Store, STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_WARNING


def demo_stores():
    """The three stores the tracker starts with when demo data is enabled"""
    seeded_at = datetime(2021, 1, 1, tzinfo=dt_timezone.utc)
    statuses = [STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_WARNING]
    return [
        Store(
            id=number,
            name=f'Store {number}',
            status=store_status,
            notes=f'Notes {number}',
            created_at=seeded_at,
            updated_at=seeded_at,
        )
        for number, store_status in enumerate(statuses, start=1)
    ]


class InMemoryStoreRepository(InMemoryRepository):
    """Stores keyed by integer id; new ids are max(existing) + 1"""

    record_type = 'Store'

    @classmethod
    def from_settings(cls):
        if getattr(settings, 'TRACKER_SEED_DEMO_DATA', False):
            return cls(demo_stores())
        return cls()

    def prepare_new(self, record, now):
        next_id = max(self._records, default=0) + 1
        return dataclasses.replace(record, id=next_id, created_at=now, updated_at=now)

    def touch_fields(self, now):
        return {'updated_at': now}

    def remove(self, record_id):
        raise OperationNotSupported('Stores cannot be deleted')
