import dataclasses
import uuid

from backend.core.repositories import InMemoryRepository


def generate_supply_id(now):
    """Creation-time token: epoch milliseconds plus a random suffix"""
    return f"{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:8]}"


class InMemorySupplyRepository(InMemoryRepository):
    """Supplies keyed by their generated token, insertion ordered"""

    record_type = 'Supply'

    def prepare_new(self, record, now):
        supply_id = generate_supply_id(now)
        # Ensure id uniqueness
        while supply_id in self._records:
            supply_id = generate_supply_id(now)
        return dataclasses.replace(record, id=supply_id, last_updated=now)

    def touch_fields(self, now):
        return {'last_updated': now}
