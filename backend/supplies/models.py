from dataclasses import dataclass
from datetime import datetime
from typing import Optional

DEFAULT_LOW_THRESHOLD = 50

FILTER_CHOICES = [
    ('all', 'All'),
    ('low', 'Low Stock'),
    ('ok', 'Adequate'),
]

SORT_CHOICES = [
    ('name', 'Name'),
    ('quantity', 'Quantity'),
    ('status', 'Status'),
]


@dataclass(frozen=True)
class Supply:
    """A tracked consumable (gloves, paper...) with its replenish threshold"""
    name: str
    quantity: float
    unit: str
    low_threshold: float
    id: Optional[str] = None
    last_updated: Optional[datetime] = None

    def __str__(self):
        return f"{self.name} ({self.quantity} {self.unit})"

    @property
    def is_low(self):
        """Low stock once quantity falls to or below the threshold"""
        return self.quantity <= self.low_threshold
