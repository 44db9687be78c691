from dataclasses import dataclass
from datetime import datetime
from typing import Optional

STATUS_IN_PROGRESS = 'in-progress'
STATUS_COMPLETED = 'completed'
STATUS_WARNING = 'warning'
STATUS_NEEDS_ACTION = 'needs-action'

STATUS_CHOICES = [
    (STATUS_IN_PROGRESS, 'In Progress'),
    (STATUS_COMPLETED, 'Completed'),
    (STATUS_WARNING, 'Warning'),
    (STATUS_NEEDS_ACTION, 'Needs Action'),
]

ORDERING_CHOICES = [
    ('oldest', 'Oldest first'),
    ('newest', 'Newest first'),
]


@dataclass(frozen=True)
class Store:
    """A store being worked through, with its progress status and free-text notes"""
    name: str
    status: str = STATUS_IN_PROGRESS
    notes: str = ''
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __str__(self):
        return f"#{self.id} {self.name}"

    @property
    def is_completed(self):
        return self.status == STATUS_COMPLETED
