"""
Repository abstraction for tracker records.

Records are immutable dataclasses; every write replaces the stored value
with a new one and ``list()`` hands out a tuple snapshot, so nothing outside
a repository can observe a half-applied mutation.

Views never import a repository instance directly. They ask the registry
(``get_repository``) which builds the class configured in
``settings.TRACKER_REPOSITORIES`` once per process.
"""
import dataclasses
import logging
import threading
from abc import ABC, abstractmethod

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils import timezone
from django.utils.module_loading import import_string

from .exceptions import NotFound

logger = logging.getLogger('backend.core')


class Repository(ABC):
    """CRUD contract every tracker repository implements"""

    record_type = 'Record'

    @classmethod
    def from_settings(cls):
        """Build an instance from Django settings (registry entry point)"""
        return cls()

    @abstractmethod
    def add(self, record):
        """Store a new record, assigning its id and timestamps. Returns the stored record."""

    @abstractmethod
    def get(self, record_id):
        """Return the record with this id or raise NotFound"""

    @abstractmethod
    def update(self, record_id, **fields):
        """Merge ``fields`` into the record and stamp it. Raises NotFound for unknown ids."""

    @abstractmethod
    def remove(self, record_id):
        """Delete a record"""

    @abstractmethod
    def list(self):
        """Snapshot of all records in insertion order"""

    @abstractmethod
    def replace_all(self, records):
        """Swap the whole collection (bulk import / clear)"""

    def exists(self, record_id):
        try:
            self.get(record_id)
        except NotFound:
            return False
        return True


class InMemoryRepository(Repository):
    """
    Dict-backed repository guarded by a lock.

    Subclasses decide how ids are generated (``prepare_new``) and which
    timestamp fields a write refreshes (``touch_fields``).
    """

    def __init__(self, records=()):
        self._lock = threading.Lock()
        self._records = {record.id: record for record in records}

    @abstractmethod
    def prepare_new(self, record, now):
        """Return ``record`` with id and creation timestamps filled in"""

    @abstractmethod
    def touch_fields(self, now):
        """Timestamp fields to refresh on every update"""

    def add(self, record):
        now = timezone.now()
        with self._lock:
            stored = self.prepare_new(record, now)
            self._records[stored.id] = stored
        logger.debug(f"{self.record_type} {stored.id} added")
        return stored

    def get(self, record_id):
        with self._lock:
            record = self._records.get(record_id)
        if record is None:
            raise NotFound(self.record_type, record_id)
        return record

    def update(self, record_id, **fields):
        fields.pop('id', None)
        now = timezone.now()
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                raise NotFound(self.record_type, record_id)
            updated = dataclasses.replace(current, **{**fields, **self.touch_fields(now)})
            self._records[record_id] = updated
        logger.debug(f"{self.record_type} {record_id} updated: {sorted(fields)}")
        return updated

    def remove(self, record_id):
        with self._lock:
            self._records.pop(record_id, None)

    def list(self):
        with self._lock:
            return tuple(self._records.values())

    def replace_all(self, records):
        replacement = {record.id: record for record in records}
        with self._lock:
            self._records = replacement
        logger.debug(f"{self.record_type} collection replaced ({len(replacement)} records)")


# --- Registry ---

_registry = {}
_registry_lock = threading.Lock()


def get_repository(name):
    """Return the process-wide repository configured for ``name``"""
    with _registry_lock:
        repository = _registry.get(name)
        if repository is None:
            try:
                dotted_path = settings.TRACKER_REPOSITORIES[name]
            except (AttributeError, KeyError):
                raise ImproperlyConfigured(f"No repository configured for '{name}' in TRACKER_REPOSITORIES")
            repository_class = import_string(dotted_path)
            repository = repository_class.from_settings()
            _registry[name] = repository
            logger.info(f"Initialized {name} repository ({dotted_path})")
        return repository


def reset_repositories():
    """Drop every cached repository; the next lookup builds fresh ones"""
    with _registry_lock:
        _registry.clear()


@receiver(setting_changed)
def reset_on_setting_changed(setting, **kwargs):
    if setting in ('TRACKER_REPOSITORIES', 'TRACKER_SEED_DEMO_DATA'):
        reset_repositories()
