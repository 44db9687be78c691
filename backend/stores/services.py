"""
Mutation handlers for the store tracker.

Unknown store ids always raise NotFound; callers get a failure, never a
silent no-op.
"""
import logging

from backend.core.exceptions import ValidationError
from backend.core.repositories import get_repository
from .models import Store, STATUS_CHOICES, STATUS_COMPLETED, STATUS_IN_PROGRESS

logger = logging.getLogger('backend.stores')

VALID_STATUSES = tuple(value for value, _ in STATUS_CHOICES)


def get_store_repository():
    return get_repository('stores')


def create_store(repository, name):
    name = name.strip()
    if not name:
        raise ValidationError('Store name is required', errors={'name': ['Store name is required']})
    store = repository.add(Store(name=name, status=STATUS_IN_PROGRESS, notes=''))
    logger.info(f"Store '{store.name}' created with id {store.id}")
    return store


def toggled_status(current_status):
    """in-progress becomes completed; completed, warning and needs-action become in-progress"""
    if current_status == STATUS_IN_PROGRESS:
        return STATUS_COMPLETED
    return STATUS_IN_PROGRESS


def toggle_store_status(repository, store):
    """
    Flip a store between in-progress and completed. Warning and needs-action
    are only reachable through explicit selection; toggling them lands on
    in-progress.
    """
    new_status = toggled_status(store.status)
    updated = repository.update(store.id, status=new_status)
    logger.info(f"Store {store.id} toggled {store.status} -> {new_status}")
    return updated


def set_store_status(repository, store_id, status):
    if status not in VALID_STATUSES:
        raise ValidationError(
            'Invalid status',
            errors={'status': [f"'{status}' is not a valid status. Choose from: {', '.join(VALID_STATUSES)}"]},
        )
    updated = repository.update(store_id, status=status)
    logger.info(f"Store {store_id} status set to {status}")
    return updated


def update_store_notes(repository, store_id, notes):
    """Write notes only when they differ from the stored value"""
    current = repository.get(store_id)
    if current.notes == notes:
        logger.debug(f"Store {store_id} notes unchanged, skipping write")
        return current
    updated = repository.update(store_id, notes=notes)
    logger.info(f"Store {store_id} notes updated")
    return updated


def patch_store(repository, store_id, status=None, notes=None):
    """Apply a partial update of status and/or notes. Raises NotFound for unknown ids."""
    store = repository.get(store_id)
    if status is not None:
        store = set_store_status(repository, store_id, status)
    if notes is not None:
        store = update_store_notes(repository, store_id, notes)
    return store
