"""
Mutation handlers for the supply tracker.

Each handler takes the repository first, applies one user intent and
returns the stored result. Form input arrives already parsed by
``SupplyFormSerializer``; these functions do not re-validate it.
"""
import json
import logging
from datetime import timezone as dt_timezone

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from backend.core.exceptions import ImportFormatError, NotFound, ValidationError
from backend.core.repositories import get_repository
from .models import DEFAULT_LOW_THRESHOLD, Supply
from .serializers import SupplySerializer, is_finite

logger = logging.getLogger('backend.supplies')

EDITABLE_FIELDS = ('name', 'quantity', 'unit', 'low_threshold')


def get_supply_repository():
    return get_repository('supplies')


def handle_missing_supply(exc):
    """
    Unknown ids raise NotFound unless TRACKER_STRICT_MISSING_IDS is off,
    in which case the update is dropped and None returned.
    """
    if getattr(settings, 'TRACKER_STRICT_MISSING_IDS', True):
        raise exc
    logger.warning(f"Ignoring update for unknown supply {exc.record_id}")
    return None


def add_supply(repository, *, name, quantity, unit, low_threshold=DEFAULT_LOW_THRESHOLD):
    supply = repository.add(Supply(
        name=name.strip(),
        quantity=quantity,
        unit=unit.strip(),
        low_threshold=low_threshold,
    ))
    logger.info(f"Supply '{supply.name}' added with id {supply.id}")
    return supply


def update_supply(repository, supply_id, **fields):
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(
            'Unknown supply fields',
            errors={field: ['This field cannot be edited.'] for field in sorted(unknown)},
        )
    for field in ('name', 'unit'):
        if field in fields:
            fields[field] = fields[field].strip()
    try:
        supply = repository.update(supply_id, **fields)
    except NotFound as exc:
        return handle_missing_supply(exc)
    logger.info(f"Supply {supply_id} updated: {', '.join(sorted(fields)) or 'timestamp only'}")
    return supply


def adjust_quantity(repository, supply_id, delta):
    """Add ``delta`` to the quantity, clamping at zero"""
    try:
        current = repository.get(supply_id)
        supply = repository.update(supply_id, quantity=max(0, current.quantity + delta))
    except NotFound as exc:
        return handle_missing_supply(exc)
    logger.info(f"Supply {supply_id} quantity {current.quantity} -> {supply.quantity} (delta {delta})")
    return supply


def delete_supply(repository, supply_id):
    repository.remove(supply_id)
    logger.info(f"Supply {supply_id} deleted")


def clear_supplies(repository):
    count = len(repository.list())
    repository.replace_all(())
    logger.info(f"Cleared {count} supplies")


# --- Import / export ---

def is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and is_finite(value)


def is_filled_text(value):
    return isinstance(value, str) and value != ''


def load_import_document(raw):
    """
    Return the list under ``supplies`` from a JSON document given as text,
    bytes or an already decoded object.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8-sig')
        except UnicodeDecodeError:
            raise ImportFormatError('Import file is not UTF-8 text')
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise ImportFormatError('Import file is not valid JSON')
    if not isinstance(raw, dict) or not isinstance(raw.get('supplies'), list):
        raise ImportFormatError('Import document has no supplies list')
    return raw['supplies']


def supply_from_import(entry, now):
    """Build a Supply from an import entry, or None when the entry is incomplete"""
    if not isinstance(entry, dict):
        return None
    supply_id = entry.get('id')
    if isinstance(supply_id, bool) or not isinstance(supply_id, (str, int)) or not supply_id:
        return None
    if not (is_filled_text(entry.get('name')) and is_filled_text(entry.get('unit'))):
        return None
    if not (is_number(entry.get('quantity')) and is_number(entry.get('lowThreshold'))):
        return None

    last_updated = None
    raw_timestamp = entry.get('lastUpdated')
    if isinstance(raw_timestamp, str):
        try:
            last_updated = parse_datetime(raw_timestamp)
        except ValueError:
            last_updated = None
    if last_updated is not None and timezone.is_naive(last_updated):
        last_updated = timezone.make_aware(last_updated, dt_timezone.utc)

    return Supply(
        id=str(supply_id),
        name=entry['name'],
        quantity=entry['quantity'],
        unit=entry['unit'],
        low_threshold=entry['lowThreshold'],
        last_updated=last_updated or now,
    )


def import_supplies(repository, raw):
    """
    Replace the whole collection with the valid entries of an import document.

    Entries missing any of id, name, quantity, unit or lowThreshold (or with
    the wrong types) are dropped. If nothing survives, ImportFormatError is
    raised and the repository is left untouched.
    """
    entries = load_import_document(raw)
    now = timezone.now()

    supplies = []
    seen_ids = set()
    for entry in entries:
        supply = supply_from_import(entry, now)
        if supply is None:
            continue
        if supply.id in seen_ids:
            logger.warning(f"Skipping duplicate supply id {supply.id} in import")
            continue
        seen_ids.add(supply.id)
        supplies.append(supply)

    if not supplies:
        logger.warning(f"Import rejected: none of {len(entries)} entries is a valid supply")
        raise ImportFormatError('No valid supplies found')

    dropped = len(entries) - len(supplies)
    if dropped:
        logger.warning(f"Import dropped {dropped} invalid supply entries")

    repository.replace_all(supplies)
    logger.info(f"Imported {len(supplies)} supplies")
    return tuple(supplies)


def export_supplies(repository):
    """The ``{"supplies": [...]}`` document accepted back by ``import_supplies``"""
    return {'supplies': SupplySerializer(repository.list(), many=True).data}
