"""
Derived view of the supply list: search, then filter, then sort.

The order of the three stages is fixed. ``derive_view`` is a pure function
of its arguments, so results are memoized on (snapshot, query, filter, sort).
"""
import logging
from functools import lru_cache

from pyuca import Collator

from backend.core.exceptions import ValidationError
from .models import FILTER_CHOICES, SORT_CHOICES

logger = logging.getLogger('backend.supplies')

FILTER_MODES = tuple(value for value, _ in FILTER_CHOICES)
SORT_MODES = tuple(value for value, _ in SORT_CHOICES)


def is_low(supply):
    return supply.quantity <= supply.low_threshold


def matches_search(supply, query):
    """Case-insensitive substring match on name or unit; empty query matches everything"""
    if not query:
        return True
    query = query.casefold()
    return query in supply.name.casefold() or query in supply.unit.casefold()


def matches_filter(supply, filter_mode):
    if filter_mode == 'low':
        return is_low(supply)
    if filter_mode == 'ok':
        return not is_low(supply)
    return True


@lru_cache(maxsize=None)
def get_collator():
    """Unicode Collation Algorithm table, loaded once on first name sort"""
    return Collator()


def name_sort_key(supply):
    return get_collator().sort_key(supply.name.casefold())


def sort_supplies(supplies, sort_mode):
    """
    Sort a list of supplies. ``sorted`` is stable, so records that compare
    equal (same quantity, same low/ok group) keep their relative order.
    """
    if sort_mode == 'name':
        return sorted(supplies, key=name_sort_key)
    if sort_mode == 'quantity':
        return sorted(supplies, key=lambda supply: supply.quantity, reverse=True)
    if sort_mode == 'status':
        # Low stock first
        return sorted(supplies, key=lambda supply: 0 if is_low(supply) else 1)
    return list(supplies)


def validate_modes(filter_mode, sort_mode):
    errors = {}
    if filter_mode not in FILTER_MODES:
        errors['filter'] = [f"'{filter_mode}' is not a valid filter. Choose from: {', '.join(FILTER_MODES)}"]
    if sort_mode is not None and sort_mode not in SORT_MODES:
        errors['sort'] = [f"'{sort_mode}' is not a valid sort. Choose from: {', '.join(SORT_MODES)}"]
    if errors:
        raise ValidationError('Invalid view options', errors=errors)


def derive_view(snapshot, search='', filter_mode='all', sort_mode=None):
    """
    Compute the list to render from a snapshot and the current UI controls.

    Args:
        snapshot: Sequence of Supply records (repository ``list()`` output)
        search: Text matched against name and unit
        filter_mode: 'all', 'low' or 'ok'
        sort_mode: 'name', 'quantity', 'status' or None to keep snapshot order

    Returns:
        Tuple of Supply records
    """
    filter_mode = filter_mode or 'all'
    validate_modes(filter_mode, sort_mode)
    return _derive_view(tuple(snapshot), search or '', filter_mode, sort_mode)


@lru_cache(maxsize=64)
def _derive_view(snapshot, search, filter_mode, sort_mode):
    searched = [supply for supply in snapshot if matches_search(supply, search)]
    filtered = [supply for supply in searched if matches_filter(supply, filter_mode)]
    result = tuple(sort_supplies(filtered, sort_mode))
    logger.debug(
        f"Derived view: {len(snapshot)} supplies -> {len(result)} "
        f"(search={search!r}, filter={filter_mode}, sort={sort_mode})"
    )
    return result


def summarize(snapshot):
    """Counts shown next to the list: total items, low stock and adequate"""
    low_stock = sum(1 for supply in snapshot if is_low(supply))
    return {
        'total': len(snapshot),
        'low_stock': low_stock,
        'adequate': len(snapshot) - low_stock,
    }
