from backend.core.exceptions import ValidationError
from .models import ORDERING_CHOICES

ORDERINGS = tuple(value for value, _ in ORDERING_CHOICES)


def order_stores(snapshot, ordering='oldest'):
    """Stores in creation order ('oldest') or newest first by id ('newest')"""
    if ordering not in ORDERINGS:
        raise ValidationError(
            'Invalid ordering',
            errors={'ordering': [f"'{ordering}' is not a valid ordering. Choose from: {', '.join(ORDERINGS)}"]},
        )
    if ordering == 'newest':
        return sorted(snapshot, key=lambda store: store.id, reverse=True)
    return list(snapshot)
