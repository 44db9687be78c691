"""
Test utilities and factories for creating test data
"""
import random
import string

from backend.core.repositories import get_repository, reset_repositories
from backend.stores.services import create_store
from backend.supplies.services import add_supply


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def fresh_repositories():
        """Drop cached repositories so the test starts from empty collections"""
        reset_repositories()
        return get_repository('supplies'), get_repository('stores')

    @staticmethod
    def create_supply(repository=None, name=None, quantity=10, unit='boxes', low_threshold=50):
        """Create a test supply"""
        if repository is None:
            repository = get_repository('supplies')
        if not name:
            name = f'Supply_{TestDataFactory.random_string(6)}'
        return add_supply(
            repository,
            name=name,
            quantity=quantity,
            unit=unit,
            low_threshold=low_threshold,
        )

    @staticmethod
    def create_store(repository=None, name=None, status=None, notes=None):
        """Create a test store, optionally moved to a given status / notes"""
        if repository is None:
            repository = get_repository('stores')
        if not name:
            name = f'Store_{TestDataFactory.random_string(6)}'
        store = create_store(repository, name)
        fields = {}
        if status is not None:
            fields['status'] = status
        if notes is not None:
            fields['notes'] = notes
        if fields:
            store = repository.update(store.id, **fields)
        return store

    @staticmethod
    def supply_payload(name=None, quantity='10', unit='boxes', low_threshold='50'):
        """Form payload as the add/edit form submits it (all strings)"""
        return {
            'name': name or f'Supply_{TestDataFactory.random_string(6)}',
            'quantity': quantity,
            'unit': unit,
            'lowThreshold': low_threshold,
        }
