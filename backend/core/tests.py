"""
Test suite for the core module
Tests: in-memory repository contract, repository registry, error responses
"""
from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings
from rest_framework import status

from backend.core.exceptions import (
    ImportFormatError, NotFound, OperationNotSupported, ValidationError,
)
from backend.core.repositories import get_repository, reset_repositories
from backend.core.utils import error_response
from backend.stores.models import Store
from backend.stores.repository import InMemoryStoreRepository
from backend.supplies.models import Supply
from backend.supplies.repository import InMemorySupplyRepository


class InMemoryRepositoryTests(SimpleTestCase):
    """Test the repository contract through the supply implementation"""

    def setUp(self):
        self.repository = InMemorySupplyRepository()

    def make_supply(self, name='Gloves', quantity=5):
        return Supply(name=name, quantity=quantity, unit='boxes', low_threshold=50)

    def test_add_assigns_id_and_timestamp(self):
        """Test add returns the stored record with id and last_updated"""
        stored = self.repository.add(self.make_supply())
        self.assertIsNotNone(stored.id)
        self.assertIsNotNone(stored.last_updated)
        self.assertEqual(self.repository.get(stored.id), stored)

    def test_generated_ids_are_unique(self):
        """Test ids stay unique for records created in the same instant"""
        ids = {self.repository.add(self.make_supply(name=f'S{i}')).id for i in range(50)}
        self.assertEqual(len(ids), 50)

    def test_list_keeps_insertion_order(self):
        """Test list returns a tuple in insertion order"""
        first = self.repository.add(self.make_supply(name='B'))
        second = self.repository.add(self.make_supply(name='A'))
        snapshot = self.repository.list()
        self.assertIsInstance(snapshot, tuple)
        self.assertEqual([s.id for s in snapshot], [first.id, second.id])

    def test_update_replaces_record(self):
        """Test update produces a new value and leaves old snapshots untouched"""
        stored = self.repository.add(self.make_supply())
        before = self.repository.list()
        updated = self.repository.update(stored.id, quantity=99)
        self.assertEqual(updated.quantity, 99)
        self.assertEqual(before[0].quantity, 5)
        self.assertGreaterEqual(updated.last_updated, stored.last_updated)

    def test_update_ignores_id_field(self):
        """Test the id cannot be rewritten through update"""
        stored = self.repository.add(self.make_supply())
        updated = self.repository.update(stored.id, id='other', name='Mask')
        self.assertEqual(updated.id, stored.id)

    def test_update_missing_raises_not_found(self):
        """Test update on an unknown id raises NotFound"""
        with self.assertRaises(NotFound) as ctx:
            self.repository.update('missing', quantity=1)
        self.assertEqual(ctx.exception.record_id, 'missing')
        self.assertIn('Supply', str(ctx.exception))

    def test_get_missing_raises_not_found(self):
        """Test get on an unknown id raises NotFound"""
        with self.assertRaises(NotFound):
            self.repository.get('missing')
        self.assertFalse(self.repository.exists('missing'))

    def test_remove_is_idempotent(self):
        """Test removing twice (or an unknown id) is a no-op"""
        stored = self.repository.add(self.make_supply())
        self.repository.remove(stored.id)
        self.repository.remove(stored.id)
        self.repository.remove('never-existed')
        self.assertEqual(self.repository.list(), ())

    def test_replace_all_keeps_records_as_given(self):
        """Test replace_all does not restamp records"""
        stored = self.repository.add(self.make_supply())
        other = InMemorySupplyRepository()
        other.replace_all([stored])
        self.assertEqual(other.list(), (stored,))


class StoreRepositoryTests(SimpleTestCase):
    """Test the store repository id generation and delete policy"""

    def test_ids_are_max_plus_one(self):
        """Test new store ids continue from the highest existing id"""
        repository = InMemoryStoreRepository()
        repository.replace_all([Store(id=7, name='Seven')])
        created = repository.add(Store(name='Next'))
        self.assertEqual(created.id, 8)
        self.assertEqual(created.created_at, created.updated_at)

    def test_first_id_is_one(self):
        """Test the first store in an empty repository gets id 1"""
        self.assertEqual(InMemoryStoreRepository().add(Store(name='First')).id, 1)

    def test_remove_not_supported(self):
        """Test stores cannot be deleted"""
        with self.assertRaises(OperationNotSupported):
            InMemoryStoreRepository().remove(1)


class RepositoryRegistryTests(SimpleTestCase):
    """Test repository lookup and reset"""

    def setUp(self):
        reset_repositories()

    def tearDown(self):
        reset_repositories()

    def test_same_instance_per_process(self):
        """Test the registry hands out one instance per name"""
        self.assertIs(get_repository('supplies'), get_repository('supplies'))
        self.assertIsInstance(get_repository('stores'), InMemoryStoreRepository)

    def test_reset_builds_fresh_repository(self):
        """Test reset_repositories drops cached instances"""
        first = get_repository('supplies')
        reset_repositories()
        self.assertIsNot(first, get_repository('supplies'))

    def test_unknown_name(self):
        """Test an unconfigured repository name is a configuration error"""
        with self.assertRaises(ImproperlyConfigured):
            get_repository('warehouses')

    def test_setting_change_resets_registry(self):
        """Test overriding TRACKER_SEED_DEMO_DATA yields a seeded store repository"""
        self.assertEqual(get_repository('stores').list(), ())
        with override_settings(TRACKER_SEED_DEMO_DATA=True):
            names = [store.name for store in get_repository('stores').list()]
            self.assertEqual(names, ['Store 1', 'Store 2', 'Store 3'])
        self.assertEqual(get_repository('stores').list(), ())


class ErrorResponseTests(SimpleTestCase):
    """Test domain errors map to HTTP responses"""

    def test_not_found(self):
        response = error_response(NotFound('Store', 9))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Store with id 9 not found')

    def test_validation_error_details(self):
        response = error_response(ValidationError('Bad', errors={'sort': ['nope']}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['details'], {'sort': ['nope']})

    def test_import_format_error_is_validation_error(self):
        response = error_response(ImportFormatError())
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid file format')

    def test_operation_not_supported(self):
        response = error_response(OperationNotSupported())
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
