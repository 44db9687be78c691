"""
Test suite for the Stores module
Tests: store creation, status toggling, notes updates, PATCH contract, API endpoints
"""
from django.test import SimpleTestCase, override_settings
from rest_framework import status
from rest_framework.test import APISimpleTestCase

from backend.core.exceptions import NotFound, ValidationError
from backend.core.test_utils import TestDataFactory
from backend.stores.filters import order_stores
from backend.stores.models import (
    STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_NEEDS_ACTION, STATUS_WARNING,
)
from backend.stores.repository import InMemoryStoreRepository
from backend.stores.services import (
    create_store, patch_store, set_store_status, toggle_store_status, update_store_notes,
)


class StoreServiceTests(SimpleTestCase):
    """Test store mutation handlers"""

    def setUp(self):
        self.repository = InMemoryStoreRepository()

    def test_create_store(self):
        """Test a new store starts in progress with empty notes"""
        store = create_store(self.repository, '  Store 1234 ')
        self.assertEqual(store.id, 1)
        self.assertEqual(store.name, 'Store 1234')
        self.assertEqual(store.status, STATUS_IN_PROGRESS)
        self.assertEqual(store.notes, '')
        self.assertIsNotNone(store.created_at)
        self.assertEqual(create_store(self.repository, 'Next').id, 2)

    def test_create_store_requires_name(self):
        with self.assertRaises(ValidationError):
            create_store(self.repository, '   ')
        self.assertEqual(self.repository.list(), ())

    def test_toggle_in_progress_and_completed(self):
        """Test toggle flips between in-progress and completed"""
        store = TestDataFactory.create_store(self.repository)
        completed = toggle_store_status(self.repository, store)
        self.assertEqual(completed.status, STATUS_COMPLETED)
        self.assertTrue(completed.is_completed)
        self.assertEqual(toggle_store_status(self.repository, completed).status, STATUS_IN_PROGRESS)

    def test_toggle_warning_goes_to_in_progress(self):
        """Test toggling a warning store lands on in-progress, not completed"""
        store = TestDataFactory.create_store(self.repository, status=STATUS_WARNING)
        self.assertEqual(toggle_store_status(self.repository, store).status, STATUS_IN_PROGRESS)
        store = TestDataFactory.create_store(self.repository, status=STATUS_NEEDS_ACTION)
        self.assertEqual(toggle_store_status(self.repository, store).status, STATUS_IN_PROGRESS)

    def test_set_store_status(self):
        """Test explicit selection reaches every status"""
        store = TestDataFactory.create_store(self.repository)
        for value in (STATUS_WARNING, STATUS_NEEDS_ACTION, STATUS_COMPLETED, STATUS_IN_PROGRESS):
            self.assertEqual(set_store_status(self.repository, store.id, value).status, value)

    def test_set_invalid_status(self):
        store = TestDataFactory.create_store(self.repository)
        with self.assertRaises(ValidationError):
            set_store_status(self.repository, store.id, 'archived')

    def test_update_notes(self):
        """Test notes change refreshes updated_at"""
        store = TestDataFactory.create_store(self.repository, notes='old')
        updated = update_store_notes(self.repository, store.id, 'new')
        self.assertEqual(updated.notes, 'new')
        self.assertGreaterEqual(updated.updated_at, store.updated_at)

    def test_update_notes_unchanged_skips_write(self):
        """Test identical notes leave updated_at untouched"""
        store = TestDataFactory.create_store(self.repository, notes='same')
        result = update_store_notes(self.repository, store.id, 'same')
        self.assertIs(result, self.repository.get(store.id))
        self.assertEqual(result.updated_at, store.updated_at)

    def test_update_notes_missing_store(self):
        with self.assertRaises(NotFound):
            update_store_notes(self.repository, 99, 'x')

    def test_patch_store(self):
        """Test patch applies status and notes together"""
        store = TestDataFactory.create_store(self.repository)
        patched = patch_store(self.repository, store.id, status=STATUS_WARNING, notes='Call ISP')
        self.assertEqual(patched.status, STATUS_WARNING)
        self.assertEqual(patched.notes, 'Call ISP')

    def test_patch_missing_store(self):
        """Test patching an unknown id raises NotFound"""
        with self.assertRaises(NotFound):
            patch_store(self.repository, 42, status=STATUS_COMPLETED)

    def test_order_stores(self):
        """Test oldest/newest ordering"""
        first = TestDataFactory.create_store(self.repository)
        second = TestDataFactory.create_store(self.repository)
        snapshot = self.repository.list()
        self.assertEqual([s.id for s in order_stores(snapshot)], [first.id, second.id])
        self.assertEqual([s.id for s in order_stores(snapshot, 'newest')], [second.id, first.id])
        with self.assertRaises(ValidationError):
            order_stores(snapshot, 'random')


class StoreAPITests(APISimpleTestCase):
    """Test Store API endpoints"""

    def setUp(self):
        _, self.repository = TestDataFactory.fresh_repositories()

    def test_list_stores(self):
        TestDataFactory.create_store(self.repository, name='Store 1')
        TestDataFactory.create_store(self.repository, name='Store 2')
        response = self.client.get('/api/v1/stores/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['name'] for s in response.data], ['Store 1', 'Store 2'])
        self.assertIn('createdAt', response.data[0])
        response = self.client.get('/api/v1/stores/', {'ordering': 'newest'})
        self.assertEqual([s['name'] for s in response.data], ['Store 2', 'Store 1'])

    def test_list_invalid_ordering(self):
        response = self.client.get('/api/v1/stores/', {'ordering': 'sideways'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_store(self):
        """Test POST /stores creates with max id + 1"""
        TestDataFactory.create_store(self.repository)
        response = self.client.post('/api/v1/stores/', {'name': ' Store 1234 '})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['id'], 2)
        self.assertEqual(response.data['name'], 'Store 1234')
        self.assertEqual(response.data['status'], STATUS_IN_PROGRESS)
        self.assertEqual(response.data['notes'], '')

    def test_create_store_blank_name(self):
        response = self.client.post('/api/v1/stores/', {'name': '  '})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['name'], ['Store name is required'])

    def test_patch_status_and_notes(self):
        store = TestDataFactory.create_store(self.repository)
        response = self.client.patch(
            f'/api/v1/stores/{store.id}/', {'status': STATUS_NEEDS_ACTION, 'notes': 'Router down'},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], STATUS_NEEDS_ACTION)
        self.assertEqual(response.data['notes'], 'Router down')

    def test_patch_same_notes_keeps_timestamp(self):
        """Test PATCH with unchanged notes does not bump updatedAt"""
        store = TestDataFactory.create_store(self.repository, notes='Keep')
        response = self.client.patch(f'/api/v1/stores/{store.id}/', {'notes': 'Keep'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.repository.get(store.id).updated_at, store.updated_at)

    def test_patch_missing_store(self):
        """Test PATCH on unknown id answers 404"""
        response = self.client.patch('/api/v1/stores/99/', {'status': STATUS_COMPLETED})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('not found', response.data['error'])

    def test_patch_invalid_status(self):
        store = TestDataFactory.create_store(self.repository)
        response = self.client.patch(f'/api/v1/stores/{store.id}/', {'status': 'done'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data)

    def test_patch_empty_body(self):
        store = TestDataFactory.create_store(self.repository)
        response = self.client.patch(f'/api/v1/stores/{store.id}/', {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_toggle_endpoint(self):
        store = TestDataFactory.create_store(self.repository, status=STATUS_WARNING)
        response = self.client.post(f'/api/v1/stores/{store.id}/toggle/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], STATUS_IN_PROGRESS)
        response = self.client.post(f'/api/v1/stores/{store.id}/toggle/')
        self.assertEqual(response.data['status'], STATUS_COMPLETED)

    def test_toggle_missing_store(self):
        response = self.client.post('/api/v1/stores/5/toggle/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_not_allowed(self):
        """Test stores have no delete endpoint"""
        store = TestDataFactory.create_store(self.repository)
        response = self.client.delete(f'/api/v1/stores/{store.id}/')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(len(self.repository.list()), 1)

    @override_settings(TRACKER_SEED_DEMO_DATA=True)
    def test_demo_data(self):
        """Test demo stores are served when seeding is enabled"""
        response = self.client.get('/api/v1/stores/')
        self.assertEqual(
            [(s['id'], s['status']) for s in response.data],
            [(1, STATUS_IN_PROGRESS), (2, STATUS_COMPLETED), (3, STATUS_WARNING)],
        )
        response = self.client.post('/api/v1/stores/', {'name': 'Store 4'})
        self.assertEqual(response.data['id'], 4)
