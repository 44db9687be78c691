"""
Comprehensive test suite for the Supplies module
Tests: derived view (search/filter/sort), mutation handlers, import/export, API endpoints
"""
import json
from datetime import datetime, timezone as dt_timezone

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings
from rest_framework import status
from rest_framework.test import APISimpleTestCase

from backend.core.exceptions import ImportFormatError, NotFound, ValidationError
from backend.core.test_utils import TestDataFactory
from backend.supplies.filters import derive_view, is_low, summarize
from backend.supplies.models import Supply
from backend.supplies.repository import InMemorySupplyRepository
from backend.supplies.services import (
    add_supply, adjust_quantity, clear_supplies, delete_supply, export_supplies,
    import_supplies, update_supply,
)

STAMP = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)


def supply(supply_id, name, quantity, low_threshold=50, unit='boxes'):
    return Supply(
        id=supply_id, name=name, quantity=quantity, unit=unit,
        low_threshold=low_threshold, last_updated=STAMP,
    )


class DerivedViewTests(SimpleTestCase):
    """Test the search -> filter -> sort pipeline"""

    def setUp(self):
        self.gloves = supply('1', 'Gloves', 5)
        self.paper = supply('2', 'Paper', 124, unit='reams')
        self.snapshot = (self.gloves, self.paper)

    def names(self, supplies):
        return [s.name for s in supplies]

    def test_low_filter_scenario(self):
        """Test filter 'low' keeps only Gloves"""
        self.assertEqual(self.names(derive_view(self.snapshot, filter_mode='low')), ['Gloves'])

    def test_quantity_sort_scenario(self):
        """Test quantity sort on the unfiltered set is descending"""
        self.assertEqual(self.names(derive_view(self.snapshot, sort_mode='quantity')), ['Paper', 'Gloves'])

    def test_ok_filter(self):
        """Test filter 'ok' keeps items above threshold"""
        self.assertEqual(self.names(derive_view(self.snapshot, filter_mode='ok')), ['Paper'])

    def test_low_and_ok_partition_snapshot(self):
        """Test low and ok are disjoint and together cover every record"""
        snapshot = (
            self.gloves, self.paper,
            supply('3', 'Tape', 50), supply('4', 'Pens', 51), supply('5', 'Masks', 0),
        )
        low = set(derive_view(snapshot, filter_mode='low'))
        ok = set(derive_view(snapshot, filter_mode='ok'))
        self.assertFalse(low & ok)
        self.assertEqual(low | ok, set(snapshot))
        for item in snapshot:
            self.assertEqual(item in low, item.quantity <= item.low_threshold)
            self.assertEqual(item.is_low, is_low(item))

    def test_threshold_boundary_is_low(self):
        """Test quantity equal to threshold counts as low"""
        tape = supply('3', 'Tape', 50)
        self.assertTrue(tape.is_low)
        self.assertEqual(derive_view((tape,), filter_mode='low'), (tape,))

    def test_search_matches_name_or_unit_case_insensitive(self):
        """Test search hits name or unit regardless of case"""
        self.assertEqual(self.names(derive_view(self.snapshot, search='GLO')), ['Gloves'])
        self.assertEqual(self.names(derive_view(self.snapshot, search='Ream')), ['Paper'])
        self.assertEqual(derive_view(self.snapshot, search='xyz'), ())

    def test_empty_search_passes_everything(self):
        """Test empty query keeps the snapshot as-is"""
        self.assertEqual(derive_view(self.snapshot, search=''), self.snapshot)
        self.assertEqual(derive_view(self.snapshot), self.snapshot)

    def test_search_runs_before_filter(self):
        """Test search and filter combine (only low items matching the query)"""
        snapshot = self.snapshot + (supply('3', 'Paper towels', 10),)
        result = derive_view(snapshot, search='paper', filter_mode='low', sort_mode='name')
        self.assertEqual(self.names(result), ['Paper towels'])

    def test_name_sort_ascending_case_insensitive(self):
        """Test name sort ignores case"""
        snapshot = (supply('1', 'tape', 1), supply('2', 'Apron', 1), supply('3', 'Gloves', 1))
        self.assertEqual(self.names(derive_view(snapshot, sort_mode='name')), ['Apron', 'Gloves', 'tape'])

    def test_name_sort_places_accented_names_alphabetically(self):
        """Test accented names collate with their base letter instead of after Z"""
        snapshot = (supply('1', 'Zebra', 1), supply('2', 'Éclair', 1), supply('3', 'apple', 1))
        self.assertEqual(self.names(derive_view(snapshot, sort_mode='name')), ['apple', 'Éclair', 'Zebra'])

    def test_status_sort_low_first_and_stable(self):
        """Test status sort puts low stock first, keeping relative order within groups"""
        snapshot = (
            supply('1', 'A-ok', 100), supply('2', 'B-low', 1),
            supply('3', 'C-ok', 200), supply('4', 'D-low', 2),
        )
        self.assertEqual(
            self.names(derive_view(snapshot, sort_mode='status')),
            ['B-low', 'D-low', 'A-ok', 'C-ok'],
        )

    def test_quantity_sort_stable_for_ties(self):
        """Test equal quantities keep snapshot order"""
        snapshot = (supply('1', 'First', 10), supply('2', 'Second', 10), supply('3', 'Big', 30))
        self.assertEqual(self.names(derive_view(snapshot, sort_mode='quantity')), ['Big', 'First', 'Second'])

    def test_resorting_is_repeatable(self):
        """Test quantity -> name -> quantity reproduces the first quantity order"""
        snapshot = (
            supply('1', 'Tape', 10), supply('2', 'Apron', 10),
            supply('3', 'Gloves', 5), supply('4', 'Paper', 124),
        )
        first = derive_view(snapshot, sort_mode='quantity')
        derive_view(snapshot, sort_mode='name')
        again = derive_view(snapshot, sort_mode='quantity')
        self.assertEqual(first, again)
        self.assertEqual(snapshot[0].name, 'Tape')

    def test_snapshot_not_mutated(self):
        """Test the pipeline does not reorder its input"""
        snapshot = [self.gloves, self.paper]
        derive_view(snapshot, sort_mode='quantity')
        self.assertEqual(snapshot, [self.gloves, self.paper])

    def test_invalid_modes(self):
        """Test unknown filter or sort modes raise ValidationError"""
        with self.assertRaises(ValidationError) as ctx:
            derive_view(self.snapshot, filter_mode='empty')
        self.assertIn('filter', ctx.exception.errors)
        with self.assertRaises(ValidationError) as ctx:
            derive_view(self.snapshot, sort_mode='price')
        self.assertIn('sort', ctx.exception.errors)

    def test_summary_counts(self):
        """Test summary totals"""
        self.assertEqual(summarize(self.snapshot), {'total': 2, 'low_stock': 1, 'adequate': 1})
        self.assertEqual(summarize(()), {'total': 0, 'low_stock': 0, 'adequate': 0})


class SupplyServiceTests(SimpleTestCase):
    """Test supply mutation handlers against an in-memory repository"""

    def setUp(self):
        self.repository = InMemorySupplyRepository()

    def test_add_supply_trims_text(self):
        """Test add trims name and unit"""
        created = add_supply(self.repository, name='  Gloves ', quantity=5.0, unit=' boxes ', low_threshold=50.0)
        self.assertEqual(created.name, 'Gloves')
        self.assertEqual(created.unit, 'boxes')
        self.assertEqual(self.repository.list(), (created,))

    def test_update_supply_merges_fields(self):
        """Test update merges fields and refreshes last_updated"""
        created = TestDataFactory.create_supply(self.repository, name='Gloves', quantity=5)
        updated = update_supply(self.repository, created.id, quantity=40.0, unit='packs')
        self.assertEqual(updated.name, 'Gloves')
        self.assertEqual(updated.quantity, 40.0)
        self.assertEqual(updated.unit, 'packs')
        self.assertGreaterEqual(updated.last_updated, created.last_updated)

    def test_update_supply_rejects_unknown_fields(self):
        """Test only editable fields can be updated"""
        created = TestDataFactory.create_supply(self.repository)
        with self.assertRaises(ValidationError):
            update_supply(self.repository, created.id, last_updated=STAMP)

    def test_update_missing_supply_raises(self):
        """Test unknown id raises NotFound by default"""
        with self.assertRaises(NotFound):
            update_supply(self.repository, 'missing', quantity=1)

    @override_settings(TRACKER_STRICT_MISSING_IDS=False)
    def test_update_missing_supply_ignored_when_not_strict(self):
        """Test unknown id is ignored when strict handling is off"""
        self.assertIsNone(update_supply(self.repository, 'missing', quantity=1))
        self.assertIsNone(adjust_quantity(self.repository, 'missing', 1))
        self.assertEqual(self.repository.list(), ())

    def test_adjust_quantity(self):
        """Test positive and negative adjustments"""
        created = TestDataFactory.create_supply(self.repository, quantity=5)
        self.assertEqual(adjust_quantity(self.repository, created.id, 1).quantity, 6)
        self.assertEqual(adjust_quantity(self.repository, created.id, -2).quantity, 4)

    def test_adjust_quantity_never_negative(self):
        """Test quantity clamps at zero for any delta"""
        created = TestDataFactory.create_supply(self.repository, quantity=3)
        for delta in (-4, -100, -3.5, -1):
            result = adjust_quantity(self.repository, created.id, delta)
            self.assertGreaterEqual(result.quantity, 0)
        self.assertEqual(self.repository.get(created.id).quantity, 0)

    def test_adjust_missing_supply_raises(self):
        with self.assertRaises(NotFound):
            adjust_quantity(self.repository, 'missing', -1)

    def test_delete_is_idempotent(self):
        """Test deleting twice leaves the collection empty without errors"""
        created = TestDataFactory.create_supply(self.repository)
        delete_supply(self.repository, created.id)
        delete_supply(self.repository, created.id)
        self.assertEqual(self.repository.list(), ())

    def test_clear_supplies(self):
        TestDataFactory.create_supply(self.repository)
        TestDataFactory.create_supply(self.repository)
        clear_supplies(self.repository)
        self.assertEqual(self.repository.list(), ())


class SupplyImportExportTests(SimpleTestCase):
    """Test import filtering, rejection and export round-trip"""

    def setUp(self):
        self.repository = InMemorySupplyRepository()
        self.existing = TestDataFactory.create_supply(self.repository, name='Existing')

    def test_round_trip(self):
        """Test export then import yields an equal collection"""
        TestDataFactory.create_supply(self.repository, name='Gloves', quantity=5, low_threshold=50)
        TestDataFactory.create_supply(self.repository, name='Paper', quantity=124.5, low_threshold=50)
        before = self.repository.list()
        document = json.loads(json.dumps(export_supplies(self.repository)))

        other = InMemorySupplyRepository()
        import_supplies(other, document)
        self.assertEqual(other.list(), before)

    def test_import_rejects_incomplete_entries(self):
        """Test an import with no valid records is rejected and the store unchanged"""
        with self.assertRaises(ImportFormatError):
            import_supplies(self.repository, {'supplies': [{'id': '1', 'name': 'X'}]})
        self.assertEqual(self.repository.list(), (self.existing,))

    def test_import_filters_invalid_entries(self):
        """Test invalid entries are dropped and the rest replace the collection"""
        document = {'supplies': [
            {'id': 'a', 'name': 'Gloves', 'quantity': 5, 'unit': 'boxes', 'lowThreshold': 50},
            {'id': 'b', 'name': 'Paper', 'quantity': '5', 'unit': 'reams', 'lowThreshold': 50},
            {'id': 'c', 'name': 'Tape', 'quantity': True, 'unit': 'rolls', 'lowThreshold': 50},
            {'id': '', 'name': 'Pens', 'quantity': 5, 'unit': 'boxes', 'lowThreshold': 50},
            {'id': 'e', 'name': 'Masks', 'quantity': 5, 'unit': '', 'lowThreshold': 50},
            'not-an-object',
        ]}
        imported = import_supplies(self.repository, document)
        self.assertEqual([s.id for s in imported], ['a'])
        self.assertEqual(self.repository.list(), imported)

    def test_import_numeric_id_and_missing_timestamp(self):
        """Test numeric ids are kept as text and missing timestamps are stamped"""
        imported = import_supplies(self.repository, {'supplies': [
            {'id': 7, 'name': 'Gloves', 'quantity': 5, 'unit': 'boxes', 'lowThreshold': 50},
        ]})
        self.assertEqual(imported[0].id, '7')
        self.assertIsNotNone(imported[0].last_updated)

    def test_import_from_json_text(self):
        """Test JSON text and bytes are accepted"""
        payload = json.dumps({'supplies': [
            {'id': 'x', 'name': 'Gloves', 'quantity': 1, 'unit': 'boxes', 'lowThreshold': 2,
             'lastUpdated': '2024-01-01T00:00:00Z'},
        ]})
        imported = import_supplies(self.repository, payload.encode('utf-8'))
        self.assertEqual(imported[0].last_updated, STAMP)

    def test_import_malformed_documents(self):
        """Test malformed JSON and wrong shapes abort the import"""
        for raw in ('{not json', b'\xff\xfe', '[]', {'supplies': 'nope'}, {'items': []}, {'supplies': []}):
            with self.assertRaises(ImportFormatError):
                import_supplies(self.repository, raw)
        self.assertEqual(self.repository.list(), (self.existing,))

    def test_import_skips_duplicate_ids(self):
        """Test the first entry wins when ids repeat"""
        imported = import_supplies(self.repository, {'supplies': [
            {'id': 'a', 'name': 'First', 'quantity': 1, 'unit': 'u', 'lowThreshold': 1},
            {'id': 'a', 'name': 'Second', 'quantity': 1, 'unit': 'u', 'lowThreshold': 1},
        ]})
        self.assertEqual([s.name for s in imported], ['First'])

    def test_import_drops_numbers_too_large_for_a_float(self):
        """Test an integer beyond float range is a badly typed entry, not a crash"""
        imported = import_supplies(self.repository, {'supplies': [
            {'id': 'a', 'name': 'Gloves', 'quantity': 5, 'unit': 'boxes', 'lowThreshold': 50},
            {'id': 'b', 'name': 'Paper', 'quantity': 10 ** 400, 'unit': 'reams', 'lowThreshold': 50},
            {'id': 'c', 'name': 'Tape', 'quantity': 5, 'unit': 'rolls', 'lowThreshold': 10 ** 400},
        ]})
        self.assertEqual([s.id for s in imported], ['a'])

    def test_round_trip_keeps_large_integers_exact(self):
        """Test integer quantities are exported as integers without float rounding"""
        big = 2 ** 53 + 1
        import_supplies(self.repository, {'supplies': [
            {'id': 'a', 'name': 'Screws', 'quantity': big, 'unit': 'pieces', 'lowThreshold': 50,
             'lastUpdated': '2024-01-01T00:00:00Z'},
            {'id': 'b', 'name': 'Paint', 'quantity': 2.5, 'unit': 'litres', 'lowThreshold': 1,
             'lastUpdated': '2024-01-01T00:00:00Z'},
        ]})
        document = json.loads(json.dumps(export_supplies(self.repository)))
        self.assertEqual(document['supplies'][0]['quantity'], big)
        self.assertIsInstance(document['supplies'][0]['lowThreshold'], int)
        self.assertEqual(document['supplies'][1]['quantity'], 2.5)

        other = InMemorySupplyRepository()
        import_supplies(other, document)
        self.assertEqual(other.list(), self.repository.list())


class SupplyAPITests(APISimpleTestCase):
    """Test Supply API endpoints"""

    def setUp(self):
        self.repository, _ = TestDataFactory.fresh_repositories()

    def test_create_supply(self):
        """Test creating a supply from string form fields"""
        response = self.client.post('/api/v1/supplies/', TestDataFactory.supply_payload(
            name=' Gloves ', quantity='5', low_threshold='50',
        ))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Gloves')
        self.assertEqual(response.data['quantity'], 5.0)
        self.assertEqual(response.data['lowThreshold'], 50.0)
        self.assertIn('lastUpdated', response.data)
        self.assertEqual(len(self.repository.list()), 1)

    def test_create_supply_default_threshold(self):
        """Test lowThreshold defaults to 50"""
        response = self.client.post('/api/v1/supplies/', {'name': 'Tape', 'quantity': '3', 'unit': 'rolls'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['lowThreshold'], 50.0)

    def test_create_supply_validation_errors(self):
        """Test invalid form input is rejected without touching the store"""
        response = self.client.post('/api/v1/supplies/', {
            'name': '  ', 'quantity': 'abc', 'unit': '', 'lowThreshold': '0',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['name'], ['Item name is required'])
        self.assertEqual(response.data['quantity'], ['Enter a valid quantity'])
        self.assertEqual(response.data['unit'], ['Unit type is required (e.g., boxes, kg, pieces)'])
        self.assertEqual(response.data['lowThreshold'], ['Enter a valid threshold'])
        self.assertEqual(self.repository.list(), ())

    def test_create_supply_negative_quantity(self):
        response = self.client.post('/api/v1/supplies/', TestDataFactory.supply_payload(quantity='-1'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['quantity'], ['Enter a valid quantity'])

    def test_list_with_filter_and_sort(self):
        """Test list endpoint applies search, filter and sort"""
        TestDataFactory.create_supply(self.repository, name='Gloves', quantity=5, low_threshold=50)
        TestDataFactory.create_supply(self.repository, name='Paper', quantity=124, low_threshold=50)

        response = self.client.get('/api/v1/supplies/', {'filter': 'low'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['name'] for s in response.data], ['Gloves'])

        response = self.client.get('/api/v1/supplies/', {'sort': 'quantity'})
        self.assertEqual([s['name'] for s in response.data], ['Paper', 'Gloves'])

        response = self.client.get('/api/v1/supplies/', {'search': 'pap'})
        self.assertEqual([s['name'] for s in response.data], ['Paper'])

    def test_list_default_sort_by_name(self):
        TestDataFactory.create_supply(self.repository, name='Tape')
        TestDataFactory.create_supply(self.repository, name='Apron')
        response = self.client.get('/api/v1/supplies/')
        self.assertEqual([s['name'] for s in response.data], ['Apron', 'Tape'])

    def test_list_invalid_filter(self):
        response = self.client.get('/api/v1/supplies/', {'filter': 'bogus'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('filter', response.data['details'])

    def test_retrieve_and_missing(self):
        created = TestDataFactory.create_supply(self.repository, name='Gloves')
        response = self.client.get(f'/api/v1/supplies/{created.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], created.id)
        response = self.client.get('/api/v1/supplies/missing/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_patch_supply(self):
        """Test partial edit through the form contract"""
        created = TestDataFactory.create_supply(self.repository, name='Gloves', quantity=5)
        response = self.client.patch(f'/api/v1/supplies/{created.id}/', {'quantity': '80'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 80.0)
        self.assertEqual(response.data['name'], 'Gloves')

    def test_put_requires_all_fields(self):
        created = TestDataFactory.create_supply(self.repository)
        response = self.client.put(f'/api/v1/supplies/{created.id}/', {'quantity': '80'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_put_without_threshold_keeps_current_threshold(self):
        """Test a full edit that leaves out lowThreshold does not reset it to the default"""
        created = TestDataFactory.create_supply(self.repository, name='Gloves', low_threshold=20)
        response = self.client.put(f'/api/v1/supplies/{created.id}/', {
            'name': 'Gloves', 'quantity': '8', 'unit': 'boxes',
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['lowThreshold'], 20)
        self.assertEqual(self.repository.get(created.id).low_threshold, 20)

    def test_whole_numbers_stay_integers(self):
        """Test whole form numbers are stored and returned as integers"""
        response = self.client.post('/api/v1/supplies/', TestDataFactory.supply_payload(quantity='12'))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsInstance(response.data['quantity'], int)
        self.assertIsInstance(self.repository.get(response.data['id']).quantity, int)
        response = self.client.post('/api/v1/supplies/', TestDataFactory.supply_payload(quantity='12.5'))
        self.assertEqual(response.data['quantity'], 12.5)

    def test_create_rejects_quantity_beyond_float_range(self):
        payload = TestDataFactory.supply_payload()
        payload['quantity'] = 10 ** 400
        response = self.client.post('/api/v1/supplies/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['quantity'], ['Enter a valid quantity'])

    def test_patch_missing_supply(self):
        """Test editing an unknown id answers 404"""
        response = self.client.patch('/api/v1/supplies/missing/', {'quantity': '1'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    @override_settings(TRACKER_STRICT_MISSING_IDS=False)
    def test_patch_missing_supply_not_strict(self):
        response = self.client.patch('/api/v1/supplies/missing/', {'quantity': '1'})
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_delete_supply_idempotent(self):
        created = TestDataFactory.create_supply(self.repository)
        for _ in range(2):
            response = self.client.delete(f'/api/v1/supplies/{created.id}/')
            self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.repository.list(), ())

    def test_adjust_quantity_clamps(self):
        """Test the adjust endpoint never goes below zero"""
        created = TestDataFactory.create_supply(self.repository, quantity=2)
        response = self.client.post(f'/api/v1/supplies/{created.id}/adjust/', {'delta': -5})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 0)
        response = self.client.post(f'/api/v1/supplies/{created.id}/adjust/', {'delta': 1})
        self.assertEqual(response.data['quantity'], 1)

    def test_adjust_requires_delta(self):
        created = TestDataFactory.create_supply(self.repository)
        response = self.client.post(f'/api/v1/supplies/{created.id}/adjust/', {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_summary(self):
        TestDataFactory.create_supply(self.repository, quantity=5, low_threshold=50)
        TestDataFactory.create_supply(self.repository, quantity=124, low_threshold=50)
        response = self.client.get('/api/v1/supplies/summary/')
        self.assertEqual(response.data, {'total': 2, 'low_stock': 1, 'adequate': 1})

    def test_export_then_import_round_trip(self):
        """Test exported document imports back to the same collection"""
        TestDataFactory.create_supply(self.repository, name='Gloves', quantity=5)
        TestDataFactory.create_supply(self.repository, name='Paper', quantity=124)
        before = self.repository.list()

        response = self.client.get('/api/v1/supplies/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('attachment; filename="supplies-', response['Content-Disposition'])
        document = json.loads(response.content)
        self.assertEqual(len(document['supplies']), 2)

        self.client.post('/api/v1/supplies/clear/')
        self.assertEqual(self.repository.list(), ())

        response = self.client.post('/api/v1/supplies/import/', document, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Imported 2 supplies')
        self.assertEqual(response.data['message_ttl'], 3)
        self.assertEqual(self.repository.list(), before)

    def test_import_file_upload(self):
        """Test importing from an uploaded JSON file"""
        content = json.dumps({'supplies': [
            {'id': 'a', 'name': 'Gloves', 'quantity': 5, 'unit': 'boxes', 'lowThreshold': 50},
        ]}).encode('utf-8')
        upload = SimpleUploadedFile('supplies.json', content, content_type='application/json')
        response = self.client.post('/api/v1/supplies/import/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_import_rejected_leaves_store(self):
        """Test an import without valid supplies is rejected with a transient message"""
        existing = TestDataFactory.create_supply(self.repository)
        response = self.client.post(
            '/api/v1/supplies/import/', {'supplies': [{'id': '1', 'name': 'X'}]}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid file format')
        self.assertEqual(response.data['message_ttl'], 3)
        self.assertEqual(self.repository.list(), (existing,))

    def test_import_malformed_json_body(self):
        response = self.client.generic(
            'POST', '/api/v1/supplies/import/', '{broken', content_type='application/json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid file format')
