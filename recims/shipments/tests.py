"""
Test suite for the shipments module
Tests: inbound shipments, status transitions, QC criteria, inspections and dispositions
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.shipments.models import InboundShipment, QCInspection
from recims.shipments.qc import evaluate_inspection
from recims.shipments.services import (
    ShipmentError, change_status, reopen_shipment, record_inspection, set_disposition,
)


class QCEvaluationTests(TestCase):
    """evaluate_inspection"""

    criteria = {
        'min_purity_percent': Decimal('95.00'),
        'max_contamination_percent': Decimal('2.50'),
        'max_moisture_percent': None,
        'lab_testing_required': True,
    }

    def test_no_criteria_passes(self):
        self.assertEqual(evaluate_inspection({'visual_inspection_pass': False}, None), ('pass', [], []))

    def test_all_thresholds_met(self):
        result, passed, failed = evaluate_inspection({
            'measured_purity_percent': '96',
            'measured_contamination_percent': '1',
            'visual_inspection_pass': True,
        }, self.criteria)
        self.assertEqual(result, 'pass')
        self.assertEqual(failed, [])
        self.assertIn('Purity requirements met', passed)
        self.assertIn('Contamination within limits', passed)

    def test_failures_are_listed(self):
        result, passed, failed = evaluate_inspection({
            'measured_purity_percent': '90',
            'measured_contamination_percent': '3',
            'visual_inspection_pass': False,
            'lab_test_pass': False,
        }, self.criteria)
        self.assertEqual(result, 'fail')
        self.assertEqual(failed, [
            'Purity below minimum (95%)',
            'Contamination exceeds limit (2.5%)',
            'Visual inspection failed',
            'Lab test failed',
        ])

    def test_missing_measurements_skip_checks(self):
        result, passed, failed = evaluate_inspection({'visual_inspection_pass': True}, self.criteria)
        self.assertEqual(result, 'pass')
        self.assertEqual(passed, ['Visual inspection passed'])


class ShipmentStatusTests(TestCase):
    """Status transition map"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')

    def test_allowed_transition(self):
        shipment = TestDataFactory.create_shipment(tenant_id='ACME', status='pending_inspection')
        change_status(shipment, 'approved', self.user)
        shipment.refresh_from_db()
        self.assertEqual(shipment.status, 'approved')

    def test_forbidden_transition(self):
        shipment = TestDataFactory.create_shipment(tenant_id='ACME', status='completed')
        with self.assertRaisesMessage(ShipmentError, 'Cannot change status from completed to approved'):
            change_status(shipment, 'approved', self.user)

    def test_unknown_status(self):
        shipment = TestDataFactory.create_shipment(tenant_id='ACME')
        with self.assertRaises(ShipmentError):
            change_status(shipment, 'lost', self.user)

    def test_reopen_only_rejected(self):
        shipment = TestDataFactory.create_shipment(tenant_id='ACME', status='approved')
        with self.assertRaisesMessage(ShipmentError, 'Only rejected shipments can be reopened'):
            reopen_shipment(shipment, self.user)
        shipment.status = 'rejected'
        shipment.save()
        reopen_shipment(shipment, self.user)
        self.assertEqual(shipment.status, 'pending_inspection')

    def test_inspection_respects_transitions(self):
        shipment = TestDataFactory.create_shipment(tenant_id='ACME', status='completed')
        with self.assertRaisesMessage(ShipmentError, 'Cannot change status from completed to inspecting'):
            record_inspection(self.user, shipment, {})
        self.assertFalse(QCInspection.objects.exists())
        shipment.refresh_from_db()
        self.assertEqual(shipment.status, 'completed')

    def test_disposition_respects_transitions(self):
        shipment = TestDataFactory.create_shipment(tenant_id='ACME')
        inspection = record_inspection(self.user, shipment, {})
        set_disposition(self.user, inspection, 'approve')
        shipment.refresh_from_db()
        self.assertEqual(shipment.status, 'approved')
        with self.assertRaisesMessage(ShipmentError, 'Cannot change status from approved to rejected'):
            set_disposition(self.user, inspection, 'reject')
        inspection.refresh_from_db()
        self.assertEqual(inspection.disposition, 'approve')

    def test_net_weight_from_gross_and_tare(self):
        shipment = TestDataFactory.create_shipment(tenant_id='ACME')
        self.assertEqual(shipment.net_weight_kg, Decimal('1000.00'))
        self.assertEqual(shipment.net_weight_lbs, Decimal('2204.62'))


class InboundShipmentAPITests(TestCase):
    """Inbound shipment endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME', full_name='Yard Op')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_shipment(self):
        response = self.client.post('/api/inbound-shipments/', {
            'supplier_name': 'Acme Scrap',
            'product_category': 'PLASTIC',
            'gross_weight_kg': '2000',
            'tare_weight_kg': '800',
            'status': 'completed',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending_inspection')
        self.assertTrue(response.data['load_id'].startswith('LOAD-'))
        self.assertEqual(Decimal(response.data['net_weight_kg']), Decimal('1200.00'))
        self.assertEqual(response.data['operator_name'], 'Yard Op')
        self.assertEqual(response.data['tenant_id'], 'ACME')

    def test_list_status_filter(self):
        TestDataFactory.create_shipment(tenant_id='ACME', status='approved')
        TestDataFactory.create_shipment(tenant_id='ACME', status='rejected')
        TestDataFactory.create_shipment(tenant_id='ACME')
        TestDataFactory.create_shipment(tenant_id='OTHER', status='approved')
        response = self.client.get('/api/inbound-shipments/?status=approved,rejected')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_status_endpoint(self):
        shipment = TestDataFactory.create_shipment(tenant_id='ACME')
        response = self.client.post(f'/api/inbound-shipments/{shipment.id}/status/', {'status': 'inspecting'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.post(f'/api/inbound-shipments/{shipment.id}/status/', {'status': 'completed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reopen_endpoint(self):
        shipment = TestDataFactory.create_shipment(tenant_id='ACME', status='rejected')
        response = self.client.post(f'/api/inbound-shipments/{shipment.id}/reopen/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'pending_inspection')

    def test_other_tenant_hidden(self):
        shipment = TestDataFactory.create_shipment(tenant_id='OTHER')
        response = self.client.get(f'/api/inbound-shipments/{shipment.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class QCAPITests(TestCase):
    """QC criteria and inspection endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.shipment = TestDataFactory.create_shipment(tenant_id='ACME', product_category='PLASTIC')
        TestDataFactory.create_qc_criteria(
            tenant_id='ACME', material_category='plastic', min_purity_percent=Decimal('95.00')
        )

    def test_criteria_requires_name_and_category(self):
        response = self.client.post('/api/qc-criteria/', {'criteria_name': 'Paper'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_criteria_filter(self):
        response = self.client.get('/api/qc-criteria/?material_category=PLASTIC')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_record_failing_inspection(self):
        response = self.client.post('/api/qc-inspections/', {
            'shipment': self.shipment.id,
            'measured_purity_percent': '90',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['overall_result'], 'fail')
        self.assertEqual(response.data['fail_criteria'], ['Purity below minimum (95%)'])
        self.assertEqual(response.data['material_category'], 'PLASTIC')
        self.assertTrue(response.data['inspection_id'].startswith('QC-'))
        self.shipment.refresh_from_db()
        self.assertEqual(self.shipment.status, 'inspecting')

    def test_inspection_on_hidden_shipment(self):
        other = TestDataFactory.create_shipment(tenant_id='OTHER')
        response = self.client.post('/api/qc-inspections/', {'shipment': other.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(QCInspection.objects.exists())

    def test_disposition_moves_shipment(self):
        created = self.client.post('/api/qc-inspections/', {
            'shipment': self.shipment.id, 'measured_purity_percent': '99',
        }, format='json')
        response = self.client.post(f"/api/qc-inspections/{created.data['id']}/disposition/", {
            'disposition': 'approve', 'disposition_notes': 'Clean load',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['disposition'], 'approve')
        self.assertIsNotNone(response.data['approved_date'])
        self.assertEqual(InboundShipment.objects.get(pk=self.shipment.pk).status, 'approved')

    def test_downgrade_keeps_shipment_status(self):
        created = self.client.post('/api/qc-inspections/', {'shipment': self.shipment.id}, format='json')
        response = self.client.post(f"/api/qc-inspections/{created.data['id']}/disposition/", {
            'disposition': 'downgrade', 'downgrade_to_grade': 'C',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['downgrade_to_grade'], 'C')
        self.assertEqual(InboundShipment.objects.get(pk=self.shipment.pk).status, 'inspecting')

    def test_inspection_on_completed_shipment(self):
        completed = TestDataFactory.create_shipment(tenant_id='ACME', status='completed')
        response = self.client.post('/api/qc-inspections/', {'shipment': completed.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('completed to inspecting', response.data['error'])
        self.assertEqual(InboundShipment.objects.get(pk=completed.pk).status, 'completed')
