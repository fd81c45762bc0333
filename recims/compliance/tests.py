"""
Test suite for the compliance module
Tests: certificate numbering, PO line certification, issue/send/void, certificate endpoints
"""
from decimal import Decimal

from django.core import mail
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.compliance.models import ComplianceCertificate
from recims.compliance.services import (
    CertificateError, allocate_certificate_number, peek_certificate_number, create_certificate,
    issue_certificate, send_certificate, void_certificate,
)


class CertificateNumberTests(TestCase):
    """CERT-<year>-<NNNN> allocation"""

    def test_sequence_per_tenant(self):
        self.assertEqual(allocate_certificate_number('ACME', 2026), 'CERT-2026-0001')
        self.assertEqual(allocate_certificate_number('ACME', 2026), 'CERT-2026-0002')
        self.assertEqual(allocate_certificate_number('OTHER', 2026), 'CERT-2026-0001')
        self.assertEqual(allocate_certificate_number('ACME', 2027), 'CERT-2027-0001')

    def test_existing_numbers_seed_the_sequence(self):
        ComplianceCertificate.objects.create(tenant_id='ACME', certificate_number='CERT-2026-0007')
        self.assertEqual(peek_certificate_number('ACME', 2026), 'CERT-2026-0008')
        self.assertEqual(allocate_certificate_number('ACME', 2026), 'CERT-2026-0008')

    def test_peek_does_not_reserve(self):
        self.assertEqual(peek_certificate_number('ACME', 2026), 'CERT-2026-0001')
        self.assertEqual(peek_certificate_number('ACME', 2026), 'CERT-2026-0001')


class CertificateServiceTests(TestCase):
    """create_certificate, issue, send and void"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME', full_name='Sam Lee')
        self.po = TestDataFactory.create_purchase_order(tenant_id='ACME', status='received')
        self.first = TestDataFactory.create_received_item(self.po, line_number=1)
        self.second = TestDataFactory.create_received_item(self.po, line_number=2, category='METAL', product_type='Cans')

    def test_po_certificate_requires_items(self):
        with self.assertRaisesMessage(CertificateError, 'Please select at least one item'):
            create_certificate(self.user, {}, po=self.po)

    def test_free_form_requires_vendor_and_material(self):
        with self.assertRaisesMessage(CertificateError, 'Vendor name is required'):
            create_certificate(self.user, {'material_type': 'PET'})
        with self.assertRaisesMessage(CertificateError, 'Material type is required'):
            create_certificate(self.user, {'vendor_name': 'Scrap Co'})

    def test_items_must_belong_to_po(self):
        other_po = TestDataFactory.create_purchase_order(tenant_id='ACME')
        stray = TestDataFactory.create_received_item(other_po)
        with self.assertRaisesMessage(CertificateError, 'Selected items do not belong'):
            create_certificate(self.user, {}, po=self.po, item_ids=[self.first.id, stray.id])

    def test_partial_then_full_certification(self):
        certificate = create_certificate(self.user, {}, po=self.po, item_ids=[self.first.id])
        self.assertTrue(certificate.is_partial)
        self.assertEqual(certificate.status, 'draft')
        self.assertEqual(certificate.weight_kg, Decimal('480.00'))
        self.assertEqual(certificate.weight_lbs, Decimal('1058.22'))
        self.assertEqual(certificate.po_number, self.po.po_number)
        self.assertEqual(certificate.certificate_number, f'CERT-{timezone.localdate().year}-0001')
        self.assertEqual(certificate.certifying_officer, 'Sam Lee')

        self.first.refresh_from_db()
        self.assertEqual(self.first.certificate_status, 'certified')
        self.assertEqual(self.first.certificate_ids, [certificate.id])
        self.po.refresh_from_db()
        self.assertEqual(self.po.status, 'received')

        final = create_certificate(self.user, {'status': 'issued'}, po=self.po, item_ids=[self.second.id])
        self.assertEqual(final.status, 'issued')
        self.assertEqual(final.material_category, 'METAL')
        self.assertIsNotNone(final.issued_at)
        self.po.refresh_from_db()
        self.assertEqual(self.po.status, 'completed')

    def test_certified_lines_rejected(self):
        create_certificate(self.user, {}, po=self.po, item_ids=[self.first.id])
        with self.assertRaisesMessage(CertificateError, 'Line 1 is already certified'):
            create_certificate(self.user, {}, po=self.po, item_ids=[self.first.id])
        self.assertEqual(ComplianceCertificate.objects.count(), 1)

    def test_unreceived_lines_rejected(self):
        pending = TestDataFactory.create_purchase_order_item(self.po, line_number=3)
        with self.assertRaisesMessage(CertificateError, 'Line 3 has not been received'):
            create_certificate(self.user, {'status': 'issued'}, po=self.po, item_ids=[pending.id])
        pending.refresh_from_db()
        self.assertEqual(pending.certificate_ids, [])
        self.assertEqual(pending.certificate_status, 'uncertified')
        self.assertFalse(ComplianceCertificate.objects.exists())

    def test_po_must_be_received(self):
        draft_po = TestDataFactory.create_purchase_order(tenant_id='ACME')
        line = TestDataFactory.create_received_item(draft_po)
        with self.assertRaisesMessage(CertificateError, 'Only received purchase orders'):
            create_certificate(self.user, {}, po=draft_po, item_ids=[line.id])

    def test_signatory_from_tenant_contact(self):
        TestDataFactory.create_tenant(tenant_id='ACME')
        TestDataFactory.create_tenant_contact(tenant_id='ACME', contact_type='secondary', contact_name='Pat Kim')
        certificate = create_certificate(
            self.user, {'contact_type': 'secondary'}, po=self.po, item_ids=[self.first.id]
        )
        self.assertEqual(certificate.certifying_officer, 'Pat Kim')
        self.assertEqual(certificate.certifying_title, 'Operations Manager')

    def test_free_form_certificate(self):
        certificate = create_certificate(self.user, {
            'vendor_name': 'Scrap Co', 'material_type': 'Cardboard', 'weight_lbs': Decimal('1000'),
        })
        self.assertEqual(certificate.tenant_id, 'ACME')
        self.assertEqual(certificate.weight_kg, Decimal('453.59'))
        self.assertFalse(certificate.is_partial)
        self.assertEqual(certificate.diversion_rate, Decimal('95'))

    def test_issue_only_drafts(self):
        certificate = create_certificate(self.user, {}, po=self.po, item_ids=[self.first.id])
        issue_certificate(certificate, self.user)
        self.assertEqual(certificate.status, 'issued')
        self.assertEqual(certificate.issued_by, self.user.email)
        with self.assertRaisesMessage(CertificateError, 'Only draft certificates can be issued'):
            issue_certificate(certificate, self.user)

    def test_send_certificate(self):
        certificate = create_certificate(self.user, {}, po=self.po, item_ids=[self.first.id])
        with self.assertRaisesMessage(CertificateError, 'At least one recipient email is required'):
            send_certificate(certificate, [' '], self.user)
        send_certificate(certificate, ['ops@scrap.test'], self.user)
        self.assertEqual(certificate.status, 'sent')
        self.assertEqual(certificate.sent_to, 'ops@scrap.test')
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(certificate.certificate_number, mail.outbox[0].subject)
        self.assertIn(self.po.po_number, mail.outbox[0].body)

    def test_void_releases_line_weight(self):
        create_certificate(self.user, {}, po=self.po, item_ids=[self.second.id])
        certificate = create_certificate(self.user, {}, po=self.po, item_ids=[self.first.id])
        self.po.refresh_from_db()
        self.assertEqual(self.po.status, 'completed')

        voided = void_certificate(certificate, self.user, reason='Wrong vendor')
        self.assertEqual(voided.status, 'void')
        self.assertIn('Voided: Wrong vendor', voided.notes)
        self.first.refresh_from_db()
        self.assertEqual(self.first.certified_weight_kg, Decimal('0.00'))
        self.assertEqual(self.first.certificate_status, 'uncertified')
        self.assertEqual(self.first.certificate_ids, [])
        self.po.refresh_from_db()
        self.assertEqual(self.po.status, 'received')

        with self.assertRaisesMessage(CertificateError, 'Certificate is already void'):
            void_certificate(voided, self.user)
        with self.assertRaisesMessage(CertificateError, 'Void certificates cannot be sent'):
            send_certificate(voided, ['ops@scrap.test'], self.user)


class CertificateAPITests(TestCase):
    """Certificate endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.po = TestDataFactory.create_purchase_order(tenant_id='ACME', status='received')
        self.item = TestDataFactory.create_received_item(self.po)

    def test_create_for_po_lines(self):
        response = self.client.post('/api/compliance-certificates/', {
            'purchase_order': self.po.id, 'item_ids': [self.item.id],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')
        self.assertEqual(len(response.data['po_line_items']), 1)
        self.assertEqual(response.data['po_line_items'][0]['line_id'], self.item.id)

    def test_create_requires_items(self):
        response = self.client.post('/api/compliance-certificates/', {'purchase_order': self.po.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('at least one item', response.data['error'])

    def test_other_tenant_po_rejected(self):
        other_po = TestDataFactory.create_purchase_order(tenant_id='OTHER')
        response = self.client.post('/api/compliance-certificates/', {
            'purchase_order': other_po.id, 'item_ids': [1],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('purchase_order', response.data)

    def test_list_filters_and_isolation(self):
        ComplianceCertificate.objects.create(tenant_id='ACME', certificate_number='CERT-2026-0001', status='issued')
        ComplianceCertificate.objects.create(tenant_id='ACME', certificate_number='CERT-2026-0002')
        ComplianceCertificate.objects.create(tenant_id='OTHER', certificate_number='CERT-2026-0001', status='issued')
        response = self.client.get('/api/compliance-certificates/?status=issued')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/compliance-certificates/?search=0002')
        self.assertEqual(len(response.data), 1)

    def test_issue_send_void_flow(self):
        created = self.client.post('/api/compliance-certificates/', {
            'purchase_order': self.po.id, 'item_ids': [self.item.id],
        }, format='json')
        pk = created.data['id']
        response = self.client.post(f'/api/compliance-certificates/{pk}/issue/')
        self.assertEqual(response.data['status'], 'issued')
        response = self.client.post(f'/api/compliance-certificates/{pk}/send/', {
            'recipients': ['ops@scrap.test'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'sent')
        response = self.client.post(f'/api/compliance-certificates/{pk}/void/', {'reason': 'Duplicate'}, format='json')
        self.assertEqual(response.data['status'], 'void')

    def test_send_rejects_bad_email(self):
        certificate = ComplianceCertificate.objects.create(tenant_id='ACME', certificate_number='CERT-2026-0001')
        response = self.client.post(f'/api/compliance-certificates/{certificate.id}/send/', {
            'recipients': ['not-an-email'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_only_drafts_deleted(self):
        draft = ComplianceCertificate.objects.create(tenant_id='ACME', certificate_number='CERT-2026-0001')
        issued = ComplianceCertificate.objects.create(
            tenant_id='ACME', certificate_number='CERT-2026-0002', status='issued'
        )
        response = self.client.delete(f'/api/compliance-certificates/{issued.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.delete(f'/api/compliance-certificates/{draft.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ComplianceCertificate.objects.filter(id=draft.id).exists())

    def test_next_number(self):
        year = timezone.localdate().year
        ComplianceCertificate.objects.create(tenant_id='ACME', certificate_number=f'CERT-{year}-0004')
        response = self.client.get('/api/compliance-certificates/next-number/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['certificate_number'], f'CERT-{year}-0005')
        response = self.client.get('/api/compliance-certificates/next-number/?year=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
