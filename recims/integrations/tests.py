"""
Test suite for the integrations module
Tests: file uploads, LLM passthrough, outbound email
"""
import shutil
import tempfile
from unittest import mock

import requests
from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status

from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.integrations.services import (
    LLM_PLACEHOLDER, sanitize_filename, is_allowed_content_type, invoke_llm, IntegrationError,
)

MEDIA_ROOT = tempfile.mkdtemp()


class IntegrationHelperTests(TestCase):

    def test_sanitize_filename(self):
        self.assertEqual(sanitize_filename('My Report (final).PDF'), 'my-report-final.pdf')
        self.assertEqual(sanitize_filename('###.png'), 'upload.png')
        self.assertEqual(len(sanitize_filename('a' * 80 + '.jpg')), 44)

    def test_content_types(self):
        self.assertTrue(is_allowed_content_type('image/jpeg'))
        self.assertTrue(is_allowed_content_type('application/pdf'))
        self.assertFalse(is_allowed_content_type('text/html'))
        self.assertFalse(is_allowed_content_type(None))


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class UploadFileAPITests(TestCase):
    """POST /api/integrations/upload-file/"""

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(tenant_id='ACME'))

    def test_upload_pdf(self):
        upload = SimpleUploadedFile('Weigh Ticket.pdf', b'%PDF-1.4 test', content_type='application/pdf')
        response = self.client.post('/api/integrations/upload-file/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')
        self.assertIn('/uploads/ACME/', response.data['file_url'])
        self.assertTrue(response.data['file_name'].endswith('-weigh-ticket.pdf'))

    def test_rejects_unsupported_type(self):
        upload = SimpleUploadedFile('page.html', b'<html></html>', content_type='text/html')
        response = self.client.post('/api/integrations/upload-file/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Unsupported file type')

    def test_requires_file(self):
        response = self.client.post('/api/integrations/upload-file/', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'File is required')

    def test_requires_authentication(self):
        self.client.logout()
        upload = SimpleUploadedFile('a.pdf', b'x', content_type='application/pdf')
        response = self.client.post('/api/integrations/upload-file/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class InvokeLLMTests(TestCase):
    """invoke_llm service and endpoint"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(tenant_id='ACME'))

    @override_settings(LLM_API_URL='')
    def test_placeholder_without_endpoint(self):
        response = self.client.post('/api/integrations/invoke-llm/', {'prompt': 'Summarize'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, LLM_PLACEHOLDER)

    def test_prompt_required(self):
        response = self.client.post('/api/integrations/invoke-llm/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(LLM_API_URL='http://llm.test/v1/complete', LLM_API_KEY='secret', LLM_TIMEOUT_SECONDS=5)
    @mock.patch('recims.integrations.services.requests.post')
    def test_forwards_to_endpoint(self, mock_post):
        mock_post.return_value.json.return_value = {'result': 'ok'}
        result = invoke_llm('Classify', {'type': 'object'}, ['http://files/a.pdf'])
        self.assertEqual(result, {'result': 'ok'})
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'http://llm.test/v1/complete')
        self.assertEqual(kwargs['json']['response_json_schema'], {'type': 'object'})
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer secret')
        self.assertEqual(kwargs['timeout'], 5)

    @override_settings(LLM_API_URL='http://llm.test/v1/complete')
    @mock.patch('recims.integrations.services.requests.post')
    def test_upstream_failure(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout()
        with self.assertRaisesMessage(IntegrationError, 'LLM request timed out'):
            invoke_llm('Classify')
        mock_post.side_effect = requests.exceptions.ConnectionError('refused')
        response = self.client.post('/api/integrations/invoke-llm/', {'prompt': 'Summarize'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)


class SendEmailTests(TestCase):
    """POST /api/integrations/send-email/"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(tenant_id='ACME'))

    def test_send_to_list(self):
        response = self.client.post('/api/integrations/send-email/', {
            'to': ['a@recycler.test', 'b@recycler.test'], 'subject': 'Pickup', 'body': 'Tomorrow 9am',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sent'], 1)
        self.assertEqual(mail.outbox[0].to, ['a@recycler.test', 'b@recycler.test'])
        self.assertEqual(mail.outbox[0].body, 'Tomorrow 9am')

    def test_single_recipient_string(self):
        response = self.client.post('/api/integrations/send-email/', {
            'to': 'a@recycler.test', 'subject': 'Pickup',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mail.outbox[0].to, ['a@recycler.test'])

    def test_subject_required(self):
        response = self.client.post('/api/integrations/send-email/', {'to': 'a@recycler.test'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Subject is required')
        self.assertEqual(len(mail.outbox), 0)
