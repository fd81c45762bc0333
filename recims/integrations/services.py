"""
File storage, LLM calls and outbound email
"""
import logging
import os
import re
import uuid

import requests
from django.conf import settings
from django.core.files.storage import default_storage
from django.core.mail import send_mail
from rest_framework import status

from recims.core.exceptions import RecimsError

logger = logging.getLogger(__name__)

MAX_UPLOAD_SIZE_BYTES = 25 * 1024 * 1024
ALLOWED_CONTENT_TYPES = ('application/pdf', 'application/octet-stream')
LLM_PLACEHOLDER = {'result': 'AI features require backend integration', 'insights': []}


class UploadError(RecimsError):
    pass


class IntegrationError(RecimsError):
    status_code = status.HTTP_502_BAD_GATEWAY


def sanitize_filename(name):
    """Lower-case ``[a-z0-9-_.]`` base name, at most 40 characters, keeping the extension"""
    base, extension = os.path.splitext(name or '')
    safe = re.sub(r'[^a-z0-9\-_.]', '-', base.lower())
    safe = re.sub(r'-{2,}', '-', safe).strip('-')[:40]
    extension = re.sub(r'[^a-z0-9.]', '', extension.lower())
    return f"{safe or 'upload'}{extension}"


def is_allowed_content_type(content_type):
    if not content_type:
        return False
    return content_type.startswith('image/') or content_type in ALLOWED_CONTENT_TYPES


def save_upload(uploaded_file, tenant_id=None):
    """Store an upload under ``uploads/<tenant>/<uuid>-<name>``; returns (path, url)"""
    if uploaded_file is None:
        raise UploadError("File is required")
    if uploaded_file.size > MAX_UPLOAD_SIZE_BYTES:
        raise UploadError("File is larger than 25 MB")
    if not is_allowed_content_type(getattr(uploaded_file, 'content_type', '')):
        raise UploadError("Unsupported file type")

    folder = tenant_id or 'shared'
    target = f"uploads/{folder}/{uuid.uuid4().hex}-{sanitize_filename(uploaded_file.name)}"
    path = default_storage.save(target, uploaded_file)
    logger.info(f"Stored upload {path} ({uploaded_file.size} bytes)")
    return path, default_storage.url(path)


def invoke_llm(prompt, response_json_schema=None, file_urls=None):
    """
    Forward a prompt to the configured LLM endpoint.

    Without ``LLM_API_URL`` the standalone placeholder answer is returned.
    """
    if not settings.LLM_API_URL:
        return dict(LLM_PLACEHOLDER)

    payload = {'prompt': prompt}
    if response_json_schema:
        payload['response_json_schema'] = response_json_schema
    if file_urls:
        payload['file_urls'] = file_urls
    headers = {'Content-Type': 'application/json'}
    if settings.LLM_API_KEY:
        headers['Authorization'] = f"Bearer {settings.LLM_API_KEY}"

    try:
        response = requests.post(
            settings.LLM_API_URL, json=payload, headers=headers, timeout=settings.LLM_TIMEOUT_SECONDS
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.Timeout:
        logger.warning("LLM request timed out")
        raise IntegrationError("LLM request timed out")
    except requests.exceptions.RequestException as e:
        logger.warning(f"LLM request failed: {str(e)}")
        raise IntegrationError(f"LLM request failed: {str(e)}")
    except ValueError:
        raise IntegrationError("LLM returned an invalid response")


def send_email(to, subject, body, from_email=None):
    """Send one plain-text message; returns the number of messages delivered"""
    recipients = [to] if isinstance(to, str) else list(to or [])
    recipients = [r.strip() for r in recipients if r and r.strip()]
    if not recipients:
        raise RecimsError("Recipient email is required")
    if not subject:
        raise RecimsError("Subject is required")
    sent = send_mail(
        subject=subject,
        message=body or '',
        from_email=from_email or settings.DEFAULT_FROM_EMAIL,
        recipient_list=recipients,
        fail_silently=False,
    )
    logger.info(f"Sent email '{subject}' to {len(recipients)} recipient(s)")
    return sent
