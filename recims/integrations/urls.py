from django.urls import path
from .views import upload_file, invoke_llm_view, send_email_view

urlpatterns = [
    path('integrations/upload-file/', upload_file, name='integration-upload-file'),
    path('integrations/invoke-llm/', invoke_llm_view, name='integration-invoke-llm'),
    path('integrations/send-email/', send_email_view, name='integration-send-email'),
]
