from django.urls import path
from .views import (
    certificate_list_create, certificate_detail, certificate_issue, certificate_send, certificate_void,
    certificate_next_number,
)

urlpatterns = [
    path('compliance-certificates/', certificate_list_create, name='certificate-list-create'),
    path('compliance-certificates/next-number/', certificate_next_number, name='certificate-next-number'),
    path('compliance-certificates/<int:pk>/', certificate_detail, name='certificate-detail'),
    path('compliance-certificates/<int:pk>/issue/', certificate_issue, name='certificate-issue'),
    path('compliance-certificates/<int:pk>/send/', certificate_send, name='certificate-send'),
    path('compliance-certificates/<int:pk>/void/', certificate_void, name='certificate-void'),
]
