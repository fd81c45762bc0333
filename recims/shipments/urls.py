from django.urls import path
from .views import (
    shipment_list_create, shipment_detail, shipment_status, shipment_reopen,
    qc_criteria_list_create, qc_criteria_detail,
    qc_inspection_list_create, qc_inspection_detail, qc_inspection_disposition,
)

urlpatterns = [
    path('inbound-shipments/', shipment_list_create, name='shipment-list-create'),
    path('inbound-shipments/<int:pk>/', shipment_detail, name='shipment-detail'),
    path('inbound-shipments/<int:pk>/status/', shipment_status, name='shipment-status'),
    path('inbound-shipments/<int:pk>/reopen/', shipment_reopen, name='shipment-reopen'),
    path('qc-criteria/', qc_criteria_list_create, name='qc-criteria-list-create'),
    path('qc-criteria/<int:pk>/', qc_criteria_detail, name='qc-criteria-detail'),
    path('qc-inspections/', qc_inspection_list_create, name='qc-inspection-list-create'),
    path('qc-inspections/<int:pk>/', qc_inspection_detail, name='qc-inspection-detail'),
    path('qc-inspections/<int:pk>/disposition/', qc_inspection_disposition, name='qc-inspection-disposition'),
]
