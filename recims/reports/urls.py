from django.urls import path
from .views import dashboard, inbound_report, inventory_report, compliance_report, sales_report

urlpatterns = [
    path('reports/dashboard/', dashboard, name='reports-dashboard'),
    path('reports/inbound/', inbound_report, name='reports-inbound'),
    path('reports/inventory/', inventory_report, name='reports-inventory'),
    path('reports/compliance/', compliance_report, name='reports-compliance'),
    path('reports/sales/', sales_report, name='reports-sales'),
]
