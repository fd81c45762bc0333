from django.urls import path
from .views import (
    sales_order_list_create, sales_order_detail, sales_order_calculate_tax, sales_order_waybill,
    carrier_list_create, carrier_detail, waybill_list, waybill_detail, calculate_us_tax_function,
)

urlpatterns = [
    path('sales-orders/', sales_order_list_create, name='sales-order-list-create'),
    path('sales-orders/calculate-tax/', sales_order_calculate_tax, name='sales-order-calculate-tax'),
    path('sales-orders/<int:pk>/', sales_order_detail, name='sales-order-detail'),
    path('sales-orders/<int:pk>/waybill/', sales_order_waybill, name='sales-order-waybill'),
    path('carriers/', carrier_list_create, name='carrier-list-create'),
    path('carriers/<int:pk>/', carrier_detail, name='carrier-detail'),
    path('waybills/', waybill_list, name='waybill-list'),
    path('waybills/<int:pk>/', waybill_detail, name='waybill-detail'),
    path('functions/calculateUSTax/', calculate_us_tax_function, name='function-calculate-us-tax'),
]
