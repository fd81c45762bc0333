from django.urls import path
from .views import (
    purchase_order_list_create, purchase_order_detail, purchase_order_items, purchase_order_item_receive,
    purchase_order_labels, purchase_order_lookup, purchase_order_recompute,
)

urlpatterns = [
    path('purchase-orders/', purchase_order_list_create, name='purchase-order-list-create'),
    path('purchase-orders/lookup/', purchase_order_lookup, name='purchase-order-lookup'),
    path('purchase-orders/<int:pk>/', purchase_order_detail, name='purchase-order-detail'),
    path('purchase-orders/<int:pk>/items/', purchase_order_items, name='purchase-order-items'),
    path('purchase-orders/<int:pk>/items/<int:item_id>/receive/', purchase_order_item_receive, name='purchase-order-item-receive'),
    path('purchase-orders/<int:pk>/labels/', purchase_order_labels, name='purchase-order-labels'),
    path('purchase-orders/<int:pk>/recompute/', purchase_order_recompute, name='purchase-order-recompute'),
]
