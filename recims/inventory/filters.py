import django_filters
from django.db.models import Q

from .models import Inventory


class InventoryFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.CharFilter(field_name='status', lookup_expr='iexact')
    sorting_status = django_filters.CharFilter(field_name='sorting_status', lookup_expr='iexact')
    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    zone = django_filters.CharFilter(field_name='zone', lookup_expr='iexact')
    bin_location = django_filters.CharFilter(field_name='bin_location', lookup_expr='iexact')
    sku_number = django_filters.CharFilter(field_name='sku_number', lookup_expr='iexact')
    purchase_order_number = django_filters.CharFilter(field_name='purchase_order_number', lookup_expr='iexact')

    class Meta:
        model = Inventory
        fields = ['search', 'status', 'sorting_status', 'category', 'zone', 'bin_location',
                  'sku_number', 'purchase_order_number']

    def filter_search(self, queryset, name, value):
        """Match inventory id, item name, SKU, lot or vendor"""
        search = (value or '').strip()
        if not search:
            return queryset
        return queryset.filter(
            Q(inventory_id__icontains=search) |
            Q(item_name__icontains=search) |
            Q(sku_number__icontains=search) |
            Q(lot_number__icontains=search) |
            Q(vendor_name__icontains=search)
        )
