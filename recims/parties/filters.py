import django_filters
from django.db.models import Q

from recims.core.utils import to_boolean
from .models import Customer, Vendor


class PartyFilter(django_filters.FilterSet):
    """Shared search/status filtering for customers and vendors"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.CharFilter(field_name='status', lookup_expr='iexact')
    active = django_filters.CharFilter(method='filter_active', label='Active')
    country = django_filters.CharFilter(field_name='country', lookup_expr='iexact')

    def filter_search(self, queryset, name, value):
        """Match display/company name, email or phone"""
        search = (value or '').strip()
        if not search:
            return queryset
        return queryset.filter(
            Q(display_name__icontains=search) |
            Q(company_name__icontains=search) |
            Q(primary_email__icontains=search) |
            Q(primary_phone__icontains=search) |
            Q(mobile_phone__icontains=search)
        )

    def filter_active(self, queryset, name, value):
        if value is None or value == '':
            return queryset
        return queryset.filter(active=to_boolean(value, True))


class CustomerFilter(PartyFilter):
    class Meta:
        model = Customer
        fields = ['search', 'status', 'active', 'country']


class VendorFilter(PartyFilter):
    class Meta:
        model = Vendor
        fields = ['search', 'status', 'active', 'country']
