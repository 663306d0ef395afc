from django_filters import rest_framework as filters
from students.models import Application
from .models import AdminActivity


class ApplicationFilter(filters.FilterSet):
    """Filter for the admin review queue"""
    payment_status = filters.ChoiceFilter(choices=Application.PAYMENT_STATUS_CHOICES)
    test_passed = filters.BooleanFilter()
    track = filters.UUIDFilter(field_name='track__id')
    has_certificate = filters.BooleanFilter(method='filter_has_certificate')
    created_from = filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    created_to = filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = Application
        fields = ['payment_status', 'test_passed', 'branch', 'year']

    def filter_has_certificate(self, queryset, name, value):
        return queryset.filter(certificate_number__isnull=not value)


class AdminActivityFilter(filters.FilterSet):
    """Filter for admin activity logs"""
    action = filters.ChoiceFilter(choices=AdminActivity.ACTION_CHOICES)
    admin = filters.NumberFilter(field_name='admin__id')
    model_name = filters.CharFilter(lookup_expr='icontains')
    timestamp_from = filters.DateTimeFilter(field_name='timestamp', lookup_expr='gte')
    timestamp_to = filters.DateTimeFilter(field_name='timestamp', lookup_expr='lte')

    class Meta:
        model = AdminActivity
        fields = ['action', 'admin', 'model_name']
