from django.contrib import admin
from .models import Application


# -------------------------------
# Application Admin
# -------------------------------
@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = (
        'full_name',
        'email',
        'internship_domain',
        'test_passed',
        'payment_status',
        'certificate_number',
        'created_at',
    )
    search_fields = ('full_name', 'email', 'mobile', 'transaction_id', 'certificate_number')
    list_filter = ('payment_status', 'test_passed', 'track', 'branch', 'year')
    # status fields only move through the review endpoints
    readonly_fields = (
        'test_passed', 'payment_status', 'transaction_id', 'payment_screenshot_url',
        'payment_verified_at', 'payment_verified_by', 'rejection_reason',
        'certificate_number', 'certificate_issued_at', 'created_at', 'updated_at',
    )
