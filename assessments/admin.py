from django.contrib import admin
from .models import TestAttempt


@admin.register(TestAttempt)
class TestAttemptAdmin(admin.ModelAdmin):
    list_display = ['application', 'score', 'total_questions', 'passed', 'auto_submitted', 'started_at', 'submitted_at']
    list_filter = ['passed', 'auto_submitted', 'started_at']
    search_fields = ['application__full_name', 'application__email']
    readonly_fields = [f.name for f in TestAttempt._meta.fields]

    def has_add_permission(self, request):
        return False
