from django.contrib import admin
from .models import CertificateTrack, Question


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 0
    fields = ('question', 'option_a', 'option_b', 'option_c', 'option_d', 'correct_option')


@admin.register(CertificateTrack)
class CertificateTrackAdmin(admin.ModelAdmin):
    list_display = ('course_name', 'price', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('course_name',)
    inlines = [QuestionInline]


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ('question', 'track', 'correct_option')
    list_filter = ('track',)
    search_fields = ('question',)
