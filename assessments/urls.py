from django.urls import path
from . import views

urlpatterns = [
    path('<uuid:application_id>/start/', views.start_test, name='start-test'),
    path('<uuid:application_id>/attempts/', views.AttemptHistoryView.as_view(), name='attempt-history'),
    path('attempts/<uuid:attempt_id>/submit/', views.submit_test, name='submit-test'),
]
