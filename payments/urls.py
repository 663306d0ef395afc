from django.urls import path
from . import views

urlpatterns = [
    path('settings/<slug:key>/', views.PlatformSettingView.as_view(), name='platform-setting'),
    path('<uuid:application_id>/submit/', views.submit_payment, name='submit-payment'),
    path('<uuid:application_id>/approve/', views.approve_payment, name='approve-payment'),
    path('<uuid:application_id>/reject/', views.reject_payment, name='reject-payment'),
]
