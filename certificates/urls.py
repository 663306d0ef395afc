from django.urls import path
from .views import verify_certificate, certificate_detail, download_certificate

urlpatterns = [
    path("verify/", verify_certificate, name="verify-certificate"),
    path("<uuid:application_id>/", certificate_detail, name="certificate-detail"),
    path("<uuid:application_id>/download/", download_certificate, name="certificate-download"),
]
