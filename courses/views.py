from django.http import Http404
from rest_framework import viewsets
from rest_framework.permissions import AllowAny

from certification_portal.exceptions import NotFoundError
from .models import CertificateTrack
from .serializers import CertificateTrackSerializer


class CertificateTrackViewSet(viewsets.ReadOnlyModelViewSet):
    """Public catalog. Only active tracks are listed or retrievable."""
    serializer_class = CertificateTrackSerializer
    permission_classes = [AllowAny]
    pagination_class = None
    search_fields = ['course_name', 'description']

    def get_queryset(self):
        return CertificateTrack.objects.filter(is_active=True).order_by('course_name')

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            raise NotFoundError("The internship domain you're looking for doesn't exist.")
