from rest_framework.routers import DefaultRouter
from .views import CertificateTrackViewSet

router = DefaultRouter()
router.register(r"tracks", CertificateTrackViewSet, basename="track")

urlpatterns = router.urls
