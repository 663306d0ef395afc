from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.http import JsonResponse

def home(request):
    return JsonResponse({"message": f"{settings.PORTAL_NAME} API is running."})

urlpatterns = [
    path('', home),
    path('admin/', admin.site.urls),

    path('api/students/', include(('students.urls', 'students'), namespace='students')),
    path('api/courses/', include(('courses.urls', 'courses'), namespace='courses')),
    path('api/assessments/', include(('assessments.urls', 'assessments'), namespace='assessments')),
    path('api/certificates/', include(('certificates.urls', 'certificates'), namespace='certificates')),
    path('api/payments/', include(('payments.urls', 'payments'), namespace='payments')),
    path('api/admin-panel/', include(('admin_panel.urls', 'admin_panel'), namespace='admin_panel')),
    path('api/admin-auth/', include(('admin_panel.auth_urls', 'admin_auth'), namespace='admin_auth')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
