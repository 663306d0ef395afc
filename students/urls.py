from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ApplicationViewSet, SignUpView, CustomAuthToken, LogoutView

router = DefaultRouter()
router.register(r'applications', ApplicationViewSet, basename='application')


urlpatterns = [
    # Student accounts
    path('signup/', SignUpView.as_view(), name='signup'),
    path('login/', CustomAuthToken.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),

    path('', include(router.urls)),
]
