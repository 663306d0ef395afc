from django.urls import path
from .views import AdminAuthView, AdminLogoutView

urlpatterns = [
    path('', AdminAuthView.as_view(), name='admin-auth'),
    path('logout/', AdminLogoutView.as_view(), name='admin-logout'),
]
