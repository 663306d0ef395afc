import logging

from django.contrib.auth import get_user_model
from rest_framework import mixins, status, viewsets
from rest_framework.authentication import TokenAuthentication
from rest_framework.authtoken.models import Token
from rest_framework.authtoken.views import ObtainAuthToken
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from admin_panel.filters import ApplicationFilter
from admin_panel.permissions import IsPlatformAdmin, IsStudentAccount
from .models import Application
from .serializers import (
    ApplicationRegistrationSerializer, ApplicationSerializer,
    SignUpSerializer, EmailAuthTokenSerializer,
)
from . import workflow

logger = logging.getLogger(__name__)
User = get_user_model()


class ApplicationViewSet(mixins.CreateModelMixin,
                         mixins.RetrieveModelMixin,
                         mixins.ListModelMixin,
                         viewsets.GenericViewSet):
    """
    Handles:
    - Registration for a certificate track (create)
    - Status view for a single application (retrieve)
    - Admin review queue (list)
    - The signed-in student's own applications (mine)
    """
    queryset = Application.objects.select_related('track').all()
    serializer_class = ApplicationSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = ApplicationFilter
    search_fields = ['full_name', 'email', 'mobile', 'college_name', 'transaction_id', 'certificate_number']
    ordering_fields = ['created_at', 'updated_at', 'full_name', 'payment_status']

    def get_permissions(self):
        """Assign permissions dynamically"""
        if self.action in ['create', 'retrieve']:
            return [AllowAny()]
        elif self.action == 'mine':
            return [IsStudentAccount()]
        return [IsPlatformAdmin()]

    def create(self, request, *args, **kwargs):
        serializer = ApplicationRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        track_id = data.pop('certificate_id')

        user = request.user if isinstance(request.user, User) and request.user.is_authenticated else None
        application = workflow.register_application(track_id, data, user=user)
        return Response(ApplicationSerializer(application).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        application = workflow.get_application(kwargs.get(self.lookup_field))
        return Response(ApplicationSerializer(application).data)

    @action(detail=False, methods=['get'])
    def mine(self, request):
        applications = self.get_queryset().filter(user=request.user)
        return Response(ApplicationSerializer(applications, many=True).data)


class SignUpView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = SignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        token, _ = Token.objects.get_or_create(user=user)
        logger.info(f"Student account created for {user.email}")
        return Response({
            'token': token.key,
            'user_id': user.id,
            'email': user.email,
        }, status=status.HTTP_201_CREATED)


class CustomAuthToken(ObtainAuthToken):
    serializer_class = EmailAuthTokenSerializer
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.serializer_class(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user']
        token, _ = Token.objects.get_or_create(user=user)
        return Response({
            'token': token.key,
            'user_id': user.id,
            'email': user.email,
        })


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [TokenAuthentication]

    def post(self, request):
        request.user.auth_token.delete()
        return Response({"message": "Logged out successfully"})
