# psychologists/views.py
from rest_framework import status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet
from django.http import Http404
from django.utils.translation import gettext_lazy as _
from drf_spectacular.utils import extend_schema, OpenApiParameter
import logging
from datetime import date

from .models import Psychologist
from .serializers import (
    PsychologistSerializer,
    PsychologistProfileUpdateSerializer,
    PayoutInfoSerializer,
    PsychologistAvailabilitySerializer,
    AvailabilityReplaceSerializer,
    PsychologistMarketplaceSerializer,
    PsychologistDetailSerializer,
)
from .services import (
    PsychologistService,
    PsychologistNotFoundError,
    AvailabilityManagementError,
)
from .permissions import IsPsychologistOwner

logger = logging.getLogger(__name__)


class CurrentPsychologistMixin:
    def get_current_psychologist(self):
        """Get current user's psychologist profile"""
        try:
            return PsychologistService.get_psychologist_by_user_or_raise(self.request.user)
        except PsychologistNotFoundError:
            logger.warning(f"Psychologist profile access attempt without profile: {self.request.user.email}")
            raise Http404(_("Psychologist profile not found."))


class PsychologistProfileViewSet(CurrentPsychologistMixin, GenericViewSet):
    """
    ViewSet for psychologist profile management by psychologists themselves
    """
    queryset = Psychologist.objects.select_related('user').all()
    serializer_class = PsychologistSerializer
    permission_classes = [IsPsychologistOwner]

    @extend_schema(
        responses={
            200: PsychologistSerializer,
            404: {'description': 'Psychologist profile not found'}
        },
        description="Get current psychologist's profile",
        tags=['Psychologist Profile']
    )
    def list(self, request):
        """
        Get current psychologist's profile
        GET /api/psychologists/profile/
        """
        psychologist = self.get_current_psychologist()
        return Response(PsychologistSerializer(psychologist).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=PsychologistProfileUpdateSerializer,
        responses={
            200: {
                'description': 'Profile updated successfully',
                'example': {
                    'message': 'Profile updated successfully',
                    'profile': {'id': 'uuid', 'title': 'Psicóloga Clínica', 'hourly_rate': '180.00'}
                }
            },
            400: {'description': 'Invalid data provided'}
        },
        description="Update title, CRP, biography, specialties or rate",
        tags=['Psychologist Profile']
    )
    @action(detail=False, methods=['patch'], url_path='update-profile')
    def update_profile(self, request):
        """
        Update current psychologist's profile
        PATCH /api/psychologists/profile/update-profile/
        """
        psychologist = self.get_current_psychologist()
        serializer = PsychologistProfileUpdateSerializer(psychologist, data=request.data, partial=True)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        psychologist = PsychologistService.update_psychologist_profile(psychologist, serializer.validated_data)
        return Response({
            'message': _('Profile updated successfully'),
            'profile': PsychologistSerializer(psychologist).data
        }, status=status.HTTP_200_OK)

    @extend_schema(
        request=PayoutInfoSerializer,
        responses={200: PsychologistSerializer, 400: {'description': 'Invalid data provided'}},
        description="Update the bank account payouts are sent to",
        tags=['Psychologist Profile']
    )
    @action(detail=False, methods=['patch'], url_path='payout-info')
    def payout_info(self, request):
        """
        PATCH /api/psychologists/profile/payout-info/
        """
        psychologist = self.get_current_psychologist()
        serializer = PayoutInfoSerializer(psychologist, data=request.data, partial=True)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        psychologist = PsychologistService.update_payout_info(psychologist, serializer.validated_data)
        return Response(PsychologistSerializer(psychologist).data, status=status.HTTP_200_OK)


class PsychologistAvailabilityViewSet(CurrentPsychologistMixin, GenericViewSet):
    """
    ViewSet for the psychologist's weekly availability template
    """
    serializer_class = PsychologistAvailabilitySerializer
    permission_classes = [IsPsychologistOwner]
    pagination_class = None

    @extend_schema(
        responses={200: PsychologistAvailabilitySerializer(many=True)},
        description="Get the seven entries of the weekly availability template",
        tags=['Psychologist Availability']
    )
    def list(self, request):
        """
        GET /api/psychologists/availability/
        """
        psychologist = self.get_current_psychologist()
        entries = PsychologistService.get_availability(psychologist)
        return Response(PsychologistAvailabilitySerializer(entries, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=AvailabilityReplaceSerializer,
        responses={
            200: PsychologistAvailabilitySerializer(many=True),
            400: {'description': 'Invalid availability entries'}
        },
        description="Replace the availability of the supplied days at once",
        tags=['Psychologist Availability']
    )
    @action(detail=False, methods=['put'])
    def weekly(self, request):
        """
        PUT /api/psychologists/availability/weekly/
        """
        psychologist = self.get_current_psychologist()
        serializer = AvailabilityReplaceSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            entries = PsychologistService.replace_availability(psychologist, serializer.validated_data['entries'])
        except AvailabilityManagementError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PsychologistAvailabilitySerializer(entries, many=True).data, status=status.HTTP_200_OK)


class PsychologistMarketplaceViewSet(GenericViewSet):
    """
    ViewSet for the marketplace where patients browse psychologists
    """
    queryset = Psychologist.get_marketplace_psychologists()
    serializer_class = PsychologistMarketplaceSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_marketplace_object(self):
        psychologist = self.get_object()
        if not psychologist.is_marketplace_visible:
            raise Http404(_("Psychologist not found."))
        return psychologist

    @extend_schema(
        description="List psychologists with a complete profile",
        responses={200: PsychologistMarketplaceSerializer(many=True)},
        tags=['Psychologist Marketplace']
    )
    def list(self, request):
        """
        GET /api/psychologists/marketplace/
        """
        psychologists = PsychologistService.get_marketplace_psychologists()
        page = self.paginate_queryset(psychologists)
        if page is not None:
            return self.get_paginated_response(PsychologistMarketplaceSerializer(page, many=True).data)
        return Response(PsychologistMarketplaceSerializer(psychologists, many=True).data)

    @extend_schema(
        description="Get psychologist profile with reviews and booked slots",
        responses={200: PsychologistDetailSerializer},
        tags=['Psychologist Marketplace']
    )
    def retrieve(self, request, pk=None):
        """
        GET /api/psychologists/marketplace/{id}/
        """
        psychologist = self.get_marketplace_object()
        return Response(PsychologistDetailSerializer(psychologist).data, status=status.HTTP_200_OK)

    @extend_schema(
        parameters=[
            OpenApiParameter(name='date', type=str, required=True, description='Day to list, YYYY-MM-DD')
        ],
        responses={
            200: {
                'description': 'Free slots on the requested day',
                'example': {
                    'psychologist_id': 'uuid',
                    'date': '2026-03-02',
                    'day_of_week': 1,
                    'slots': ['09:00', '11:00']
                }
            },
            400: {'description': 'Invalid or missing date'}
        },
        description="Get bookable one-hour slots for a day",
        tags=['Psychologist Marketplace']
    )
    @action(detail=True, methods=['get'], url_path='available-slots')
    def available_slots(self, request, pk=None):
        """
        GET /api/psychologists/marketplace/{id}/available-slots/?date=YYYY-MM-DD
        """
        psychologist = self.get_marketplace_object()

        date_str = request.query_params.get('date')
        if not date_str:
            return Response({'error': _('The date parameter is required')}, status=status.HTTP_400_BAD_REQUEST)
        try:
            target_date = date.fromisoformat(date_str)
        except ValueError:
            return Response({
                'error': _('Invalid date format. Use YYYY-MM-DD')
            }, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            PsychologistService.get_available_slots(psychologist, target_date),
            status=status.HTTP_200_OK
        )
