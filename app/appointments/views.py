# appointments/views.py
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet
from rest_framework.mixins import ListModelMixin, RetrieveModelMixin
from django.utils.translation import gettext_lazy as _
from drf_spectacular.utils import extend_schema, OpenApiParameter
import logging

from .models import TherapySession
from .serializers import (
    TherapySessionSerializer,
    LeaveRoomSerializer,
    PsychologistNoteSerializer,
    ReviewSerializer,
    BookingStatusQuerySerializer,
    PsychologistPatientSerializer,
    PatientHistorySerializer,
)
from .services import (
    SessionQueryService,
    SessionLifecycleService,
    SessionNotFoundError,
    SessionAccessDeniedError,
    SessionStateError,
    ReviewError,
)
from .permissions import IsSessionParticipant

logger = logging.getLogger(__name__)


@extend_schema(tags=['Sessions'])
class TherapySessionViewSet(GenericViewSet, ListModelMixin, RetrieveModelMixin):
    """
    ViewSet for therapy sessions: listing, lifecycle transitions and reviews
    """
    serializer_class = TherapySessionSerializer
    permission_classes = [IsSessionParticipant]
    lookup_field = 'session_id'

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return TherapySession.objects.none()
        return SessionQueryService.get_user_sessions(self.request.user)

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @extend_schema(
        description="List the current user's sessions (all sessions for admins)",
        responses={200: TherapySessionSerializer(many=True)}
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        description="Get a session the current user participates in",
        responses={200: TherapySessionSerializer, 404: {'description': 'Session not found'}}
    )
    def retrieve(self, request, *args, **kwargs):
        return super().retrieve(request, *args, **kwargs)

    @extend_schema(
        description="Sessions that have not ended and are not completed or cancelled, soonest first",
        responses={200: TherapySessionSerializer(many=True)}
    )
    @action(detail=False, methods=['get'])
    def upcoming(self, request):
        """
        GET /api/appointments/sessions/upcoming/
        """
        return self._paginated(SessionQueryService.get_user_sessions(request.user, scope='upcoming'))

    @extend_schema(
        description="Past, completed or cancelled sessions, most recent first",
        responses={200: TherapySessionSerializer(many=True)}
    )
    @action(detail=False, methods=['get'])
    def history(self, request):
        """
        GET /api/appointments/sessions/history/
        """
        return self._paginated(SessionQueryService.get_user_sessions(request.user, scope='history'))

    @extend_schema(
        parameters=[
            OpenApiParameter(name='psychologist_id', type=str, required=True),
            OpenApiParameter(name='session_timestamp_millis', type=int, required=True),
        ],
        responses={
            200: {
                'description': 'Whether the payment confirmation created the session',
                'example': {'session_id': 'session-uuid-1700000000000', 'confirmed': True, 'status': 'Pago'}
            },
            400: {'description': 'Invalid parameters'}
        },
        description="Poll whether a booking has been confirmed by the payment webhook"
    )
    @action(detail=False, methods=['get'], url_path='booking-status')
    def booking_status(self, request):
        """
        GET /api/appointments/sessions/booking-status/
        """
        serializer = BookingStatusQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = SessionQueryService.get_booking_status(
            serializer.validated_data['psychologist_id'],
            serializer.validated_data['session_timestamp_millis'],
        )
        return Response(result, status=status.HTTP_200_OK)

    @extend_schema(
        responses={
            200: PsychologistPatientSerializer(many=True),
            403: {'description': 'Not a psychologist'}
        },
        description="Patients who have booked with the current psychologist, most recently seen first"
    )
    @action(detail=False, methods=['get'])
    def patients(self, request):
        """
        GET /api/appointments/sessions/patients/
        """
        try:
            patients = SessionQueryService.get_psychologist_patients(request.user)
        except SessionAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        page = self.paginate_queryset(patients)
        if page is not None:
            return self.get_paginated_response(PsychologistPatientSerializer(page, many=True).data)
        return Response(PsychologistPatientSerializer(patients, many=True).data)

    @extend_schema(
        responses={
            200: PatientHistorySerializer,
            403: {'description': 'Not a psychologist'},
            404: {'description': 'No sessions with this patient'}
        },
        description="One patient's sessions with the current psychologist and summary stats"
    )
    @action(detail=False, methods=['get'], url_path=r'patients/(?P<patient_id>[^/.]+)')
    def patient_history(self, request, patient_id=None):
        """
        GET /api/appointments/sessions/patients/{patient_id}/
        """
        try:
            history = SessionQueryService.get_patient_history(request.user, patient_id)
        except SessionAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except SessionNotFoundError:
            return Response({'error': _('Patient not found')}, status=status.HTTP_404_NOT_FOUND)

        serializer = PatientHistorySerializer(history, context=self.get_serializer_context())
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        request=None,
        responses={
            200: TherapySessionSerializer,
            400: {'description': 'Session cannot be cancelled'}
        },
        description="Cancel a paid or scheduled session"
    )
    @action(detail=True, methods=['post'])
    def cancel(self, request, session_id=None):
        """
        POST /api/appointments/sessions/{id}/cancel/
        """
        session = self.get_object()
        try:
            session = SessionLifecycleService.cancel_session(session, request.user)
        except SessionStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(session).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=None,
        responses={
            200: TherapySessionSerializer,
            400: {'description': 'Session cannot be scheduled'},
            403: {'description': 'Not the session psychologist'}
        },
        description="Psychologist confirms a paid session"
    )
    @action(detail=True, methods=['post'])
    def schedule(self, request, session_id=None):
        """
        POST /api/appointments/sessions/{id}/schedule/
        """
        session = self.get_object()
        try:
            session = SessionLifecycleService.schedule_session(session, request.user)
        except SessionAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except SessionStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(session).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=LeaveRoomSerializer,
        responses={
            200: {
                'description': 'Room exit processed',
                'example': {'recorded': True, 'session': {'session_id': 'session-uuid-1700000000000', 'status': 'Concluída'}}
            }
        },
        description="Record the time spent in the video room when a participant leaves"
    )
    @action(detail=True, methods=['post'], url_path='leave-room')
    def leave_room(self, request, session_id=None):
        """
        POST /api/appointments/sessions/{id}/leave-room/
        """
        session = self.get_object()
        serializer = LeaveRoomSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = SessionLifecycleService.record_room_exit(
            session, request.user, serializer.validated_data['duration_seconds']
        )
        return Response({
            'recorded': result['recorded'],
            'session': self.get_serializer(result['session']).data
        }, status=status.HTTP_200_OK)

    @extend_schema(
        request=PsychologistNoteSerializer,
        responses={
            200: TherapySessionSerializer,
            403: {'description': 'Not the session psychologist'}
        },
        description="Save the psychologist's private note on a session"
    )
    @action(detail=True, methods=['patch'])
    def notes(self, request, session_id=None):
        """
        PATCH /api/appointments/sessions/{id}/notes/
        """
        session = self.get_object()
        serializer = PsychologistNoteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            session = SessionLifecycleService.save_psychologist_note(
                session, request.user, serializer.validated_data['psychologist_note']
            )
        except SessionAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(self.get_serializer(session).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=ReviewSerializer,
        responses={
            200: TherapySessionSerializer,
            400: {'description': 'Session cannot be reviewed'},
            403: {'description': 'Not the session patient'}
        },
        description="Patient rates a session from 1 to 5 with an optional comment"
    )
    @action(detail=True, methods=['post'])
    def review(self, request, session_id=None):
        """
        POST /api/appointments/sessions/{id}/review/
        """
        session = self.get_object()
        serializer = ReviewSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            session = SessionLifecycleService.submit_review(
                session,
                request.user,
                serializer.validated_data['rating'],
                serializer.validated_data.get('comment', ''),
            )
        except SessionAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except ReviewError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': _('Review submitted'),
            'session': self.get_serializer(session).data
        }, status=status.HTTP_200_OK)
