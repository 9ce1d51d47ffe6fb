import logging

from django.db import DatabaseError, transaction
from django.utils import timezone
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import NotAuthenticated, NotFound
from rest_framework.response import Response
from rest_framework.views import APIView

from draw.models import WinnerArchive

from .auth import login, logout, resolve_capability
from .exceptions import DrawError, to_api_exception
from .models import Participant
from .serializers import (
    CapabilitySerializer,
    CycleListSerializer,
    CycleSerializer,
    LoginSerializer,
    ParticipantCreateSerializer,
    ParticipantSerializer,
)
from .utils import add_participant, create_cycle, get_cycles, latest_cycle, remove_participant


logger = logging.getLogger('api.views')

TRUE_VALUES = ('1', 'true', 'yes', 'on')


class LoginView(APIView):
    """
    Sign in with a username and password. The role comes from the email
    allow-lists.
    """

    @swagger_auto_schema(request_body=LoginSerializer, responses={200: CapabilitySerializer()})
    def post(self, request):
        s = LoginSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        user = login(request, s.validated_data['username'], s.validated_data['password'])
        if user is None:
            raise NotAuthenticated(detail='Invalid username or password')
        return Response(CapabilitySerializer(resolve_capability(request).as_dict()).data)


class LogoutView(APIView):

    def post(self, request):
        logout(request)
        return Response(True)


class SessionView(APIView):
    """
    Capability of the current session.
    """

    @swagger_auto_schema(responses={200: CapabilitySerializer()})
    def get(self, request):
        return Response(CapabilitySerializer(resolve_capability(request).as_dict()).data)


class CycleView(APIView):

    @swagger_auto_schema(responses={200: CycleListSerializer()})
    def get(self, request, format=None):
        return Response({'cycles': get_cycles()})

    @swagger_auto_schema(request_body=CycleSerializer, responses={201: CycleListSerializer()})
    def post(self, request):
        s = CycleSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            cycles = create_cycle(resolve_capability(request), s.validated_data['name'])
        except DrawError as e:
            raise to_api_exception(e)
        return Response({'cycles': cycles}, status=status.HTTP_201_CREATED)


class ParticipantViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Participant.objects.all()
    serializer_class = ParticipantSerializer
    filterset_fields = ['cycle_id', 'is_winner']
    ordering_fields = ['created_at', 'name']
    ordering = ['created_at', 'id']

    @swagger_auto_schema(request_body=ParticipantCreateSerializer, responses={201: ParticipantSerializer()})
    def create(self, request):
        s = ParticipantCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            participant = add_participant(
                resolve_capability(request), s.validated_data['cycle_id'], s.validated_data['name'],
            )
        except DrawError as e:
            raise to_api_exception(e)
        return Response(ParticipantSerializer(participant).data, status=status.HTTP_201_CREATED)

    @swagger_auto_schema(manual_parameters=[
        openapi.Parameter('confirm', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN, required=True),
    ])
    def destroy(self, request, pk=None):
        confirm = str(request.query_params.get('confirm', '')).lower() in TRUE_VALUES
        try:
            removed = remove_participant(resolve_capability(request), pk, confirm=confirm)
        except DrawError as e:
            raise to_api_exception(e)
        if not removed:
            raise NotFound()
        return Response(status=status.HTTP_204_NO_CONTENT)


class GetParticipantsView(APIView):
    """
    Serverless handler: every participant, unfiltered.
    """

    authentication_classes = []

    def get(self, request):
        try:
            data = ParticipantSerializer(Participant.objects.all(), many=True).data
        except DatabaseError as e:
            logger.error('get-participants failed', exc_info=True)
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(data)


class AddParticipantView(APIView):
    """
    Serverless handler: add a participant for a draw month. The participant
    joins the most recent cycle.
    """

    authentication_classes = []

    def post(self, request):
        if not isinstance(request.data, dict):
            return Response('Name and month are required.', status=status.HTTP_400_BAD_REQUEST)
        name = request.data.get('name')
        month = request.data.get('month')
        if not name or not month:
            return Response('Name and month are required.', status=status.HTTP_400_BAD_REQUEST)

        try:
            participant = Participant.objects.create(
                name=name, draw_month=month, cycle_id=latest_cycle(),
            )
        except DatabaseError as e:
            logger.error('add-participant failed', exc_info=True)
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(ParticipantSerializer(participant).data)


class SetWinnerView(APIView):
    """
    Serverless handler: flag the participant as winner and archive the win
    under the current year.
    """

    authentication_classes = []

    def post(self, request):
        if not isinstance(request.data, dict):
            return Response('Missing winner information.', status=status.HTTP_400_BAD_REQUEST)
        winner_id = request.data.get('winnerId')
        winner_name = request.data.get('winnerName')
        draw_month = request.data.get('drawMonth')
        if not winner_id or not winner_name or not draw_month:
            return Response('Missing winner information.', status=status.HTTP_400_BAD_REQUEST)

        try:
            with transaction.atomic():
                Participant.objects.filter(pk=winner_id).update(is_winner=True)
                WinnerArchive.objects.create(
                    winner_name=winner_name,
                    draw_month=draw_month,
                    draw_year=timezone.now().year,
                )
        except (DatabaseError, ValueError) as e:
            logger.error('set-winner failed', exc_info=True)
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({'message': 'Winner saved successfully!'})
