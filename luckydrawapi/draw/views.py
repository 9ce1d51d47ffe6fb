from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from api.auth import resolve_capability
from api.exceptions import DrawError, to_api_exception

from .engine import DrawEngine
from .models import Draw, WinnerArchive
from .serializers import DrawSerializer, SlotSerializer, SlotStateSerializer, WinnerArchiveSerializer


class DrawViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Draw.objects.all()
    serializer_class = DrawSerializer
    filterset_fields = ['cycle_id', 'month']
    ordering_fields = ['timestamp']
    ordering = ['-timestamp']


class WinnerArchiveViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = WinnerArchive.objects.all()
    serializer_class = WinnerArchiveSerializer
    filterset_fields = ['draw_year', 'draw_month']
    ordering_fields = ['created_at']
    ordering = ['-created_at']


class SlotStateView(APIView):

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('cycle', openapi.IN_QUERY, type=openapi.TYPE_STRING, required=True),
            openapi.Parameter('month', openapi.IN_QUERY, type=openapi.TYPE_STRING, required=True),
        ],
        responses={200: SlotStateSerializer()},
    )
    def get(self, request):
        s = SlotSerializer(data=request.query_params)
        s.is_valid(raise_exception=True)
        snapshot = DrawEngine().snapshot(s.validated_data['cycle'], s.validated_data['month'])
        return Response(SlotStateSerializer(snapshot).data)


class TriggerView(APIView):

    @swagger_auto_schema(request_body=SlotSerializer)
    def post(self, request):
        s = SlotSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        cycle_id, month = s.validated_data['cycle'], s.validated_data['month']

        engine = DrawEngine()
        try:
            draw = engine.trigger(resolve_capability(request), cycle_id, month)
        except DrawError as e:
            raise to_api_exception(e)

        if draw is None:
            return Response(
                {'state': 'spinning', 'delay': engine.delay},
                status=status.HTTP_202_ACCEPTED,
            )
        return Response(DrawSerializer(draw).data, status=status.HTTP_201_CREATED)


class ResetView(APIView):

    @swagger_auto_schema(request_body=SlotSerializer)
    def post(self, request):
        s = SlotSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            deleted = DrawEngine().reset(
                resolve_capability(request), s.validated_data['cycle'], s.validated_data['month'],
            )
        except DrawError as e:
            raise to_api_exception(e)
        return Response({'reset': deleted})
