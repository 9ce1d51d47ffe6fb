import io
import logging

import qrcode
import qrcode.image.svg
from django.conf import settings
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from api.auth import grant_guest, resolve_capability
from api.exceptions import DrawError, to_api_exception
from api.renderer import SVGRenderer
from api.serializers import CapabilitySerializer

from .models import GuestToken
from .serializers import GuestLinkCreateSerializer, GuestTokenSerializer, GuestValidateSerializer
from .utils import active_links, issue_link, revoke_link, share_url, validate_token

logger = logging.getLogger('guestlink.views')


class GuestLinkListView(APIView):
    """
    Active guest links (admins only) and issuing of new ones.
    """

    @swagger_auto_schema(responses={200: GuestTokenSerializer(many=True)})
    def get(self, request):
        try:
            links = active_links(resolve_capability(request))
        except DrawError as e:
            raise to_api_exception(e)
        return Response(GuestTokenSerializer(links, many=True).data)

    @swagger_auto_schema(request_body=GuestLinkCreateSerializer, responses={201: GuestTokenSerializer()})
    def post(self, request):
        s = GuestLinkCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            guest_token = issue_link(
                resolve_capability(request), s.validated_data['cycle'], s.validated_data['month'],
            )
        except DrawError as e:
            raise to_api_exception(e)
        data = GuestTokenSerializer(
            guest_token, context={'base_url': s.validated_data.get('base_url')},
        ).data
        return Response(data, status=status.HTTP_201_CREATED)


class GuestLinkDetailView(APIView):

    def delete(self, request, token):
        try:
            revoked = revoke_link(resolve_capability(request), token)
        except DrawError as e:
            raise to_api_exception(e)
        if not revoked:
            raise NotFound()
        return Response(status=status.HTTP_204_NO_CONTENT)


class GuestLinkQRCodeView(APIView):
    """
    QR Code of the share URL of a guest link.
    """

    renderer_classes = [SVGRenderer]

    def get(self, request, token):
        if not resolve_capability(request).is_admin:
            raise PermissionDenied()
        guest_token = GuestToken.objects.filter(token=token).first()
        if guest_token is None:
            raise NotFound()

        factory = qrcode.image.svg.SvgPathImage
        img = qrcode.make(
            share_url(request.query_params.get('base_url') or settings.SITE_URL, guest_token.token),
            image_factory=factory,
        )
        stream = io.BytesIO()
        img.save(stream)
        img = stream.getvalue()
        stream.close()
        return Response(img, content_type='image/svg+xml')


class GuestValidateView(APIView):
    """
    Validate a guest link and remember the grant for the rest of the session.
    The grant is not checked again, even if the link is revoked later.
    """

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('token', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('guest', openapi.IN_QUERY, type=openapi.TYPE_STRING),
        ],
        responses={200: CapabilitySerializer()},
    )
    def get(self, request):
        return self._validate(request, request.query_params)

    @swagger_auto_schema(request_body=GuestValidateSerializer, responses={200: CapabilitySerializer()})
    def post(self, request):
        return self._validate(request, request.data)

    def _validate(self, request, data):
        s = GuestValidateSerializer(data=data)
        s.is_valid(raise_exception=True)
        token = s.validated_data.get('token')

        if token:
            try:
                guest_token = validate_token(token)
            except DrawError as e:
                logger.info('Guest link rejected: %s', e)
                raise to_api_exception(e)
            grant_guest(request, guest_token.cycle_id, guest_token.month, guest_token.token)
        elif s.validated_data.get('guest') == 'true':
            if not settings.LUCKYDRAW_ALLOW_LEGACY_GUEST:
                raise PermissionDenied(detail='Guest links without a token are disabled.')
            grant_guest(request)
        else:
            raise ValidationError({'token': 'A guest token is required.'})

        return Response(CapabilitySerializer(resolve_capability(request).as_dict()).data)
