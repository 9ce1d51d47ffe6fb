from django.conf import settings
from rest_framework import serializers

from .models import GuestToken
from .utils import share_url


class GuestTokenSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField('get_url')

    class Meta:
        model = GuestToken
        fields = '__all__'

    def get_url(self, instance):
        base_url = self.context.get('base_url') or settings.SITE_URL
        return share_url(base_url, instance.token)


class GuestLinkCreateSerializer(serializers.Serializer):
    cycle = serializers.CharField(max_length=9)
    month = serializers.CharField(max_length=64)
    base_url = serializers.URLField(required=False)


class GuestValidateSerializer(serializers.Serializer):
    token = serializers.CharField(required=False, allow_blank=True)
    guest = serializers.CharField(required=False, allow_blank=True)
