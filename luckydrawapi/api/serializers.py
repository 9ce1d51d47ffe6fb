from rest_framework import serializers

from .models import Participant


class ParticipantSerializer(serializers.ModelSerializer):

    class Meta:
        model = Participant
        fields = [
            'id',
            'name',
            'cycle_id',
            'draw_month',
            'is_winner',
            'created_at',
        ]


class ParticipantCreateSerializer(serializers.Serializer):
    cycle_id = serializers.CharField(max_length=9)
    name = serializers.CharField(max_length=200, allow_blank=True)


class CycleSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=9)


class CycleListSerializer(serializers.Serializer):
    cycles = serializers.ListField(child=serializers.CharField())


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(style={'input_type': 'password'})


class CapabilitySerializer(serializers.Serializer):
    role = serializers.CharField()
    email = serializers.CharField(allow_null=True)
    cycle_id = serializers.CharField(allow_null=True)
    month = serializers.CharField(allow_null=True)
