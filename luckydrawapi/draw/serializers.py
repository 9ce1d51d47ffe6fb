from rest_framework import serializers

from .models import Draw, WinnerArchive


class DrawSerializer(serializers.ModelSerializer):

    class Meta:
        model = Draw
        fields = [
            'id',
            'cycle_id',
            'month',
            'winner',
            'winner_name',
            'timestamp',
        ]


class WinnerArchiveSerializer(serializers.ModelSerializer):

    class Meta:
        model = WinnerArchive
        fields = '__all__'


class SlotSerializer(serializers.Serializer):
    cycle = serializers.CharField(max_length=9)
    month = serializers.CharField(max_length=64)


class SlotStateSerializer(serializers.Serializer):
    cycle_id = serializers.CharField()
    month = serializers.CharField()
    state = serializers.ChoiceField(choices=['no_draw', 'spinning', 'resolved'])
    is_spinning = serializers.BooleanField()
    draw = serializers.DictField(allow_null=True)
