from rest_framework import serializers

from .models import STATUS_CHOICES


class StoreSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    notes = serializers.CharField(read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)


class StoreCreateSerializer(serializers.Serializer):
    name = serializers.CharField(
        max_length=200,
        error_messages={
            'required': 'Store name is required',
            'blank': 'Store name is required',
        },
    )


class StorePatchSerializer(serializers.Serializer):
    """Partial update: any of status and notes"""
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Provide status and/or notes to update.')
        return attrs
