import math

from rest_framework import serializers


def is_finite(value):
    """False for inf, nan and integers too large to fit a float"""
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


class NumberField(serializers.FloatField):
    """
    A FloatField that keeps integers as ``int`` in both directions, so whole
    quantities are stored and exported without a float round trip.
    """

    def to_internal_value(self, data):
        if isinstance(data, int) and not isinstance(data, bool):
            return data
        value = super().to_internal_value(data)
        if value.is_integer():
            return int(value)
        return value

    def to_representation(self, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return float(value)


class SupplySerializer(serializers.Serializer):
    """Wire representation of a Supply (also the export/import document entry)"""
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    quantity = NumberField(read_only=True)
    unit = serializers.CharField(read_only=True)
    lowThreshold = NumberField(source='low_threshold', read_only=True)
    lastUpdated = serializers.DateTimeField(source='last_updated', read_only=True)


class SupplyFormSerializer(serializers.Serializer):
    """
    Add/edit form contract. The form posts every field as text; numbers are
    parsed here and must satisfy quantity >= 0 and lowThreshold > 0.

    lowThreshold may be left out: the add view falls back to the default
    threshold, an edit keeps the current one.
    """
    name = serializers.CharField(
        max_length=200,
        error_messages={
            'required': 'Item name is required',
            'blank': 'Item name is required',
        },
    )
    quantity = NumberField(
        error_messages={
            'required': 'Enter a valid quantity',
            'invalid': 'Enter a valid quantity',
        },
    )
    unit = serializers.CharField(
        max_length=50,
        error_messages={
            'required': 'Unit type is required (e.g., boxes, kg, pieces)',
            'blank': 'Unit type is required (e.g., boxes, kg, pieces)',
        },
    )
    lowThreshold = NumberField(
        source='low_threshold',
        required=False,
        error_messages={
            'invalid': 'Enter a valid threshold',
        },
    )

    def validate_quantity(self, value):
        if not is_finite(value) or value < 0:
            raise serializers.ValidationError('Enter a valid quantity')
        return value

    def validate_lowThreshold(self, value):
        if not is_finite(value) or value <= 0:
            raise serializers.ValidationError('Enter a valid threshold')
        return value


class AdjustQuantitySerializer(serializers.Serializer):
    delta = NumberField()

    def validate_delta(self, value):
        if not is_finite(value):
            raise serializers.ValidationError('A valid number is required.')
        return value
