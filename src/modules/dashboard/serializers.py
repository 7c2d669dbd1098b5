from rest_framework import serializers


class PeriodQuerySerializer(serializers.Serializer):
    period = serializers.IntegerField(min_value=1, max_value=365, default=30)


class LimitQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=50, default=5)
