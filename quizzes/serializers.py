from rest_framework import serializers


class CreateQuizSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, required=False, default="")
    duration_minutes = serializers.IntegerField(allow_null=True, required=False, default=None)
