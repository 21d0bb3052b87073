from rest_framework import serializers

from .models import Answer, Attempt


class RecordAnswerSerializer(serializers.Serializer):
    question_id = serializers.UUIDField()
    # null (or missing) = skip
    selected_option_id = serializers.UUIDField(allow_null=True, required=False, default=None)


class AttemptSerializer(serializers.ModelSerializer):
    quiz_id = serializers.UUIDField(read_only=True)
    student_id = serializers.IntegerField(read_only=True)
    is_completed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Attempt
        fields = (
            "id",
            "quiz_id",
            "student_id",
            "status",
            "is_completed",
            "started_at",
            "submitted_at",
            "duration_seconds",
            "score",
            "points_earned",
            "total_points",
        )


class StudentAnswerSerializer(serializers.ModelSerializer):
    """What a student sees while the attempt is still open: no correctness."""
    question_id = serializers.UUIDField(read_only=True)
    selected_option_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Answer
        fields = ("id", "question_id", "selected_option_id", "answered_at")


class AnswerDetailSerializer(serializers.Serializer):
    id = serializers.CharField()
    question_id = serializers.CharField()
    question_text = serializers.CharField()
    question_points = serializers.IntegerField()
    question_order = serializers.IntegerField()
    selected_option_id = serializers.CharField(allow_null=True)
    selected_option_text = serializers.CharField(allow_null=True)
    correct_option_id = serializers.CharField(allow_null=True)
    correct_option_text = serializers.CharField(allow_null=True)
    is_correct = serializers.BooleanField()
    points_earned = serializers.IntegerField()
    answered_at = serializers.DateTimeField()


class AttemptReviewSerializer(serializers.Serializer):
    attempt = AttemptSerializer()
    quiz_title = serializers.CharField()
    quiz_description = serializers.CharField(allow_blank=True)
    answers = AnswerDetailSerializer(many=True)
