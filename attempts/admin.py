from django.contrib import admin

from .models import Answer, Attempt


class AnswerInline(admin.TabularInline):
    model = Answer
    extra = 0
    can_delete = False
    fields = ("question", "selected_option", "is_correct", "points_earned", "answered_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Attempt)
class AttemptAdmin(admin.ModelAdmin):
    """Read-only: attempts only change through the ledger."""
    list_display = ("student", "quiz", "status", "score", "points_earned", "total_points", "started_at", "submitted_at")
    list_filter = ("status", "quiz__title")
    search_fields = ("student__username", "student__email", "quiz__title")
    readonly_fields = (
        "student",
        "quiz",
        "status",
        "started_at",
        "submitted_at",
        "duration_seconds",
        "score",
        "points_earned",
        "total_points",
        "question_weights",
    )
    inlines = (AnswerInline,)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
