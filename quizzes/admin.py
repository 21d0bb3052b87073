from django.contrib import admin
from django.core.exceptions import ValidationError
from django.forms.models import BaseInlineFormSet

from .models import Option, Question, Quiz
from .services import publish_quiz, unpublish_quiz, validate_option_flags

# --------------------
# Inlines
# --------------------

class OptionInlineFormSet(BaseInlineFormSet):
    def clean(self):
        super().clean()
        flags = []
        for form in self.forms:
            if not getattr(form, "cleaned_data", None) or form.cleaned_data.get("DELETE"):
                continue
            flags.append(bool(form.cleaned_data.get("is_correct")))
        validate_option_flags(flags)


class OptionInline(admin.TabularInline):
    model = Option
    formset = OptionInlineFormSet
    extra = 4
    max_num = 6
    fields = ("order", "text", "is_correct")
    ordering = ("order", "created_at")


class QuestionInline(admin.StackedInline):
    model = Question
    extra = 1
    fields = ("order", "text", "points")
    ordering = ("order", "created_at")
    show_change_link = True

# --------------------
# Actions
# --------------------

@admin.action(description="Publish selected quizzes")
def publish_quizzes(modeladmin, request, queryset):
    published = 0
    skipped = 0
    for quiz in queryset:
        try:
            publish_quiz(quiz)
            published += 1
        except ValidationError:
            skipped += 1

    modeladmin.message_user(request, f"Published {published} quiz(zes); skipped {skipped} without questions.")


@admin.action(description="Unpublish selected quizzes")
def unpublish_quizzes(modeladmin, request, queryset):
    for quiz in queryset:
        unpublish_quiz(quiz)
    modeladmin.message_user(request, f"Unpublished {queryset.count()} quiz(zes).")

# --------------------
# ModelAdmins
# --------------------

@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    list_display = ("title", "instructor", "is_published", "duration_minutes", "created_at")
    list_filter = ("is_published",)
    search_fields = ("title", "description", "instructor__username", "instructor__email")
    autocomplete_fields = ("instructor",)
    # Publication goes through the actions so the "has questions" gate always applies.
    readonly_fields = ("is_published", "created_at", "updated_at")
    inlines = (QuestionInline,)
    actions = (publish_quizzes, unpublish_quizzes)


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("quiz", "order", "short_text", "points")
    list_filter = ("quiz__is_published",)
    search_fields = ("text", "quiz__title")
    ordering = ("quiz", "order", "created_at")
    autocomplete_fields = ("quiz",)
    inlines = (OptionInline,)

    def short_text(self, obj):
        return (obj.text[:60] + "…") if obj.text and len(obj.text) > 60 else (obj.text or "")
