from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils.translation import gettext_lazy as _

from goals.models import Goal
from activities.classifier.constants import (
    METHOD_CHOICES,
    METHOD_RULES,
    Classification,
    ClassificationResult,
)

CLASSIFICATION_CHOICES = [(c.value, c.value.title()) for c in Classification]
METHOD_FIELD_CHOICES = [(m, m) for m in METHOD_CHOICES]
ONE_TO_TEN = [MinValueValidator(1), MaxValueValidator(10)]

# Task fields that feed the rule score, and the columns derived from them
TASK_SCORING_FIELDS = frozenset(
    {'generates_revenue', 'priority', 'urgent', 'important', 'impact', 'effort'}
)
TASK_DERIVED_FIELDS = frozenset({'signal_score', 'classification', 'reasoning', 'completed_at'})


class Activity(models.Model):
    """
    A free-form activity log entry, classified once when logged.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='activities',
        verbose_name=_("user")
    )

    goal = models.ForeignKey(
        Goal,
        on_delete=models.SET_NULL,  # the log survives the goal
        null=True, blank=True,
        related_name='activities',
        verbose_name=_("related goal")
    )

    description = models.TextField(verbose_name=_("description"))
    duration_minutes = models.PositiveIntegerField(default=0, verbose_name=_("duration (minutes)"))
    energy_before = models.PositiveSmallIntegerField(default=5, validators=ONE_TO_TEN)
    energy_after = models.PositiveSmallIntegerField(default=5, validators=ONE_TO_TEN)
    impact = models.PositiveSmallIntegerField(null=True, blank=True, validators=ONE_TO_TEN)
    effort = models.PositiveSmallIntegerField(null=True, blank=True, validators=ONE_TO_TEN)

    # Classification output
    signal_score = models.PositiveSmallIntegerField(
        default=50,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name=_("signal score")
    )
    classification = models.CharField(
        max_length=10,
        choices=CLASSIFICATION_CHOICES,
        default=Classification.NEUTRAL.value,
        verbose_name=_("classification")
    )
    confidence_score = models.FloatField(default=0.5, verbose_name=_("confidence"))
    reasoning = models.TextField(blank=True, verbose_name=_("reasoning"))
    classification_method = models.CharField(
        max_length=20,
        choices=METHOD_FIELD_CHOICES,
        default=METHOD_RULES,
        verbose_name=_("classification method")
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        verbose_name = _("Activity")
        verbose_name_plural = _("Activities")
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.description[:40]} [{self.classification}]"

    def as_scoring_input(self) -> dict:
        return {
            'description': self.description,
            'duration_minutes': self.duration_minutes,
            'energy_before': self.energy_before,
            'energy_after': self.energy_after,
            'goal_id': self.goal_id,
            'impact': self.impact,
            'effort': self.effort,
        }

    def apply_result(self, result: ClassificationResult) -> None:
        """Copy a classification result onto the row (caller saves)."""
        self.signal_score = result.score
        self.classification = result.classification.value
        self.confidence_score = result.confidence
        self.reasoning = result.reasoning
        self.classification_method = result.method


class ActiveTaskManager(models.Manager):
    """Hides soft-deleted tasks."""

    def get_queryset(self):
        return super().get_queryset().filter(is_active=True)


class KanbanTask(models.Model):
    """
    A kanban card. Its rule score is recomputed on every save
    (see activities.signals) and it is only ever soft-deleted.
    """

    class Status(models.TextChoices):
        TODO = 'todo', _("To do")
        PROGRESS = 'progress', _("In progress")
        DONE = 'done', _("Done")

    class Priority(models.TextChoices):
        HIGH = 'high', _("High")
        MEDIUM = 'medium', _("Medium")
        LOW = 'low', _("Low")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='kanban_tasks',
        verbose_name=_("user")
    )

    title = models.CharField(max_length=255, verbose_name=_("title"))
    description = models.TextField(blank=True, verbose_name=_("description"))
    project = models.CharField(max_length=100, default='PERSONAL', verbose_name=_("project"))
    category = models.CharField(max_length=100, default='General', verbose_name=_("category"))

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.TODO)
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)

    generates_revenue = models.BooleanField(default=False, verbose_name=_("generates revenue"))
    urgent = models.BooleanField(default=False, verbose_name=_("urgent"))
    important = models.BooleanField(default=False, verbose_name=_("important"))
    impact = models.PositiveSmallIntegerField(default=5, validators=ONE_TO_TEN)
    effort = models.PositiveSmallIntegerField(default=5, validators=ONE_TO_TEN)

    # Classification output
    signal_score = models.PositiveSmallIntegerField(default=0, verbose_name=_("signal score"))
    classification = models.CharField(
        max_length=10,
        choices=CLASSIFICATION_CHOICES,
        default=Classification.NOISE.value,
        verbose_name=_("classification")
    )
    reasoning = models.TextField(blank=True, verbose_name=_("reasoning"))

    due_date = models.DateField(null=True, blank=True, verbose_name=_("due date"))
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_("completed at"))
    position = models.PositiveIntegerField(default=0, verbose_name=_("board position"))

    is_active = models.BooleanField(default=True, verbose_name=_("is active"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    objects = models.Manager()
    active = ActiveTaskManager()

    class Meta:
        verbose_name = _("Kanban Task")
        verbose_name_plural = _("Kanban Tasks")
        ordering = ['position', '-created_at']

    def __str__(self):
        return f"{self.title} ({self.status})"

    def as_scoring_input(self) -> dict:
        return {
            'title': self.title,
            'description': self.description,
            'generates_revenue': self.generates_revenue,
            'priority': self.priority,
            'urgent': self.urgent,
            'important': self.important,
            'impact': self.impact,
            'effort': self.effort,
        }

    def save(self, *args, **kwargs):
        # The pre_save receiver rewrites the derived columns; a partial save
        # touching a scoring field or the status must write them too.
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and (TASK_SCORING_FIELDS | {'status'}) & set(update_fields):
            kwargs['update_fields'] = set(update_fields) | TASK_DERIVED_FIELDS
        super().save(*args, **kwargs)

    def soft_delete(self) -> None:
        self.is_active = False
        self.save(update_fields=['is_active', 'updated_at'])
