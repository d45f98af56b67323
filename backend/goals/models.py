from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinValueValidator, MaxValueValidator

from activities.classifier.constants import GoalContext


class Goal(models.Model):
    """
    Represents a goal set by the user. Activities and tasks are scored
    against it.
    """

    class GoalType(models.TextChoices):
        SHORT = 'short', _("Short term")
        MEDIUM = 'medium', _("Medium term")
        LONG = 'long', _("Long term")

    # Link to the User Model
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='goals',
        verbose_name=_("user")
    )

    title = models.CharField(max_length=255, verbose_name=_("title"))

    description = models.TextField(blank=True, verbose_name=_("description"))

    goal_type = models.CharField(
        max_length=10,
        choices=GoalType.choices,
        default=GoalType.SHORT,
        verbose_name=_("goal type")
    )

    progress_percentage = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name=_("progress percentage")
    )

    is_completed = models.BooleanField(default=False, verbose_name=_("is completed"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # Soft delete mechanism
    is_archived = models.BooleanField(default=False, verbose_name=_("is archived"))

    class Meta:
        verbose_name = _("Goal")
        verbose_name_plural = _("Goals")
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.username}'s Goal: {self.title}"

    def as_goal_context(self) -> GoalContext:
        """Plain goal details for goal-aware AI prompts."""
        return GoalContext(
            id=self.pk,
            title=self.title,
            type_name=str(self.GoalType(self.goal_type).label),
        )
