import logging

from django.db.models.signals import pre_save
from django.dispatch import receiver
from django.utils import timezone

from activities.classifier.rules import explain_task, score_task_by_rules
from activities.models import TASK_SCORING_FIELDS, KanbanTask

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=KanbanTask)
def recompute_task_score(sender, instance: KanbanTask, update_fields=None, **kwargs):
    """
    Keeps a task's rule score in step with its fields and stamps the
    completion time on the first move into ``done``.

    Rule scoring is pure, so re-running it on an unchanged task is a no-op.
    """
    if update_fields is not None and not (TASK_SCORING_FIELDS | {'status'}) & set(update_fields):
        return

    if instance.status == KanbanTask.Status.DONE and instance.completed_at is None:
        previous_status = None
        if instance.pk:
            previous_status = (
                KanbanTask.objects.filter(pk=instance.pk).values_list('status', flat=True).first()
            )
        if previous_status != KanbanTask.Status.DONE:
            instance.completed_at = timezone.now()
    elif instance.status != KanbanTask.Status.DONE:
        instance.completed_at = None

    task_input = instance.as_scoring_input()
    result = score_task_by_rules(task_input)
    instance.signal_score = result.score
    instance.classification = result.classification.value
    instance.reasoning = explain_task(task_input, result)

    logger.debug(f"Task '{instance.title}' rescored: {result.score} ({result.classification.value})")
