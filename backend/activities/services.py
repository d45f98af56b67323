# activities/services.py
"""
Persistence-side callers of the classifier.

The classifier never touches the database; these helpers resolve goal
context, run the dispatch policy and store the outcome.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction

from activities.classifier.constants import Classification, ClassificationResult, GoalContext
from activities.classifier.efficiency import create_ranking, efficiency_stats
from activities.classifier.orchestrator import SignalOrchestrator, get_orchestrator
from activities.models import Activity, KanbanTask
from goals.models import Goal

logger = logging.getLogger(__name__)


def _goal_context_for(goal: Optional[Goal]):
    if goal is None or goal.is_archived:
        return None
    return goal.as_goal_context()


def log_activity(
    user,
    description: str,
    duration_minutes: int = 0,
    energy_before: int = 5,
    energy_after: int = 5,
    goal: Optional[Goal] = None,
    impact: Optional[int] = None,
    effort: Optional[int] = None,
    orchestrator: Optional[SignalOrchestrator] = None,
) -> Activity:
    """
    Classify a new activity and store it with its result.

    The classification runs before the transaction opens so a slow model
    call never holds a database lock.
    """
    orchestrator = orchestrator or get_orchestrator()
    activity = Activity(
        user=user,
        goal=goal,
        description=description,
        duration_minutes=duration_minutes,
        energy_before=energy_before,
        energy_after=energy_after,
        impact=impact,
        effort=effort,
    )

    result = orchestrator.classify(activity.as_scoring_input(), _goal_context_for(goal))
    activity.apply_result(result)

    with transaction.atomic():
        activity.save()

    logger.info(
        f"Activity {activity.pk} logged: {result.classification.value} "
        f"(score={result.score}, method={result.method})"
    )
    return activity


def reclassify_activity(
    activity: Activity,
    orchestrator: Optional[SignalOrchestrator] = None,
) -> ClassificationResult:
    """Run the dispatch policy again for a stored activity and persist the result."""
    orchestrator = orchestrator or get_orchestrator()
    result = orchestrator.classify(activity.as_scoring_input(), _goal_context_for(activity.goal))

    activity.apply_result(result)
    activity.save(update_fields=[
        'signal_score',
        'classification',
        'confidence_score',
        'reasoning',
        'classification_method',
    ])
    return result


def classify_task(
    task: KanbanTask,
    use_ai: bool = False,
    orchestrator: Optional[SignalOrchestrator] = None,
) -> ClassificationResult:
    """
    Classify a kanban task on demand, optionally with the generative tier.

    The user's most recent open goals are summarised into one goal context.
    """
    orchestrator = orchestrator or get_orchestrator()
    goal_context = None
    if use_ai:
        titles = list(
            Goal.objects.filter(user=task.user, is_archived=False, is_completed=False)
            .order_by('-created_at')
            .values_list('title', flat=True)[:5]
        )
        if titles:
            goal_context = GoalContext(title=", ".join(titles), type_name="Active goals")

    result = orchestrator.classify_task(task.as_scoring_input(), goal_context, use_ai=use_ai)

    # Bypass the pre_save rescoring so an AI verdict is kept.
    KanbanTask.objects.filter(pk=task.pk).update(
        signal_score=result.score,
        classification=result.classification.value,
        reasoning=result.reasoning,
    )
    task.signal_score = result.score
    task.classification = result.classification.value
    task.reasoning = result.reasoning
    return result


def board_stats(tasks: Iterable[KanbanTask]) -> Dict[str, int]:
    tasks = list(tasks)
    return {
        'total': len(tasks),
        'todo': sum(1 for t in tasks if t.status == KanbanTask.Status.TODO),
        'progress': sum(1 for t in tasks if t.status == KanbanTask.Status.PROGRESS),
        'done': sum(1 for t in tasks if t.status == KanbanTask.Status.DONE),
        'signal': sum(1 for t in tasks if t.classification == Classification.SIGNAL.value),
        'noise': sum(1 for t in tasks if t.classification == Classification.NOISE.value),
        'revenue': sum(1 for t in tasks if t.generates_revenue),
    }


def efficiency_ranking(user, limit: int = 10) -> Dict[str, Any]:
    """Top activities of a user by efficiency points, plus summary stats."""
    rows: List[Dict[str, Any]] = list(
        Activity.objects.filter(user=user, impact__isnull=False)
        .values('id', 'description', 'duration_minutes', 'impact', 'effort', 'classification')
    )
    return {
        'ranking': create_ranking(rows, limit=limit),
        'stats': efficiency_stats(rows),
    }
