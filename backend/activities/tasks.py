# activities/tasks.py

import logging
from typing import Any, Dict, Optional

from celery import shared_task
from django.db import DatabaseError

from activities.classifier.orchestrator import get_orchestrator
from activities.models import Activity
from activities.services import reclassify_activity

# Configure logging for background worker monitoring
logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    # AI failures already fall back to rules inside the orchestrator; only
    # storage errors are worth another attempt.
    autoretry_for=(DatabaseError,),
    retry_backoff=True,
    retry_backoff_max=600,
    max_retries=3,
    time_limit=60,
    soft_time_limit=45
)
def run_activity_classification(self, activity_id: int) -> Optional[Dict[str, Any]]:
    """
    Worker: re-classify a stored activity and persist the new result.
    Input = activity_id only; everything else is read from the database.
    """
    logger.info(f"Classification started for Activity {activity_id}")

    activity = Activity.objects.select_related('goal').filter(id=activity_id).first()
    if not activity:
        logger.warning(f"Activity {activity_id} not found. Exiting worker.")
        return None

    result = reclassify_activity(activity, orchestrator=get_orchestrator())

    logger.info(
        f"Classification persisted for Activity {activity_id}: "
        f"{result.classification.value} via {result.method}"
    )
    return result.as_dict()
