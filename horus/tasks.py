"""
Celery tasks for report generation.
"""
import logging
from typing import Any, Dict, List

from celery import shared_task
from rest_framework.exceptions import ValidationError

from .serializers import EvaluateRequestSerializer
from .utils import evaluate_expressions

logger = logging.getLogger(__name__)


@shared_task
def evaluate_report_expressions(context_payload: Dict[str, Any], expressions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Evaluate the derived values of a generated report.

    Args:
        context_payload: Evaluation context in the API payload shape
        expressions: Expression requests in the API payload shape

    Returns:
        List of result dicts, one per expression
    """
    serializer = EvaluateRequestSerializer(data={"context": context_payload, "expressions": expressions})
    try:
        serializer.is_valid(raise_exception=True)
    except ValidationError as e:
        logger.error(f"Rejected report evaluation payload: {e.detail}", exc_info=True)
        raise

    context = serializer.build_context()
    results = evaluate_expressions(context, serializer.validated_data["expressions"])

    failed = sum(1 for r in results if not r["success"])
    logger.info(
        f"Evaluated {len(results)} report expressions for session "
        f"{context.current.session_id or '<unknown>'}, {failed} failed"
    )
    return results
