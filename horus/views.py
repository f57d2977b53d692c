import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import EvaluateRequestSerializer, EvaluatedValueSerializer, FormulaValidateSerializer
from .utils import evaluate_expressions, validate_formula

logger = logging.getLogger(__name__)


class MetricEvaluateAPIView(APIView):
    """Evaluate a batch of metric paths and formulas against one context."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = EvaluateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        context = serializer.build_context()
        results = evaluate_expressions(context, serializer.validated_data["expressions"])

        failed = sum(1 for r in results if not r["success"])
        if failed:
            logger.info(f"{failed} of {len(results)} expressions failed for user {request.user.pk}")

        data = EvaluatedValueSerializer(results, many=True).data
        return Response({"status": 200, "data": data}, status=status.HTTP_200_OK)


class FormulaValidateAPIView(APIView):
    """Report invalid metric paths in a formula without evaluating it."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = FormulaValidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = validate_formula(serializer.validated_data["formula"])
        return Response({"status": 200, "data": result}, status=status.HTTP_200_OK)
