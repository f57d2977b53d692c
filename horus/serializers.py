from rest_framework import serializers

from .conf import engine_setting
from .snapshots import EvaluationContext, MovementType, SessionMetrics


# Payload keys are the camelCase names used in metric paths
class PerLegMetricsSerializer(serializers.Serializer):
    overallMaxRom = serializers.FloatField(required=False, allow_null=True)
    averageRom = serializers.FloatField(required=False, allow_null=True)
    peakFlexion = serializers.FloatField(required=False, allow_null=True)
    peakExtension = serializers.FloatField(required=False, allow_null=True)
    peakAngularVelocity = serializers.FloatField(required=False, allow_null=True)
    explosivenessConcentric = serializers.FloatField(required=False, allow_null=True)
    explosivenessLoading = serializers.FloatField(required=False, allow_null=True)
    rmsJerk = serializers.FloatField(required=False, allow_null=True)
    romCoV = serializers.FloatField(required=False, allow_null=True)


class BilateralMetricsSerializer(serializers.Serializer):
    romAsymmetry = serializers.FloatField(required=False, allow_null=True)
    velocityAsymmetry = serializers.FloatField(required=False, allow_null=True)
    crossCorrelation = serializers.FloatField(required=False, allow_null=True)
    realAsymmetryAvg = serializers.FloatField(required=False, allow_null=True)
    netGlobalAsymmetry = serializers.FloatField(required=False, allow_null=True)
    phaseShift = serializers.FloatField(required=False, allow_null=True)
    temporalLag = serializers.FloatField(required=False, allow_null=True)
    maxFlexionTimingDiff = serializers.FloatField(required=False, allow_null=True)


class SessionMetricsSerializer(serializers.Serializer):
    """Serializer for one session metrics snapshot."""
    sessionId = serializers.CharField(required=False, allow_blank=True, default="")
    leftLeg = PerLegMetricsSerializer()
    rightLeg = PerLegMetricsSerializer()
    bilateral = BilateralMetricsSerializer()
    opiScore = serializers.FloatField(required=False, allow_null=True)
    opiGrade = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    movementType = serializers.ChoiceField(choices=MovementType.choices, default=MovementType.BILATERAL)
    recordedAt = serializers.IntegerField(required=False, default=0)

    def create(self, validated_data):
        return SessionMetrics.from_dict(validated_data)


class EvaluationContextSerializer(serializers.Serializer):
    """Serializer for the sessions available to one evaluation pass."""
    current = SessionMetricsSerializer()
    previous = SessionMetricsSerializer(required=False, allow_null=True)
    baseline = SessionMetricsSerializer(required=False, allow_null=True)
    history = SessionMetricsSerializer(many=True, required=False, allow_null=True)

    def create(self, validated_data):
        def snapshot(data):
            return SessionMetrics.from_dict(data) if data else None

        history = validated_data.get("history")
        return EvaluationContext(
            current=snapshot(validated_data["current"]),
            previous=snapshot(validated_data.get("previous")),
            baseline=snapshot(validated_data.get("baseline")),
            history=[snapshot(s) for s in history] if history is not None else None,
        )


class ExpressionRequestSerializer(serializers.Serializer):
    """One expression to evaluate within a batch."""
    TYPE_CHOICES = ("metric", "formula", "unit")

    key = serializers.CharField(required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=TYPE_CHOICES, default="metric")
    expression = serializers.CharField(allow_blank=True, trim_whitespace=False)
    targetMetric = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    unit = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class EvaluateRequestSerializer(serializers.Serializer):
    """Serializer for a batch evaluation request."""
    context = EvaluationContextSerializer()
    expressions = ExpressionRequestSerializer(many=True)

    def validate_expressions(self, value):
        """Reject empty batches and batches above MAX_BATCH_SIZE."""
        if not value:
            raise serializers.ValidationError("At least one expression is required")
        max_size = engine_setting("MAX_BATCH_SIZE")
        if len(value) > max_size:
            raise serializers.ValidationError(
                f"At most {max_size} expressions can be evaluated per request"
            )
        return value

    def build_context(self):
        context_serializer = self.fields["context"]
        return context_serializer.create(self.validated_data["context"])


class FormulaValidateSerializer(serializers.Serializer):
    formula = serializers.CharField(allow_blank=True, trim_whitespace=False)


class EvaluatedValueSerializer(serializers.Serializer):
    """Serializer for evaluation results."""
    key = serializers.CharField(required=False)
    value = serializers.FloatField()
    formatted = serializers.CharField()
    success = serializers.BooleanField()
    error = serializers.CharField(required=False)
    unit = serializers.CharField(required=False)
