"""
Public evaluation API for metric paths and formulas.

These functions are the only surface the report and rendering layers call.
None of them raise on bad input: failures come back as an EvaluatedValue
with ``success=False``.
"""
import logging
import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Dict, Iterable, List, Optional

from .conf import engine_setting
from .dsl import Tokenizer, Parser, Evaluator, FormulaError
from .registry import (
    METRIC_REGISTRY, METRIC_GROUPS, METRIC_TAG_MAP, VALID_METRIC_TAGS, DIRECT_PROPERTIES,
    OPI_UNIT, AveragedMetric, is_metric_tag,
)
from .snapshots import EvaluationContext, SessionMetrics, resolve_metric_value
from .values import EvaluatedValue, ResolvedMetric

logger = logging.getLogger(__name__)

METRIC_PATH_PATTERN = re.compile(r"(leftLeg|rightLeg|bilateral)\.(\w+)|opiScore", re.ASCII)

# Decimal places used when a value is shown in a given unit
UNIT_DECIMALS = {
    "%": 1,
    "pts": 1,
    "°": 1,
    "°/s": 0,
    "°/s²": 0,
    "°/s³": 0,
    "ms": 0,
    "": 2,
}

__all__ = [
    "evaluate_metric", "evaluate_formula", "resolve_metric_value", "resolve_metric_with_unit",
    "evaluate_expressions", "validate_formula", "extract_metric_paths", "is_valid_metric_path",
    "get_metric_unit", "format_value", "to_fixed",
]


def to_fixed(value: float, digits: int = 1) -> str:
    """
    Fixed-point formatting with half-up rounding of the exact binary value.

    Matches how the dashboard front end prints numbers, so 0.25 becomes
    "0.3" and -0.0 becomes "0.0".
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        value = 0.0

    quantum = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        ctx.prec = 400
        return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def format_value(value: float, unit: str) -> str:
    """
    Format a value with its unit suffix.

    Percentages and OPI points carry an explicit sign; angular rates and
    milliseconds are shown without decimals; unitless values with two.
    """
    digits = UNIT_DECIMALS.get(unit, 1)
    text = to_fixed(value, digits)
    if unit in ("%", OPI_UNIT):
        return f"{'+' if value >= 0 else ''}{text}{unit}"
    return f"{text}{unit}"


def format_percentage(value: float) -> str:
    return f"{'+' if value >= 0 else ''}{to_fixed(value, 1)}%"


def get_metric_unit(path: str) -> str:
    """Unit of a metric path from the registry; empty when unknown."""
    if path == "opiScore":
        return OPI_UNIT
    if not isinstance(path, str):
        return ""

    parts = path.split(".")
    if len(parts) != 2:
        return ""

    config = METRIC_REGISTRY.get(parts[1])
    return config.unit if config else ""


def is_valid_metric_path(path: str) -> bool:
    """Check a path against the known groups and the metric registry."""
    if path in DIRECT_PROPERTIES:
        return True
    if not isinstance(path, str):
        return False

    parts = path.split(".")
    if len(parts) != 2:
        return False

    prefix, metric = parts
    return prefix in METRIC_GROUPS and metric in METRIC_REGISTRY


def extract_metric_paths(formula: str) -> List[str]:
    """All metric paths mentioned in a formula, in order of appearance."""
    return [match.group(0) for match in METRIC_PATH_PATTERN.finditer(formula or "")]


def validate_formula(formula: str, strict: Optional[bool] = None) -> Dict[str, Any]:
    """
    Check the metric paths of a formula without evaluating it.

    Args:
        formula: Formula expression
        strict: Reject characters the tokenizer would skip; defaults to the
            STRICT_TOKENIZER setting

    Returns:
        Dict with ``valid`` and a list of ``errors``
    """
    if strict is None:
        strict = engine_setting("STRICT_TOKENIZER")

    errors = [
        f"Invalid metric path: {path}"
        for path in extract_metric_paths(formula)
        if not is_valid_metric_path(path)
    ]

    try:
        Tokenizer(formula, strict=strict).generate_tokens()
    except FormulaError as e:
        errors.append(f"Tokenization error: {e}")

    return {"valid": not errors, "errors": errors}


def evaluate_metric(expression: str, context: EvaluationContext) -> EvaluatedValue:
    """
    Evaluate a plain metric path against the current session.

    Args:
        expression: Metric path such as "leftLeg.peakFlexion" or "opiScore"
        context: Evaluation context; only ``current`` is read

    Returns:
        EvaluatedValue with the value formatted to one decimal
    """
    value = resolve_metric_value(expression, context.current)
    if value is None:
        return EvaluatedValue.failure(f"Invalid path: {expression}")
    return EvaluatedValue(value, to_fixed(value, 1), True)


def evaluate_formula(
    formula: str,
    context: EvaluationContext,
    target_metric: Optional[str] = None,
    strict: Optional[bool] = None,
) -> EvaluatedValue:
    """
    Evaluate a formula expression with the safe DSL.

    Supported:
    - Arithmetic: +, -, *, /, % and unary minus; division or remainder by
      zero yields 0
    - Metric paths: leftLeg.peakFlexion, bilateral.romAsymmetry, ...
    - Context variables: current, previous, baseline, average, min, max
      (relative to ``target_metric``)
    - Functions: abs, min, max, round, floor, ceil, sqrt, pow

    Examples:
    - "current - previous"
    - "(current - baseline) / baseline * 100"
    - "max(leftLeg.peakFlexion, rightLeg.peakFlexion)"

    Args:
        formula: Formula expression
        context: Evaluation context
        target_metric: Metric path the context variables refer to
        strict: Reject unknown characters instead of skipping them;
            defaults to the STRICT_TOKENIZER setting

    Returns:
        EvaluatedValue formatted as a signed percentage, or a failure
    """
    if strict is None:
        strict = engine_setting("STRICT_TOKENIZER")

    try:
        tokens = Tokenizer(formula, strict=strict).generate_tokens()
        ast = Parser(tokens).parse()
        value = Evaluator(context, target_metric).eval(ast)
    except Exception as e:
        logger.debug(f"Formula evaluation error: {str(e)} for formula: {formula}")
        return EvaluatedValue.failure(str(e) or type(e).__name__, formatted="Error")

    if not math.isfinite(value):
        return EvaluatedValue.failure("Result is not finite")

    # Always a percentage, whatever the formula computes
    return EvaluatedValue(value, format_percentage(value), True)


def resolve_metric_with_unit(
    metric: str,
    metrics: SessionMetrics,
    unit: Optional[str] = None,
) -> ResolvedMetric:
    """
    Resolve a metric path or semantic tag together with its display unit.

    Args:
        metric: Metric path ("leftLeg.peakFlexion") or tag ("<LEFT_PEAK_FLEXION>")
        metrics: Session snapshot to read from
        unit: Unit to report instead of the one derived from the metric

    Returns:
        ResolvedMetric; ``formatted`` holds the number only
    """
    target = metric
    if is_metric_tag(metric):
        target = METRIC_TAG_MAP.get(metric)
        if target is None:
            if metric in VALID_METRIC_TAGS:
                error = f"No session field for metric tag: {metric}"
            else:
                error = f"Unknown metric tag: {metric}"
            return ResolvedMetric.failure(error, unit=unit or "")

    if isinstance(target, AveragedMetric):
        derived_unit = get_metric_unit(target.paths[0])
        values = [resolve_metric_value(path, metrics) for path in target.paths]
        value = None if None in values else sum(values) / len(values)
    else:
        derived_unit = get_metric_unit(target)
        value = resolve_metric_value(target, metrics)

    unit = derived_unit if unit is None else unit
    if value is None:
        return ResolvedMetric.failure(f"Invalid path: {metric}", unit=unit)
    return ResolvedMetric(value, to_fixed(value, UNIT_DECIMALS.get(unit, 1)), True, unit=unit)


def evaluate_expressions(context: EvaluationContext, requests: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Evaluate a batch of expressions against one context.

    Each request is a dict with ``type`` ("metric", "formula" or "unit"),
    ``expression`` and optionally ``key``, ``targetMetric`` and ``unit``.

    Returns:
        One result dict per request, in request order
    """
    results = []
    for request in requests:
        kind = request.get("type", "metric")
        expression = request.get("expression", "")

        if kind == "formula":
            result = evaluate_formula(expression, context, request.get("targetMetric"))
        elif kind == "unit":
            result = resolve_metric_with_unit(expression, context.current, request.get("unit"))
        else:
            result = evaluate_metric(expression, context)

        data = result.to_dict()
        data["key"] = request.get("key") or expression
        results.append(data)

    failed = sum(1 for r in results if not r["success"])
    logger.debug(f"Evaluated {len(results)} expressions, {failed} failed")
    return results
