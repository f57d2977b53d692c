import math

from ..snapshots import resolve_metric_value
from .ast_nodes import (
    NumberNode, MetricPathNode, ContextVariableNode,
    UnaryOpNode, BinaryOpNode, FunctionCallNode,
)
from .errors import ParseError
from .functions import get_function

CONTEXT_VARIABLES = ("current", "previous", "baseline", "average", "min", "max")


class ContextVariableResolver:
    """Resolves context variables for a target metric across sessions."""

    def __init__(self, context, target_metric=None):
        self.context = context
        self.target_metric = target_metric or None

    def resolve(self, name):
        if not self.target_metric:
            raise ParseError(f"Context variable '{name}' requires a target metric")
        if name not in CONTEXT_VARIABLES:
            raise ParseError(f"Unknown context variable: {name}")

        if name == "current":
            value = resolve_metric_value(self.target_metric, self.context.current)
            if value is None:
                raise ParseError(f"Cannot resolve {self.target_metric}")
            return value
        if name == "previous":
            return self._from_session(self.context.previous)
        if name == "baseline":
            return self._from_session(self.context.baseline)
        if name == "average":
            return self._aggregate(lambda values: sum(values) / len(values))
        if name == "min":
            return self._aggregate(min)
        return self._aggregate(max)

    def _from_session(self, session):
        if session is None:
            return 0
        value = resolve_metric_value(self.target_metric, session)
        return 0 if value is None else value

    def _aggregate(self, reduce):
        history = self.context.history
        if not history:
            value = resolve_metric_value(self.target_metric, self.context.current)
            return 0 if value is None else value

        values = [
            value for value in (resolve_metric_value(self.target_metric, s) for s in history)
            if value is not None
        ]
        if not values:
            return 0
        return reduce(values)


class Evaluator:
    def __init__(self, context, target_metric=None):
        self.context = context
        self.variables = ContextVariableResolver(context, target_metric)

    def eval(self, node):
        if isinstance(node, NumberNode):
            return node.value

        if isinstance(node, MetricPathNode):
            # Metric paths always read the current session
            value = resolve_metric_value(node.path, self.context.current)
            if value is None:
                raise ParseError(f"Invalid metric path: {node.path}")
            return value

        if isinstance(node, ContextVariableNode):
            return self.variables.resolve(node.name)

        if isinstance(node, FunctionCallNode):
            func = get_function(node.name)
            if func is None:
                raise ParseError(f"Unknown function: {node.name}")
            args = [self.eval(a) for a in node.args]
            return func(*args)

        if isinstance(node, UnaryOpNode):
            return -self.eval(node.operand)

        if isinstance(node, BinaryOpNode):
            left = self.eval(node.left)
            right = self.eval(node.right)

            op = node.op
            if op == "+": return left + right
            if op == "-": return left - right
            if op == "*": return left * right
            if op == "/": return left / right if right != 0 else 0
            if op == "%": return _remainder(left, right) if right != 0 else 0

            raise ParseError(f"Unsupported operator {op}")

        raise ParseError("Invalid AST node")


def _remainder(left, right):
    """Truncated remainder; the sign follows the dividend."""
    if math.isinf(left) or math.isnan(left) or math.isnan(right):
        return math.nan
    return math.fmod(left, right)
