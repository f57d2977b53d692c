import math
from types import MappingProxyType


def _arg(args, index):
    """Missing arguments evaluate to NaN instead of raising."""
    return float(args[index]) if len(args) > index else math.nan


def _integral(rounder):
    def apply(*args):
        x = _arg(args, 0)
        if not math.isfinite(x):
            return x
        return float(rounder(x))
    return apply


def _round_half_up(x):
    return math.floor(x + 0.5)


def _sqrt(*args):
    x = _arg(args, 0)
    if math.isnan(x) or x < 0:
        return math.nan
    return math.sqrt(x)


def _pow(*args):
    base, exponent = _arg(args, 0), _arg(args, 1)
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf
    except ValueError:
        # Negative base with a fractional exponent, or 0 to a negative power
        if base == 0:
            return math.inf
        return math.nan


def _min(*args):
    values = [float(a) for a in args]
    if any(math.isnan(v) for v in values):
        return math.nan
    return min(values) if values else math.inf


def _max(*args):
    values = [float(a) for a in args]
    if any(math.isnan(v) for v in values):
        return math.nan
    return max(values) if values else -math.inf


ALLOWED_FUNCTIONS = MappingProxyType({
    "abs": lambda *args: abs(_arg(args, 0)),
    "min": _min,
    "max": _max,
    "round": _integral(_round_half_up),
    "floor": _integral(math.floor),
    "ceil": _integral(math.ceil),
    "sqrt": _sqrt,
    "pow": _pow,
})


def get_function(name):
    """Case-insensitive whitelist lookup; None for anything not allowed."""
    return ALLOWED_FUNCTIONS.get(name.lower())
