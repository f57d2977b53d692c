class FormulaError(Exception):
    """Base class for errors raised while evaluating a formula."""


class ParseError(FormulaError):
    """Malformed token sequence, unknown name or unresolvable reference."""
