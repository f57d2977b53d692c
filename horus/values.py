from typing import Optional


class EvaluatedValue:
    """Result of evaluating a metric path or formula."""

    def __init__(self, value: float, formatted: str, success: bool, error: Optional[str] = None):
        self.value = value
        self.formatted = formatted
        self.success = success
        self.error = error

    @classmethod
    def failure(cls, error: str, formatted: str = "N/A", **extra):
        return cls(0, formatted, False, error, **extra)

    def to_dict(self) -> dict:
        data = {"value": self.value, "formatted": self.formatted, "success": self.success}
        if self.error is not None:
            data["error"] = self.error
        return data

    def __eq__(self, other):
        if not isinstance(other, EvaluatedValue):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{type(self).__name__}({self.to_dict()!r})"


class ResolvedMetric(EvaluatedValue):
    """An EvaluatedValue carrying the unit the value is expressed in."""

    def __init__(self, value: float, formatted: str, success: bool, error: Optional[str] = None, unit: str = ""):
        super().__init__(value, formatted, success, error)
        self.unit = unit

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["unit"] = self.unit
        return data
