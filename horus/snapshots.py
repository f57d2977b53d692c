"""
Session metrics snapshots and the multi-session evaluation context.

Snapshots are built by the caller (usually from a validated API payload) and
are only ever read by the expression engine.
"""
from typing import Dict, Iterable, Optional


class MetricGroup:
    """
    A fixed set of named numeric fields.

    FIELDS maps the camelCase name used in metric paths to the attribute
    holding the value. Lookups outside FIELDS never reach getattr.
    """

    FIELDS: Dict[str, str] = {}

    def __init__(self, **values):
        unknown = set(values) - set(self.FIELDS.values())
        if unknown:
            raise TypeError(f"Unknown {type(self).__name__} fields: {', '.join(sorted(unknown))}")
        for attr in self.FIELDS.values():
            setattr(self, attr, values.get(attr))

    @classmethod
    def from_dict(cls, data: Optional[dict]):
        data = data or {}
        return cls(**{attr: data.get(name) for name, attr in cls.FIELDS.items()})

    def get(self, name: str) -> Optional[float]:
        attr = self.FIELDS.get(name)
        if attr is None:
            return None
        return getattr(self, attr)

    def to_dict(self) -> dict:
        return {name: getattr(self, attr) for name, attr in self.FIELDS.items()}

    def __repr__(self):
        return f"{type(self).__name__}({self.to_dict()!r})"


class PerLegMetrics(MetricGroup):
    FIELDS = {
        "overallMaxRom": "overall_max_rom",
        "averageRom": "average_rom",
        "peakFlexion": "peak_flexion",
        "peakExtension": "peak_extension",
        "peakAngularVelocity": "peak_angular_velocity",
        "explosivenessConcentric": "explosiveness_concentric",
        "explosivenessLoading": "explosiveness_loading",
        "rmsJerk": "rms_jerk",
        "romCoV": "rom_cov",
    }


class BilateralMetrics(MetricGroup):
    FIELDS = {
        "romAsymmetry": "rom_asymmetry",
        "velocityAsymmetry": "velocity_asymmetry",
        "crossCorrelation": "cross_correlation",
        "realAsymmetryAvg": "real_asymmetry_avg",
        "netGlobalAsymmetry": "net_global_asymmetry",
        "phaseShift": "phase_shift",
        "temporalLag": "temporal_lag",
        "maxFlexionTimingDiff": "max_flexion_timing_diff",
    }


class MovementType:
    BILATERAL = "bilateral"
    UNILATERAL = "unilateral"

    choices = (BILATERAL, UNILATERAL)


class SessionMetrics:
    """Computed measurements of one recording session."""

    def __init__(
        self,
        left_leg: PerLegMetrics,
        right_leg: PerLegMetrics,
        bilateral: BilateralMetrics,
        movement_type: str = MovementType.BILATERAL,
        recorded_at: int = 0,
        session_id: str = "",
        opi_score: Optional[float] = None,
        opi_grade: Optional[str] = None,
    ):
        self.session_id = session_id
        self.left_leg = left_leg
        self.right_leg = right_leg
        self.bilateral = bilateral
        self.opi_score = opi_score
        self.opi_grade = opi_grade
        self.movement_type = movement_type
        self.recorded_at = recorded_at

    @classmethod
    def from_dict(cls, data: dict) -> "SessionMetrics":
        """Build a snapshot from a camelCase payload."""
        return cls(
            session_id=data.get("sessionId", ""),
            left_leg=PerLegMetrics.from_dict(data.get("leftLeg")),
            right_leg=PerLegMetrics.from_dict(data.get("rightLeg")),
            bilateral=BilateralMetrics.from_dict(data.get("bilateral")),
            opi_score=data.get("opiScore"),
            opi_grade=data.get("opiGrade"),
            movement_type=data.get("movementType", MovementType.BILATERAL),
            recorded_at=data.get("recordedAt", 0),
        )

    def group(self, name: str) -> Optional[MetricGroup]:
        if name == "leftLeg":
            return self.left_leg
        if name == "rightLeg":
            return self.right_leg
        if name == "bilateral":
            return self.bilateral
        return None

    def __repr__(self):
        return f"SessionMetrics(session_id={self.session_id!r}, recorded_at={self.recorded_at})"


class EvaluationContext:
    """
    Snapshots available to one evaluation pass.

    ``history`` is expected in ascending ``recorded_at`` order and is kept
    in the order given.
    """

    def __init__(
        self,
        current: SessionMetrics,
        previous: Optional[SessionMetrics] = None,
        baseline: Optional[SessionMetrics] = None,
        history: Optional[Iterable[SessionMetrics]] = None,
    ):
        self.current = current
        self.previous = previous
        self.baseline = baseline
        self.history = tuple(history) if history is not None else None


def resolve_metric_value(path: Optional[str], metrics: SessionMetrics) -> Optional[float]:
    """
    Resolve a metric path such as ``leftLeg.peakFlexion`` or ``opiScore``.

    Returns None for anything that does not name a known field; never raises.
    """
    if not path or not isinstance(path, str):
        return None
    if path == "opiScore":
        return metrics.opi_score

    parts = path.split(".")
    if len(parts) != 2:
        return None

    prefix, metric = parts
    group = metrics.group(prefix)
    if group is None:
        return None
    return group.get(metric)
