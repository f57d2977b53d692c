"""
Registry of the dashboard metrics and the semantic tags that refer to them.
"""
from types import MappingProxyType

from django.db import models


class MetricDomain(models.TextChoices):
    RANGE = "range", "Range"
    SYMMETRY = "symmetry", "Symmetry"
    POWER = "power", "Power"
    CONTROL = "control", "Control"
    TIMING = "timing", "Timing"


class MetricDirection(models.TextChoices):
    HIGHER_BETTER = "higherBetter", "Higher is better"
    LOWER_BETTER = "lowerBetter", "Lower is better"


class MetricScope(models.TextChoices):
    PER_LEG = "perLeg", "Per leg"
    BILATERAL = "bilateral", "Bilateral"


class MetricConfig:
    def __init__(self, name, display_name, domain, direction, scope, unit, good_threshold, poor_threshold):
        self.name = name
        self.display_name = display_name
        self.domain = domain
        self.direction = direction
        self.scope = scope
        self.unit = unit
        self.good_threshold = good_threshold
        self.poor_threshold = poor_threshold

    def __repr__(self):
        return f"MetricConfig({self.name!r}, unit={self.unit!r})"


def _metric(name, display_name, domain, direction, scope, unit, good, poor):
    return name, MetricConfig(name, display_name, domain, direction, scope, unit, good, poor)


_HB, _LB = MetricDirection.HIGHER_BETTER, MetricDirection.LOWER_BETTER
_LEG, _BI = MetricScope.PER_LEG, MetricScope.BILATERAL

METRIC_REGISTRY = MappingProxyType(dict([
    # Range
    _metric("overallMaxRom", "Maximum ROM", MetricDomain.RANGE, _HB, _LEG, "°", 120, 90),
    _metric("averageRom", "Average ROM", MetricDomain.RANGE, _HB, _LEG, "°", 100, 70),
    _metric("peakFlexion", "Peak Flexion", MetricDomain.RANGE, _HB, _LEG, "°", 125, 95),
    _metric("peakExtension", "Peak Extension", MetricDomain.RANGE, _LB, _LEG, "°", 5, 15),
    # Symmetry
    _metric("romAsymmetry", "ROM Asymmetry", MetricDomain.SYMMETRY, _LB, _BI, "%", 5, 15),
    _metric("velocityAsymmetry", "Velocity Asymmetry", MetricDomain.SYMMETRY, _LB, _BI, "%", 8, 20),
    _metric("crossCorrelation", "Movement Synchronization", MetricDomain.SYMMETRY, _HB, _BI, "", 0.95, 0.75),
    _metric("realAsymmetryAvg", "True Asymmetry", MetricDomain.SYMMETRY, _LB, _BI, "°", 5, 20),
    _metric("netGlobalAsymmetry", "Net Global Asymmetry", MetricDomain.SYMMETRY, _LB, _BI, "%", 8, 20),
    # Power
    _metric("peakAngularVelocity", "Peak Velocity", MetricDomain.POWER, _HB, _LEG, "°/s", 400, 200),
    _metric("explosivenessConcentric", "Concentric Power", MetricDomain.POWER, _HB, _LEG, "°/s²", 500, 200),
    _metric("explosivenessLoading", "Loading Power", MetricDomain.POWER, _HB, _LEG, "°/s²", 500, 200),
    # Control
    _metric("rmsJerk", "Movement Smoothness", MetricDomain.CONTROL, _LB, _LEG, "°/s³", 300, 800),
    _metric("romCoV", "Movement Consistency", MetricDomain.CONTROL, _LB, _LEG, "%", 8, 20),
    # Timing
    _metric("phaseShift", "Phase Offset", MetricDomain.TIMING, _LB, _BI, "°", 10, 30),
    _metric("temporalLag", "Timing Delay", MetricDomain.TIMING, _LB, _BI, "ms", 30, 80),
    _metric("maxFlexionTimingDiff", "Peak Timing Difference", MetricDomain.TIMING, _LB, _BI, "ms", 50, 150),
]))

METRIC_GROUPS = ("leftLeg", "rightLeg", "bilateral")

# Top-level snapshot properties accepted as metric paths
DIRECT_PROPERTIES = ("opiScore", "opiGrade", "movementType")

OPI_UNIT = "pts"


class AveragedMetric:
    """A tag resolving to the mean of the left and right leg values."""

    def __init__(self, field):
        self.field = field

    @property
    def paths(self):
        return (f"leftLeg.{self.field}", f"rightLeg.{self.field}")


_PER_LEG_TAGS = {
    "PEAK_FLEXION": "peakFlexion",
    "PEAK_EXTENSION": "peakExtension",
    "AVG_ROM": "averageRom",
    "MAX_ROM": "overallMaxRom",
    "VELOCITY": "peakAngularVelocity",
    "POWER": "explosivenessConcentric",
    "LOADING_POWER": "explosivenessLoading",
    "JERK": "rmsJerk",
    "ROM_COV": "romCoV",
}


def _build_tag_map():
    tags = {"<OPI_SCORE>": "opiScore"}
    for suffix, field in _PER_LEG_TAGS.items():
        tags[f"<LEFT_{suffix}>"] = f"leftLeg.{field}"
        tags[f"<RIGHT_{suffix}>"] = f"rightLeg.{field}"
    for suffix, field in _PER_LEG_TAGS.items():
        # The averaged form of <LEFT_AVG_ROM> is <AVG_ROM>
        name = "ROM" if suffix == "AVG_ROM" else suffix
        tags[f"<AVG_{name}>"] = AveragedMetric(field)
    tags.update({
        "<ROM_ASYMMETRY>": "bilateral.romAsymmetry",
        "<VELOCITY_ASYMMETRY>": "bilateral.velocityAsymmetry",
        "<CROSS_CORRELATION>": "bilateral.crossCorrelation",
        "<NET_ASYMMETRY>": "bilateral.netGlobalAsymmetry",
        "<REAL_ASYMMETRY>": "bilateral.realAsymmetryAvg",
        "<PHASE_SHIFT>": "bilateral.phaseShift",
        "<TEMPORAL_LAG>": "bilateral.temporalLag",
        "<TIMING_DIFF>": "bilateral.maxFlexionTimingDiff",
    })
    return MappingProxyType(tags)


METRIC_TAG_MAP = _build_tag_map()

# Smoothness tags are valid in generated reports but have no snapshot field yet
UNMAPPED_TAGS = ("<SPARC>", "<LDLJ>", "<VELOCITY_PEAKS>")

VALID_METRIC_TAGS = tuple(METRIC_TAG_MAP) + UNMAPPED_TAGS


def is_metric_tag(value):
    return isinstance(value, str) and value.startswith("<") and value.endswith(">")
