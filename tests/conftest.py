import pytest

from horus.snapshots import (
    BilateralMetrics, EvaluationContext, PerLegMetrics, SessionMetrics,
)


LEFT_LEG = {
    "overallMaxRom": 118.0,
    "averageRom": 96.5,
    "peakFlexion": 50.0,
    "peakExtension": 4.2,
    "peakAngularVelocity": 410.0,
    "explosivenessConcentric": 520.0,
    "explosivenessLoading": 480.0,
    "rmsJerk": 310.0,
    "romCoV": 7.5,
}

RIGHT_LEG = {
    "overallMaxRom": 112.0,
    "averageRom": 92.0,
    "peakFlexion": 62.0,
    "peakExtension": 6.0,
    "peakAngularVelocity": 380.0,
    "explosivenessConcentric": 470.0,
    "explosivenessLoading": 455.0,
    "rmsJerk": 335.0,
    "romCoV": 9.1,
}

BILATERAL = {
    "romAsymmetry": 6.3,
    "velocityAsymmetry": 7.6,
    "crossCorrelation": 0.93,
    "realAsymmetryAvg": 4.1,
    "netGlobalAsymmetry": 9.8,
    "phaseShift": 12.0,
    "temporalLag": 28.0,
    "maxFlexionTimingDiff": 45.0,
}


def session_payload(session_id="s-current", recorded_at=3000, opi_score=72.5, **left_overrides):
    left = dict(LEFT_LEG, **left_overrides)
    return {
        "sessionId": session_id,
        "leftLeg": left,
        "rightLeg": dict(RIGHT_LEG),
        "bilateral": dict(BILATERAL),
        "opiScore": opi_score,
        "movementType": "bilateral",
        "recordedAt": recorded_at,
    }


def make_session(peak_flexion=50.0, session_id="s", recorded_at=0, opi_score=72.5):
    return SessionMetrics.from_dict(
        session_payload(session_id, recorded_at, opi_score, peakFlexion=peak_flexion)
    )


@pytest.fixture
def current():
    return make_session(50.0, "s-current", 3000)


@pytest.fixture
def previous():
    return make_session(40.0, "s-previous", 2000)


@pytest.fixture
def context(current, previous):
    return EvaluationContext(current=current, previous=previous)


@pytest.fixture
def history_context(current):
    history = [
        make_session(10.0, "s-1", 1000),
        make_session(20.0, "s-2", 2000),
        make_session(30.0, "s-3", 3000),
    ]
    return EvaluationContext(current=current, baseline=history[0], history=history)


@pytest.fixture
def sparse_session():
    """A snapshot with only a handful of fields recorded."""
    return SessionMetrics(
        left_leg=PerLegMetrics(peak_flexion=33.0),
        right_leg=PerLegMetrics(),
        bilateral=BilateralMetrics(),
    )


@pytest.fixture
def session_factory():
    return make_session


@pytest.fixture
def payload_factory():
    return session_payload
