import logging

import pytest
from rest_framework.exceptions import ValidationError

from horus.tasks import evaluate_report_expressions


def test_report_expressions_are_evaluated(payload_factory, caplog):
    caplog.set_level(logging.INFO, logger="horus.tasks")
    context = {
        "current": payload_factory(),
        "baseline": payload_factory("s-first", 1000, peakFlexion=25.0),
    }
    expressions = [
        {"key": "vs-baseline", "type": "formula", "expression": "(current - baseline) / baseline * 100",
         "targetMetric": "leftLeg.peakFlexion"},
        {"key": "opi", "type": "unit", "expression": "<OPI_SCORE>"},
    ]

    results = evaluate_report_expressions(context, expressions)

    assert results[0]["value"] == 100.0
    assert results[0]["formatted"] == "+100.0%"
    assert results[1] == {"key": "opi", "value": 72.5, "formatted": "72.5", "success": True, "unit": "pts"}
    assert "Evaluated 2 report expressions for session s-current, 0 failed" in caplog.text


def test_invalid_payload_is_rejected(caplog):
    with pytest.raises(ValidationError):
        evaluate_report_expressions({"previous": None}, [{"expression": "leftLeg.peakFlexion"}])
    assert "Rejected report evaluation payload" in caplog.text
