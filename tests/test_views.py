import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIRequestFactory, force_authenticate

from horus.views import FormulaValidateAPIView, MetricEvaluateAPIView


@pytest.fixture
def api_factory():
    return APIRequestFactory()


@pytest.fixture
def user():
    # Unsaved; the views never touch the database
    return User(username="analyst")


@pytest.fixture
def payload(payload_factory):
    return {
        "context": {
            "current": payload_factory(),
            "previous": payload_factory("s-previous", 2000, peakFlexion=40.0),
            "history": [
                payload_factory("s-1", 1000, peakFlexion=10.0),
                payload_factory("s-2", 2000, peakFlexion=20.0),
                payload_factory("s-3", 3000, peakFlexion=30.0),
            ],
        },
        "expressions": [
            {"key": "flexion", "expression": "leftLeg.peakFlexion"},
            {"key": "change", "type": "formula", "expression": "current - previous",
             "targetMetric": "leftLeg.peakFlexion"},
            {"key": "avg", "type": "formula", "expression": "average", "targetMetric": "leftLeg.peakFlexion"},
            {"key": "velocity", "type": "unit", "expression": "<LEFT_VELOCITY>"},
            {"key": "broken", "type": "formula", "expression": "foo(1)"},
        ],
    }


def post(api_factory, view, url, data, user=None):
    request = api_factory.post(url, data, format="json")
    if user is not None:
        force_authenticate(request, user=user)
    return view.as_view()(request)


def test_evaluate_returns_results_in_order(api_factory, user, payload):
    response = post(api_factory, MetricEvaluateAPIView, "/api/horus/evaluate/", payload, user)

    assert response.status_code == 200
    data = response.data["data"]
    assert [item["key"] for item in data] == ["flexion", "change", "avg", "velocity", "broken"]
    assert data[0] == {"key": "flexion", "value": 50.0, "formatted": "50.0", "success": True}
    assert data[1]["formatted"] == "+10.0%"
    assert data[2]["value"] == 20.0
    assert data[3] == {
        "key": "velocity", "value": 410.0, "formatted": "410", "success": True, "unit": "°/s",
    }
    assert data[4]["success"] is False
    assert data[4]["error"] == "Unknown function: foo"


def test_evaluate_requires_authentication(api_factory, payload):
    response = post(api_factory, MetricEvaluateAPIView, "/api/horus/evaluate/", payload)
    assert response.status_code == 401


def test_evaluate_rejects_missing_current_session(api_factory, user, payload):
    del payload["context"]["current"]
    response = post(api_factory, MetricEvaluateAPIView, "/api/horus/evaluate/", payload, user)
    assert response.status_code == 400
    assert "current" in response.data["context"]


def test_evaluate_rejects_unknown_movement_type(api_factory, user, payload):
    payload["context"]["current"]["movementType"] = "hopping"
    response = post(api_factory, MetricEvaluateAPIView, "/api/horus/evaluate/", payload, user)
    assert response.status_code == 400


def test_evaluate_rejects_empty_batch(api_factory, user, payload):
    payload["expressions"] = []
    response = post(api_factory, MetricEvaluateAPIView, "/api/horus/evaluate/", payload, user)
    assert response.status_code == 400
    assert "expressions" in response.data


def test_evaluate_enforces_batch_size(api_factory, user, payload, settings):
    settings.HORUS_ENGINE = {"MAX_BATCH_SIZE": 2}
    response = post(api_factory, MetricEvaluateAPIView, "/api/horus/evaluate/", payload, user)
    assert response.status_code == 400
    assert "At most 2 expressions" in str(response.data["expressions"])


def test_missing_metric_fields_fail_softly(api_factory, user, payload):
    payload["context"]["current"]["leftLeg"] = {"peakFlexion": 50.0}
    payload["expressions"] = [{"key": "rom", "expression": "leftLeg.averageRom"}]
    response = post(api_factory, MetricEvaluateAPIView, "/api/horus/evaluate/", payload, user)

    assert response.status_code == 200
    assert response.data["data"][0]["formatted"] == "N/A"
    assert response.data["data"][0]["success"] is False


def test_validate_formula_endpoint(api_factory, user):
    response = post(
        api_factory, FormulaValidateAPIView, "/api/horus/validate/",
        {"formula": "leftLeg.bogus - rightLeg.peakFlexion"}, user,
    )
    assert response.status_code == 200
    assert response.data["data"] == {"valid": False, "errors": ["Invalid metric path: leftLeg.bogus"]}
