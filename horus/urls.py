from django.urls import path
from .views import MetricEvaluateAPIView, FormulaValidateAPIView


urlpatterns = [
    path("evaluate/", MetricEvaluateAPIView.as_view(), name="horus-evaluate"),
    path("validate/", FormulaValidateAPIView.as_view(), name="horus-validate"),
]
