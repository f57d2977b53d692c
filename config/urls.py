from django.urls import include, path


urlpatterns = [
    path("api/horus/", include("horus.urls")),
]
