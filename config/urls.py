from django.urls import include, path, re_path

from api.http import route_not_found

urlpatterns = [
    path("", include("api.urls")),
    # Anything else gets a JSON 404
    re_path(r"^.*$", route_not_found),
]
