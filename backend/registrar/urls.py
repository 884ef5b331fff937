# backend/registrar/urls.py
from django.contrib import admin
from django.urls import include, path
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView


def health_view(request):
    return JsonResponse({"status": "ok"})


urlpatterns = [
    # HEALTH
    path("health/", health_view, name="health"),

    # DJANGO ADMIN
    path("admin/", admin.site.urls),

    # API DOCS
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # APP APIs
    path("api/users/", include(("users.urls", "accounts"), namespace="accounts")),
    path("api/", include([
        path("courses/", include("courses.urls")),
        path("preferences/", include("preferences.urls")),
        path("", include("allotment.urls")),
    ])),
]
