from django.conf import settings
from django.http import HttpResponse
from django.urls import include, path
from django.views import defaults as default_views

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

swagger_urlpatterns = [
    path(
        "",
        SpectacularSwaggerView.as_view(url_name="schema-json"),
        name="schema-swagger-ui",
    ),
    path(r"schema/", SpectacularAPIView.as_view(), name="schema-json"),
    path(
        "redoc/",
        SpectacularRedocView.as_view(url_name="schema-redoc"),
        name="schema-redoc",
    ),
]

urlpatterns_v1 = [
    path(
        "",
        include(
            "user_operation_service.account_abstraction.urls",
            namespace="account_abstraction",
        ),
    ),
]

urlpatterns = swagger_urlpatterns + [
    path("api/v1/", include((urlpatterns_v1, "v1"))),
    path("check/", lambda request: HttpResponse("Ok"), name="check"),
]

if settings.DEBUG:
    # This allows the error pages to be debugged during development, just visit
    # these url in browser to see how these error pages look like.
    urlpatterns += [
        path(
            "400/",
            default_views.bad_request,
            kwargs={"exception": Exception("Bad Request!")},
        ),
        path(
            "404/",
            default_views.page_not_found,
            kwargs={"exception": Exception("Page not Found")},
        ),
        path("500/", default_views.server_error),
    ]
