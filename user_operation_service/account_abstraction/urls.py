from django.urls import path

from . import views

app_name = "account_abstraction"

urlpatterns = [
    path(
        "user-operations/hash/",
        views.UserOperationHashView.as_view(),
        name="user-operation-hash",
    ),
]
