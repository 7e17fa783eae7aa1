from django.urls import path

from .views import MyPermissionsView, PermissionMatrixView

urlpatterns = [
    path("rbac/me/", MyPermissionsView.as_view(), name="rbac-me"),
    path("rbac/matrix/", PermissionMatrixView.as_view(), name="rbac-matrix"),
]
