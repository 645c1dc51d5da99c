from django.urls import path

from .views import LoginView, LogoutView, MeView, RefreshView, RegisterView

urlpatterns = [
    path("register/", RegisterView.as_view(), name="users-register"),
    path("login/", LoginView.as_view(), name="users-login"),
    path("refresh/", RefreshView.as_view(), name="users-refresh"),
    path("logout/", LogoutView.as_view(), name="users-logout"),
    path("me/", MeView.as_view(), name="users-me"),
]
