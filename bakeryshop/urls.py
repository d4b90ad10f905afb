"""
URL configuration for bakeryshop project.

- /admin/  Django admin (Jazzmin)
- /api/    bakery JSON API
"""
from django.contrib import admin
from django.http import HttpResponse
from django.urls import path, include


def home(request):
    return HttpResponse("Bakery POS API - backend running")


urlpatterns = [
    path("", home),
    path("admin/", admin.site.urls),
    path("api/", include("bakery.urls")),
]
