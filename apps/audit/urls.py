from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'audit'

router = DefaultRouter()
router.register(r'', views.AuditLogViewSet, basename='entry')

urlpatterns = [
    # GET /api/audit/
    # GET /api/audit/{id}/
    path('', include(router.urls)),
]
