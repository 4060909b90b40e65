from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'purchases'

router = DefaultRouter()
router.register(r'', views.PurchaseViewSet, basename='purchase')

urlpatterns = [
    # GET/POST /api/purchases/
    # GET/PUT/PATCH/DELETE /api/purchases/{id}/
    path('', include(router.urls)),
]
