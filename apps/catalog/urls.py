from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'catalog'

router = DefaultRouter()
router.register(r'vendors', views.VendorViewSet, basename='vendor')
router.register(r'items', views.ItemViewSet, basename='item')

urlpatterns = [
    # GET/POST /api/catalog/vendors/
    # GET/PUT/PATCH/DELETE /api/catalog/vendors/{id}/
    # GET/POST /api/catalog/items/
    # GET/PUT/PATCH/DELETE /api/catalog/items/{id}/
    # GET /api/catalog/items/categories/
    path('', include(router.urls)),
]
