from django.urls import path
from . import views

app_name = 'trash'

urlpatterns = [
    path('', views.trash_list, name='list'),
    path('empty/', views.trash_empty, name='empty'),
    path('<str:kind>/<uuid:record_id>/', views.trash_delete, name='delete'),
    path('<str:kind>/<uuid:record_id>/restore/', views.trash_restore, name='restore'),
]
