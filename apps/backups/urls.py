from django.urls import path
from . import views

app_name = 'backups'

urlpatterns = [
    path('create/', views.backup_create, name='create'),
    path('restore/', views.backup_restore, name='restore'),
    path('history/', views.backup_history_list, name='history'),
]
