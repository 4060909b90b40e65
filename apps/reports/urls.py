from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    path('dashboard/', views.dashboard, name='dashboard'),

    # System admin
    path('system/statistics/', views.system_statistics, name='system-statistics'),
    path('system/apartments/', views.apartments, name='system-apartments'),

    # monthly, yearly, category, vendor, item
    path('<str:report_type>/', views.report, name='report'),
]
